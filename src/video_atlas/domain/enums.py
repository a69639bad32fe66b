"""Domain enumerations."""

from enum import StrEnum


class SortOption(StrEnum):
    """Orderings offered by the video list."""

    PUBLICATION_DATE_NEWEST = "publication_date_newest"
    PUBLICATION_DATE_OLDEST = "publication_date_oldest"
    RECORDING_DATE_NEWEST = "recording_date_newest"
    RECORDING_DATE_OLDEST = "recording_date_oldest"

    @property
    def descending(self) -> bool:
        return self in (SortOption.PUBLICATION_DATE_NEWEST, SortOption.RECORDING_DATE_NEWEST)

    @property
    def by_recording_date(self) -> bool:
        return self in (SortOption.RECORDING_DATE_NEWEST, SortOption.RECORDING_DATE_OLDEST)
