"""Domain models - pure Python classes independent of database and wire formats."""

from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class Place:
    """Human-readable name of a coordinate pair."""

    city: str | None = None
    country: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.city is None and self.country is None


@dataclass
class Video:
    """A channel video, enriched with tags and recording location when known."""

    id: str
    title: str
    channel_name: str
    channel_id: str
    published_at: str
    thumbnail_url: str = ""
    description: str = ""
    tags: list[str] = field(default_factory=list)
    location_city: str | None = None
    location_country: str | None = None
    location_latitude: float | None = None
    location_longitude: float | None = None
    recording_date: str | None = None

    def __post_init__(self) -> None:
        if (self.location_latitude is None) != (self.location_longitude is None):
            raise ValueError(
                f"Video {self.id}: latitude and longitude must be both set or both absent"
            )

    @property
    def has_coordinates(self) -> bool:
        return self.location_latitude is not None and self.location_longitude is not None

    def with_place(self, place: Place) -> "Video":
        """Return a copy carrying the resolved city and country."""
        return replace(self, location_city=place.city, location_country=place.country)


@dataclass(frozen=True)
class RecordingDetails:
    """Recording block of a detail response; coordinates are co-present or absent."""

    recording_date: str | None = None
    latitude: float | None = None
    longitude: float | None = None


@dataclass(frozen=True)
class VideoDetails:
    """Per-video metadata from the batched detail call."""

    id: str
    tags: list[str] | None = None
    recording: RecordingDetails | None = None


@dataclass(frozen=True)
class FilterOptions:
    """Constraints on the video list. ``None`` leaves a dimension unconstrained."""

    channel_name: str | None = None
    country: str | None = None


def merge_with_details(video: Video, details: VideoDetails | None) -> Video:
    """Overlay detail-phase tags and recording data onto a list-phase video.

    Tags are replaced only when the detail carries a non-empty list. The
    recording block, when present, replaces the recording date and the
    coordinates wholesale.
    """
    if details is None:
        return video

    merged = replace(video, tags=list(video.tags))
    if details.tags:
        merged = replace(merged, tags=list(details.tags))
    if details.recording is not None:
        merged = replace(
            merged,
            recording_date=details.recording.recording_date,
            location_latitude=details.recording.latitude,
            location_longitude=details.recording.longitude,
        )
    return merged
