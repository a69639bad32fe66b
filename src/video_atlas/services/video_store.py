"""Persistent store of enriched videos."""

from collections.abc import Callable, Generator, Sequence
from contextlib import contextmanager

from sqlalchemy import case, delete, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from video_atlas.db.models import VideoRecordModel, record_values
from video_atlas.db.session import session_scope
from video_atlas.domain.enums import SortOption
from video_atlas.domain.models import FilterOptions, Video
from video_atlas.errors import StoreError
from video_atlas.logging import get_logger
from video_atlas.utils.dates import now_millis

logger = get_logger(__name__)

ChangeListener = Callable[[], None]

_UPSERT_INSERTS = {
    "sqlite": sqlite_insert,
    "postgresql": pg_insert,
}


class VideoStore:
    """Table of enriched videos keyed by video id.

    Writes are whole-record replacements committed in one transaction, so
    readers never observe a partially written record. Listeners registered
    with :meth:`subscribe` are called after every committed change.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        clock: Callable[[], int] = now_millis,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock
        self._listeners: list[ChangeListener] = []

    @contextmanager
    def _session(self, operation: str) -> Generator[Session, None, None]:
        try:
            with session_scope(self._session_factory) as session:
                yield session
        except SQLAlchemyError as e:
            logger.error("video_store_error", operation=operation, error=str(e))
            raise StoreError(f"Video store {operation} failed: {e}") from e

    # =========================================================================
    # Writes
    # =========================================================================

    def upsert_videos(self, videos: Sequence[Video], cache_timestamp: int | None = None) -> int:
        """Insert or fully replace every video in a single transaction.

        Args:
            videos: Videos to store. Later duplicates of an id win.
            cache_timestamp: Ingestion time in epoch millis (defaults to now).

        Returns:
            Number of rows written.
        """
        if not videos:
            return 0

        timestamp = self._clock() if cache_timestamp is None else cache_timestamp
        rows = list({video.id: record_values(video, timestamp) for video in videos}.values())

        with self._session("upsert") as session:
            dialect = session.get_bind().dialect.name
            insert = _UPSERT_INSERTS.get(dialect)
            if insert is None:
                for row in rows:
                    session.merge(VideoRecordModel(**row))
            else:
                table = VideoRecordModel.__table__
                stmt = insert(table)
                stmt = stmt.on_conflict_do_update(
                    index_elements=[table.c.id],
                    set_={
                        column.name: stmt.excluded[column.name]
                        for column in table.columns
                        if column.name != "id"
                    },
                )
                session.execute(stmt, rows)

        logger.info("videos_upserted", count=len(rows), cache_timestamp=timestamp)
        self._notify()
        return len(rows)

    def delete_video(self, video_id: str) -> bool:
        """Delete a single video. Returns whether a row was removed."""
        with self._session("delete") as session:
            result = session.execute(delete(VideoRecordModel).where(VideoRecordModel.id == video_id))
            removed = result.rowcount > 0
        if removed:
            self._notify()
        return removed

    def delete_all(self) -> int:
        """Delete every video. Returns the number of rows removed."""
        with self._session("delete_all") as session:
            removed = session.execute(delete(VideoRecordModel)).rowcount
        if removed:
            self._notify()
        return removed

    def delete_older_than(self, threshold: int) -> int:
        """Delete videos cached strictly before ``threshold`` (epoch millis)."""
        with self._session("delete_older_than") as session:
            removed = session.execute(
                delete(VideoRecordModel).where(VideoRecordModel.cache_timestamp < threshold)
            ).rowcount
        logger.info("videos_expired", removed=removed, threshold=threshold)
        if removed:
            self._notify()
        return removed

    # =========================================================================
    # Reads
    # =========================================================================

    def get_video(self, video_id: str) -> Video | None:
        with self._session("get") as session:
            record = session.get(VideoRecordModel, video_id)
            return record.to_video() if record else None

    def get_videos_newer_than(self, threshold: int) -> list[Video]:
        """Videos cached strictly after ``threshold`` (epoch millis)."""
        with self._session("get_newer_than") as session:
            records = session.execute(
                select(VideoRecordModel)
                .where(VideoRecordModel.cache_timestamp > threshold)
                .order_by(VideoRecordModel.published_at.desc(), VideoRecordModel.id)
            ).scalars().all()
            return [record.to_video() for record in records]

    def count(self) -> int:
        with self._session("count") as session:
            return session.execute(select(func.count()).select_from(VideoRecordModel)).scalar_one()

    def distinct_channels(self) -> set[str]:
        with self._session("distinct_channels") as session:
            return set(
                session.execute(select(VideoRecordModel.channel_name).distinct()).scalars().all()
            )

    def distinct_countries(self) -> set[str]:
        """Distinct countries, excluding missing and blank values."""
        with self._session("distinct_countries") as session:
            countries = session.execute(
                select(VideoRecordModel.location_country)
                .where(VideoRecordModel.location_country.is_not(None))
                .where(VideoRecordModel.location_country != "")
                .distinct()
            ).scalars().all()
            return {country for country in countries if country.strip()}

    def list_videos(
        self,
        filter_options: FilterOptions | None = None,
        sort_option: SortOption = SortOption.PUBLICATION_DATE_NEWEST,
    ) -> list[Video]:
        """Filtered and sorted listing.

        Filters match exactly and combine with AND. Videos missing the sort
        key come last in either direction; ties fall back to id order. Dates
        compare as text, so they are expected in UTC ``Z`` form, which the
        pipeline writes.
        """
        filter_options = filter_options or FilterOptions()
        query = select(VideoRecordModel)
        if filter_options.channel_name is not None:
            query = query.where(VideoRecordModel.channel_name == filter_options.channel_name)
        if filter_options.country is not None:
            query = query.where(VideoRecordModel.location_country == filter_options.country)

        column = (
            VideoRecordModel.recording_date
            if sort_option.by_recording_date
            else VideoRecordModel.published_at
        )
        query = query.order_by(
            case((column.is_(None), 1), else_=0),
            column.desc() if sort_option.descending else column.asc(),
            VideoRecordModel.id,
        )

        with self._session("list") as session:
            records = session.execute(query).scalars().all()
            return [record.to_video() for record in records]

    # =========================================================================
    # Change notification
    # =========================================================================

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register ``listener`` for committed changes. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception as e:
                logger.warning("video_store_listener_failed", error=str(e))
