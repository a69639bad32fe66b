"""SQLAlchemy ORM models."""

from typing import Any

from sqlalchemy import JSON, BigInteger, Float, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from video_atlas.domain.models import Video


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class VideoRecordModel(Base):
    """Enriched video plus the time it was cached."""

    __tablename__ = "videos"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    channel_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    channel_id: Mapped[str] = mapped_column(String(64), nullable=False)
    published_at: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    thumbnail_url: Mapped[str] = mapped_column(Text, nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # JSON array so tags containing commas survive
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    location_city: Mapped[str | None] = mapped_column(String(255), nullable=True)
    location_country: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    location_latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    location_longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    recording_date: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    cache_timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)

    def to_video(self) -> Video:
        return Video(
            id=self.id,
            title=self.title,
            channel_name=self.channel_name,
            channel_id=self.channel_id,
            published_at=self.published_at,
            thumbnail_url=self.thumbnail_url,
            description=self.description,
            tags=list(self.tags or []),
            location_city=self.location_city,
            location_country=self.location_country,
            location_latitude=self.location_latitude,
            location_longitude=self.location_longitude,
            recording_date=self.recording_date,
        )


def record_values(video: Video, cache_timestamp: int) -> dict[str, Any]:
    """Column values for a full-row upsert of ``video``."""
    return {
        "id": video.id,
        "title": video.title,
        "channel_name": video.channel_name,
        "channel_id": video.channel_id,
        "published_at": video.published_at,
        "thumbnail_url": video.thumbnail_url,
        "description": video.description,
        "tags": list(video.tags),
        "location_city": video.location_city,
        "location_country": video.location_country,
        "location_latitude": video.location_latitude,
        "location_longitude": video.location_longitude,
        "recording_date": video.recording_date,
        "cache_timestamp": cache_timestamp,
    }
