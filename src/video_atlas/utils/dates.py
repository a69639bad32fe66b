"""Timestamp helpers for publication dates and cache bookkeeping."""

import time
from datetime import UTC, datetime

from video_atlas.logging import get_logger

logger = get_logger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def now_millis() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def parse_published_date(value: str) -> datetime:
    """Parse an RFC 3339 timestamp such as ``2023-12-25T10:30:00Z``.

    Naive values are taken as UTC.

    Raises:
        ValueError: If the value is not a valid timestamp.
    """
    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def published_sort_key(value: str | None) -> datetime:
    """Sort key for publication dates; unparsable values sort as the epoch."""
    if not value:
        return EPOCH
    try:
        return parse_published_date(value)
    except ValueError:
        logger.warning("published_date_unparsable", value=value)
        return EPOCH


def format_date_for_display(value: str | None) -> str:
    """Render a timestamp as ``YYYY-MM-DD``, or return it unchanged if unparsable."""
    if not value or not value.strip():
        return ""
    try:
        return parse_published_date(value).strftime("%Y-%m-%d")
    except ValueError:
        return value


def normalize_timestamp(value: str | None) -> str | None:
    """Render a timestamp in UTC with a ``Z`` suffix so stored text sorts chronologically.

    ``2024-01-01T10:00:00+05:00`` becomes ``2024-01-01T05:00:00Z``. Empty and
    unparsable values are returned unchanged.
    """
    if not value or not value.strip():
        return value
    try:
        parsed = parse_published_date(value)
    except ValueError:
        return value
    return parsed.astimezone(UTC).isoformat().replace("+00:00", "Z")
