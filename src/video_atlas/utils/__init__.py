"""Shared helpers."""

from video_atlas.utils.async_utils import run_async
from video_atlas.utils.dates import (
    EPOCH,
    format_date_for_display,
    normalize_timestamp,
    now_millis,
    parse_published_date,
    published_sort_key,
)

__all__ = [
    "EPOCH",
    "format_date_for_display",
    "normalize_timestamp",
    "now_millis",
    "parse_published_date",
    "published_sort_key",
    "run_async",
]
