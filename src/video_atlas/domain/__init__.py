"""Domain layer."""

from video_atlas.domain.enums import SortOption
from video_atlas.domain.models import (
    FilterOptions,
    Place,
    RecordingDetails,
    Video,
    VideoDetails,
    merge_with_details,
)
from video_atlas.domain.state import (
    Empty,
    Error,
    Loading,
    Result,
    Success,
    VideoListState,
)

__all__ = [
    "Empty",
    "Error",
    "FilterOptions",
    "Loading",
    "Place",
    "RecordingDetails",
    "Result",
    "SortOption",
    "Success",
    "Video",
    "VideoDetails",
    "VideoListState",
    "merge_with_details",
]
