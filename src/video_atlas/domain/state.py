"""Outcome and UI state types returned across the cache and query boundary."""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from video_atlas.domain.models import Video

T = TypeVar("T")

UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a value or the exception that prevented producing one."""

    value: T | None = None
    error: Exception | None = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception) -> "Result[T]":
        return cls(error=error)

    @property
    def is_success(self) -> bool:
        return self.error is None

    def get_or_raise(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


@dataclass(frozen=True)
class Loading:
    """A fetch is in flight."""


@dataclass(frozen=True)
class Empty:
    """The fetch succeeded but matched no videos."""


@dataclass(frozen=True)
class Success:
    """Videos are available for display."""

    videos: list[Video] = field(default_factory=list)
    total_count: int = 0


@dataclass(frozen=True)
class Error:
    """The fetch failed."""

    message: str = UNKNOWN_ERROR_MESSAGE


VideoListState = Loading | Empty | Success | Error


def state_from_videos(videos: list[Video], total_count: int | None = None) -> VideoListState:
    """Map a successful video list to ``Empty`` or ``Success``."""
    if not videos:
        return Empty()
    return Success(videos=videos, total_count=len(videos) if total_count is None else total_count)


def state_from_result(result: Result[list[Video]], total_count: int | None = None) -> VideoListState:
    """Map a cache outcome to exactly one list state."""
    if not result.is_success:
        return Error(message=str(result.error) or UNKNOWN_ERROR_MESSAGE)
    return state_from_videos(result.value or [], total_count)
