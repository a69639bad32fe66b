"""Exceptions shared across the acquisition, enrichment and storage layers."""


class VideoAtlasError(Exception):
    """Base class for all video atlas errors."""


class UpstreamError(VideoAtlasError):
    """Raised when an upstream request fails (transport, non-2xx, bad payload)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PipelineError(VideoAtlasError):
    """Raised when an enrichment run produces nothing usable."""


class StoreError(VideoAtlasError):
    """Raised when the local video store cannot complete an operation."""
