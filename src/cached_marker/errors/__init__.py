"""Error handling: exception hierarchy for the resolution chain."""

from cached_marker.errors.exceptions import (
    CacheError,
    CachedMarkerError,
    FetchError,
    ProcessingError,
)

__all__ = [
    "CachedMarkerError",
    "FetchError",
    "ProcessingError",
    "CacheError",
]
