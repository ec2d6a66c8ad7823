"""cached_marker: cached network images for map markers."""

from cached_marker.cache.keys import derive_cache_key
from cached_marker.cache.manager import CacheManager
from cached_marker.core import CachedMarker, from_network
from cached_marker.errors.exceptions import (
    CacheError,
    CachedMarkerError,
    FetchError,
    ProcessingError,
)
from cached_marker.marker import MarkerDescriptor, MarkerFactory
from cached_marker.resolver import CacheResolver

__all__ = [
    "CacheError",
    "CacheManager",
    "CacheResolver",
    "CachedMarker",
    "CachedMarkerError",
    "FetchError",
    "MarkerDescriptor",
    "MarkerFactory",
    "ProcessingError",
    "derive_cache_key",
    "from_network",
]
