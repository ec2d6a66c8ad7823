"""Cache subsystem: two-tier (memory + disk) image cache keyed by URL and size."""

from cached_marker.cache.keys import derive_cache_key
from cached_marker.cache.manager import CacheManager
from cached_marker.cache.stats import CachedImage, CacheStats
from cached_marker.cache.tiers import CacheStore, DiskTier, MemoryTier

__all__ = [
    "CacheManager",
    "CacheStore",
    "CachedImage",
    "CacheStats",
    "DiskTier",
    "MemoryTier",
    "derive_cache_key",
]
