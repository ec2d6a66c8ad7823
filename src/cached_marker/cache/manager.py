"""Cache manager: owns the L1 (memory) and L2 (disk) tiers."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from cached_marker.cache.disk import DiskCache
from cached_marker.cache.memory import MemoryCache
from cached_marker.cache.stats import DEFAULT_TTL_SECONDS, CachedImage, CacheStats
from cached_marker.errors.exceptions import CacheError

logger = logging.getLogger(__name__)


class CacheManager:
    """Two-tier image cache: L1 in-memory → L2 on-disk (SQLite).

    Exposes each tier separately so callers can query them in order.
    A disk hit is promoted into memory; ``put`` writes both tiers.
    """

    def __init__(
        self,
        memory_max_mb: float = 50,
        disk_max_mb: float = 500,
        disk_path: Path | None = None,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        enabled: bool = True,
    ) -> None:
        self._enabled = enabled
        self._ttl_seconds = ttl_seconds
        self._l1 = MemoryCache(max_size_mb=memory_max_mb)
        self._l2 = DiskCache(db_path=disk_path, max_size_mb=disk_max_mb) if enabled else None
        self._stats = CacheStats()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def get_from_memory(self, key: str, record_stats: bool = True) -> CachedImage | None:
        if not self._enabled:
            return None
        image = self._l1.get(key)
        if image is not None and record_stats:
            self._stats.hits += 1
            self._stats.memory_hits += 1
        return image

    def get_from_disk(self, key: str, record_stats: bool = True) -> CachedImage | None:
        """Look up L2; a hit is promoted to L1.

        A miss here is a miss on both tiers. Pass ``record_stats=False`` for a
        repeat lookup that must not be counted again.
        """
        image = None
        if self._enabled and self._l2 is not None:
            with self._guard(key, "read"):
                image = self._l2.get(key)
            if image is not None:
                self._l1.set(key, image)

        if record_stats:
            if image is None:
                self._stats.misses += 1
            else:
                self._stats.hits += 1
                self._stats.disk_hits += 1
        return image

    def put(
        self,
        key: str,
        data: bytes | CachedImage,
        width: int = 0,
        height: int = 0,
        source_url: str = "",
    ) -> CachedImage:
        """Store in L1 and L2 and return the stored image."""
        if isinstance(data, CachedImage):
            image = data.model_copy(update={"key": key})
        else:
            image = CachedImage(
                key=key,
                data=data,
                width=width,
                height=height,
                source_url=source_url,
                ttl_seconds=self._ttl_seconds,
            )
        if not self._enabled:
            return image

        # L2 first so a failed write leaves both tiers untouched
        if self._l2:
            with self._guard(key, "write"):
                self._l2.set(key, image)
        self._l1.set(key, image)
        return image

    def empty_all(self) -> None:
        """Clear both tiers and reset statistics."""
        # L2 first, as in put: a failed clear leaves both tiers untouched
        if self._l2:
            with self._guard(None, "clear"):
                self._l2.clear()
        self._l1.clear()
        self._stats = CacheStats()

    def stats(self) -> CacheStats:
        """Return aggregate cache statistics."""
        l1_size = self._l1.size_mb
        l2_size = self._l2.size_mb if self._l2 else 0.0
        return CacheStats(
            entries=len(self._l1) + (self._l2.entry_count if self._l2 else 0),
            size_mb=l1_size + l2_size,
            hits=self._stats.hits,
            misses=self._stats.misses,
            memory_hits=self._stats.memory_hits,
            disk_hits=self._stats.disk_hits,
        )

    def close(self) -> None:
        if self._l2:
            self._l2.close()

    @contextmanager
    def _guard(self, key: str | None, operation: str) -> Iterator[None]:
        try:
            yield
        except sqlite3.Error as exc:
            logger.error("Disk cache %s failed for '%s': %s", operation, key, exc)
            raise CacheError(
                f"Disk cache {operation} failed: {exc}",
                key=key,
                operation=operation,
                original=exc,
            ) from exc
