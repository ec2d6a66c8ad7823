"""L1 in-memory image cache, bounded by encoded image bytes."""

from __future__ import annotations

import logging
from collections import OrderedDict

from cached_marker.cache.stats import CachedImage

logger = logging.getLogger(__name__)

_DEFAULT_MAX_SIZE_MB = 50


class MemoryCache:
    """Least-recently-used images, evicted by ``CachedImage.size_bytes``.

    An image larger than the whole budget is not held in memory at all; it
    stays reachable through the disk tier.
    """

    def __init__(self, max_size_mb: float = _DEFAULT_MAX_SIZE_MB) -> None:
        self._images: OrderedDict[str, CachedImage] = OrderedDict()
        self._budget_bytes = int(max_size_mb * 1024 * 1024)
        self._used_bytes = 0

    def get(self, key: str) -> CachedImage | None:
        image = self._images.get(key)
        if image is None:
            return None
        if image.is_expired:
            self._drop(key)
            return None
        self._images.move_to_end(key)
        return image

    def set(self, key: str, image: CachedImage) -> None:
        self._drop(key)
        if image.size_bytes > self._budget_bytes:
            logger.debug(
                "'%s' (%d bytes) exceeds the memory budget, not cached in memory",
                key,
                image.size_bytes,
            )
            return
        while self._used_bytes + image.size_bytes > self._budget_bytes:
            evicted_key, evicted = self._images.popitem(last=False)
            self._used_bytes -= evicted.size_bytes
            logger.debug("Evicted '%s' from memory cache", evicted_key)
        self._images[key] = image
        self._used_bytes += image.size_bytes

    def clear(self) -> None:
        self._images.clear()
        self._used_bytes = 0

    @property
    def size_mb(self) -> float:
        return self._used_bytes / (1024 * 1024)

    def __len__(self) -> int:
        return len(self._images)

    def _drop(self, key: str) -> None:
        image = self._images.pop(key, None)
        if image is not None:
            self._used_bytes -= image.size_bytes
