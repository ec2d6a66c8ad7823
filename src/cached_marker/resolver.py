"""Cache resolution chain: memory → disk → network + resize → write-back."""

from __future__ import annotations

import asyncio
import logging
import weakref

from cached_marker.cache.keys import derive_cache_key
from cached_marker.cache.stats import CachedImage
from cached_marker.cache.tiers import CacheStore, DiskTier, MemoryTier
from cached_marker.fetch.network import NetworkFetcher
from cached_marker.imaging.processor import ImageProcessor

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 150
DEFAULT_HEIGHT = 150


class CacheResolver:
    """Resolves (url, width, height) to a processed image.

    Tiers are read strictly in order and the first hit wins. On a full
    miss the source is fetched, resized, written back through the disk tier
    and the stored image is returned. Errors from any collaborator
    propagate unchanged; nothing is cached for a failed request.

    With ``single_flight`` enabled, concurrent full misses for the same key
    share one fetch: callers queue on a per-key lock and each lock holder
    checks the tiers again before fetching. That second check is left out
    of the store statistics so a resolve counts at most one miss.
    """

    def __init__(
        self,
        store: CacheStore,
        fetcher: NetworkFetcher,
        processor: ImageProcessor,
        single_flight: bool = True,
    ) -> None:
        self._memory = MemoryTier(store)
        self._disk = DiskTier(store)
        self._fetcher = fetcher
        self._processor = processor
        self._single_flight = single_flight
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    async def resolve(
        self,
        url: str,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
    ) -> CachedImage:
        key = derive_cache_key(url, width, height)

        image = self._lookup(key)
        if image is not None:
            return image

        if not self._single_flight:
            return await self._download_and_cache(url, key, width, height)

        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        async with lock:
            image = self._lookup(key, record_stats=False)
            if image is not None:
                return image
            return await self._download_and_cache(url, key, width, height)

    def clear(self) -> None:
        """Empty every tier."""
        self._memory.clear_all()

    def _lookup(self, key: str, record_stats: bool = True) -> CachedImage | None:
        image = self._memory.get(key, record_stats=record_stats)
        if image is not None:
            logger.debug("'%s' retrieved from memory cache", key)
            return image

        # Disk hits may be promoted to memory by the store itself
        image = self._disk.get(key, record_stats=record_stats)
        if image is not None:
            logger.debug("'%s' retrieved from disk cache", key)
        return image

    async def _download_and_cache(
        self, url: str, key: str, width: int, height: int
    ) -> CachedImage:
        raw = await self._fetcher.fetch(url)
        processed = await self._processor.process(raw, width, height)
        logger.info("Downloaded and processed %s (%dx%d)", url, width, height)
        return self._disk.put(key, processed, width=width, height=height, source_url=url)
