"""Bounded async pool for warming the cache with many URLs."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from pydantic import BaseModel

from cached_marker.cache.stats import CachedImage

logger = logging.getLogger(__name__)

ResolveFn = Callable[[str, int, int], Awaitable[CachedImage]]


class PrefetchResult(BaseModel):
    """Outcome of prefetching one URL."""

    url: str
    cache_key: str | None = None
    size_bytes: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PrefetchPool:
    """Resolves a batch of URLs concurrently, bounded by a semaphore.

    A failing URL is logged and reported in its result; the rest continue.
    """

    def __init__(self, max_workers: int = 5) -> None:
        self._max_workers = max_workers

    async def prefetch(
        self,
        resolve_fn: ResolveFn,
        urls: list[str],
        width: int,
        height: int,
    ) -> list[PrefetchResult]:
        """Resolve every URL; results are returned in input order."""
        semaphore = asyncio.Semaphore(self._max_workers)

        async def worker(url: str) -> CachedImage:
            async with semaphore:
                return await resolve_fn(url, width, height)

        results = await asyncio.gather(*(worker(u) for u in urls), return_exceptions=True)

        final: list[PrefetchResult] = []
        for url, result in zip(urls, results):
            if isinstance(result, BaseException):
                logger.error("Prefetch of %s failed: %s", url, result)
                final.append(PrefetchResult(url=url, error=str(result) or type(result).__name__))
            else:
                final.append(
                    PrefetchResult(url=url, cache_key=result.key, size_bytes=result.size_bytes)
                )
        return final
