"""Top-level entry points: from_network(), CachedMarker."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

from cached_marker.cache.manager import CacheManager
from cached_marker.cache.stats import CacheStats
from cached_marker.concurrency.pool import PrefetchPool, PrefetchResult
from cached_marker.config.hierarchy import load_config_hierarchy
from cached_marker.fetch.network import HttpFetcher, NetworkFetcher
from cached_marker.fetch.retry import RetryingFetcher
from cached_marker.imaging.processor import ImageProcessor, PillowImageProcessor
from cached_marker.marker import MarkerDescriptor, MarkerFactory
from cached_marker.resolver import CacheResolver

logger = logging.getLogger(__name__)

_SECONDS_PER_DAY = 24 * 3600


class CachedMarker:
    """Network marker images with memory and disk caching.

    Collaborators can be injected; anything not supplied is built from the
    merged configuration (see ``load_config_hierarchy``).
    """

    def __init__(
        self,
        cache_manager: CacheManager | None = None,
        fetcher: NetworkFetcher | None = None,
        processor: ImageProcessor | None = None,
        single_flight: bool = True,
        **config_overrides: Any,
    ) -> None:
        self._config = load_config_hierarchy(**config_overrides)
        self._cache_manager = cache_manager or self._build_cache_manager()
        self._fetcher = fetcher or self._build_fetcher()
        self._processor = processor or PillowImageProcessor()
        self._resolver = CacheResolver(
            self._cache_manager,
            self._fetcher,
            self._processor,
            single_flight=single_flight,
        )
        self._factory = MarkerFactory(self._resolver)
        logger.debug(
            "CachedMarker ready (cache %s)",
            "enabled" if self._cache_manager.enabled else "disabled",
        )

    @property
    def config(self) -> dict[str, Any]:
        return self._config

    @property
    def cache_manager(self) -> CacheManager:
        return self._cache_manager

    @property
    def resolver(self) -> CacheResolver:
        return self._resolver

    async def from_network(
        self,
        url: str,
        width: int | None = None,
        height: int | None = None,
    ) -> MarkerDescriptor:
        """Build a marker descriptor for ``url``, fetching only on a cache miss."""
        return await self._factory.from_network(
            url,
            width=self._config["default_width"] if width is None else width,
            height=self._config["default_height"] if height is None else height,
        )

    async def prefetch(
        self,
        urls: list[str],
        width: int | None = None,
        height: int | None = None,
    ) -> list[PrefetchResult]:
        """Warm the cache for several URLs at once."""
        pool = PrefetchPool(max_workers=self._config["max_workers"])
        return await pool.prefetch(
            self._resolver.resolve,
            urls,
            self._config["default_width"] if width is None else width,
            self._config["default_height"] if height is None else height,
        )

    async def clear_cache(self) -> None:
        """Empty both cache tiers. Safe to call on an empty cache."""
        self._factory.clear_cache()

    def stats(self) -> CacheStats:
        return self._cache_manager.stats()

    async def close(self) -> None:
        close = getattr(self._fetcher, "close", None)
        if close is not None:
            await close()
        self._cache_manager.close()

    async def __aenter__(self) -> CachedMarker:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _build_cache_manager(self) -> CacheManager:
        db_path = self._config.get("cache_db_path")
        return CacheManager(
            memory_max_mb=self._config["cache_memory_mb"],
            disk_max_mb=self._config["cache_disk_mb"],
            disk_path=Path(db_path).expanduser() if db_path else None,
            ttl_seconds=self._config["cache_ttl_days"] * _SECONDS_PER_DAY,
            enabled=not self._config["cache_disabled"],
        )

    def _build_fetcher(self) -> NetworkFetcher:
        fetcher: NetworkFetcher = HttpFetcher(
            timeout=self._config.get("fetch_timeout"),
            user_agent=self._config["user_agent"],
        )
        retries = self._config.get("fetch_retries") or 0
        if retries > 0:
            fetcher = RetryingFetcher(fetcher, max_attempts=retries + 1)
        return fetcher


# ── Module-level convenience functions ──


def from_network(
    url: str,
    width: int | None = None,
    height: int | None = None,
    **config_overrides: Any,
) -> MarkerDescriptor:
    """Fetch a marker descriptor (sync wrapper)."""

    async def _run() -> MarkerDescriptor:
        async with CachedMarker(**config_overrides) as marker:
            return await marker.from_network(url, width=width, height=height)

    return asyncio.run(_run())
