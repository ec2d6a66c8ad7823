"""Tier adapters: memory and disk views over a cache store."""

from __future__ import annotations

from typing import Protocol

from cached_marker.cache.stats import CachedImage


class CacheStore(Protocol):
    """Capability surface the resolver needs from a backing cache."""

    def get_from_memory(self, key: str, record_stats: bool = True) -> CachedImage | None: ...

    def get_from_disk(self, key: str, record_stats: bool = True) -> CachedImage | None: ...

    def put(
        self,
        key: str,
        data: bytes | CachedImage,
        width: int = 0,
        height: int = 0,
        source_url: str = "",
    ) -> CachedImage: ...

    def empty_all(self) -> None: ...


class _Tier:
    def __init__(self, store: CacheStore) -> None:
        self._store = store

    def put(
        self,
        key: str,
        data: bytes | CachedImage,
        width: int = 0,
        height: int = 0,
        source_url: str = "",
    ) -> CachedImage:
        return self._store.put(key, data, width=width, height=height, source_url=source_url)

    def clear_all(self) -> None:
        self._store.empty_all()


class MemoryTier(_Tier):
    """Fastest tier; volatile, process lifetime."""

    def get(self, key: str, record_stats: bool = True) -> CachedImage | None:
        return self._store.get_from_memory(key, record_stats=record_stats)


class DiskTier(_Tier):
    """Persistent tier; survives process restarts."""

    def get(self, key: str, record_stats: bool = True) -> CachedImage | None:
        return self._store.get_from_disk(key, record_stats=record_stats)
