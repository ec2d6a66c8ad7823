"""Cached image and statistics models."""

from __future__ import annotations

import time

from pydantic import BaseModel, Field

DEFAULT_TTL_SECONDS = 30 * 24 * 3600  # 30 days


class CachedImage(BaseModel):
    """A processed image stored under its cache key."""

    key: str
    data: bytes
    width: int = 0
    height: int = 0
    source_url: str = ""
    created_at: float = Field(default_factory=time.time)
    ttl_seconds: float = DEFAULT_TTL_SECONDS

    @property
    def is_expired(self) -> bool:
        return time.time() > self.created_at + self.ttl_seconds

    @property
    def size_bytes(self) -> int:
        return len(self.data)


class CacheStats(BaseModel):
    """Aggregate cache statistics."""

    entries: int = 0
    size_mb: float = 0.0
    hits: int = 0
    misses: int = 0
    memory_hits: int = 0
    disk_hits: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0
