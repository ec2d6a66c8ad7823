"""Marker descriptors built from resolved images."""

from __future__ import annotations

import base64
import logging

from pydantic import BaseModel

from cached_marker.resolver import DEFAULT_HEIGHT, DEFAULT_WIDTH, CacheResolver

logger = logging.getLogger(__name__)


class MarkerDescriptor(BaseModel):
    """Opaque display handle handed to a map widget."""

    data: bytes
    width: int
    height: int
    cache_key: str

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")


class MarkerFactory:
    """Turns network images into marker descriptors via the cache chain."""

    def __init__(self, resolver: CacheResolver) -> None:
        self._resolver = resolver

    async def from_network(
        self,
        url: str,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
    ) -> MarkerDescriptor:
        """Resolve ``url`` at ``width`` x ``height`` and wrap the bytes.

        Raises FetchError, ProcessingError or CacheError from the resolver.
        """
        image = await self._resolver.resolve(url, width=width, height=height)
        return MarkerDescriptor(
            data=image.data,
            width=width,
            height=height,
            cache_key=image.key,
        )

    def clear_cache(self) -> None:
        self._resolver.clear()
        logger.info("Marker cache cleared")
