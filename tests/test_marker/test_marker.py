"""Tests for MarkerFactory and MarkerDescriptor."""

import base64

import pytest

from cached_marker.errors.exceptions import FetchError
from cached_marker.marker import MarkerDescriptor, MarkerFactory
from cached_marker.resolver import CacheResolver


@pytest.fixture
def factory(fake_store, fetcher, processor):
    return MarkerFactory(CacheResolver(fake_store, fetcher, processor))


class TestMarkerFactory:
    async def test_from_network_wraps_resolved_bytes(self, factory):
        descriptor = await factory.from_network("http://x/pin.png?v=2", width=32, height=48)
        assert isinstance(descriptor, MarkerDescriptor)
        assert descriptor.data == b"processed:raw-bytes:32x48"
        assert descriptor.width == 32
        assert descriptor.height == 48
        assert descriptor.cache_key == "http://x/pin.png-32-48"

    async def test_default_size(self, factory):
        descriptor = await factory.from_network("http://x/pin.png")
        assert (descriptor.width, descriptor.height) == (150, 150)

    async def test_errors_propagate(self, fake_store, processor):
        from unittest.mock import AsyncMock

        fetcher = AsyncMock()
        fetcher.fetch = AsyncMock(side_effect=FetchError("down"))
        factory = MarkerFactory(CacheResolver(fake_store, fetcher, processor))
        with pytest.raises(FetchError):
            await factory.from_network("http://x/pin.png")

    async def test_clear_cache_forces_refetch(self, factory, fetcher):
        await factory.from_network("http://x/pin.png")
        factory.clear_cache()
        await factory.from_network("http://x/pin.png")
        assert fetcher.fetch.call_count == 2


class TestMarkerDescriptor:
    def test_to_base64(self):
        descriptor = MarkerDescriptor(data=b"\x89PNG", width=1, height=1, cache_key="k")
        assert base64.b64decode(descriptor.to_base64()) == b"\x89PNG"
