"""Tests for the CachedMarker facade."""

import io
from unittest.mock import AsyncMock

import httpx
import pytest
from PIL import Image

from cached_marker.cache.manager import CacheManager
from cached_marker.core import CachedMarker, from_network
from cached_marker.errors.exceptions import FetchError
from cached_marker.fetch.network import HttpFetcher
from cached_marker.fetch.retry import RetryingFetcher


def _png_server(png: bytes):
    hits = []

    def handler(request):
        hits.append(str(request.url))
        if request.url.path == "/missing.png":
            return httpx.Response(404)
        return httpx.Response(200, content=png)

    return handler, hits


class TestCachedMarker:
    async def test_end_to_end(self, tmp_path, sample_image_bytes):
        handler, hits = _png_server(sample_image_bytes)
        fetcher = HttpFetcher(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))

        async with CachedMarker(fetcher=fetcher, cache_db_path=str(tmp_path / "c.db")) as marker:
            first = await marker.from_network("http://x/pin.png?t=1", width=40, height=30)
            second = await marker.from_network("http://x/pin.png?t=2", width=40, height=30)

            img = Image.open(io.BytesIO(first.data))
            assert img.size == (40, 30)
            assert second.data == first.data
            assert len(hits) == 1

    async def test_clear_cache_then_refetch(self, tmp_path, sample_image_bytes):
        handler, hits = _png_server(sample_image_bytes)
        fetcher = HttpFetcher(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))

        async with CachedMarker(fetcher=fetcher, cache_db_path=str(tmp_path / "c.db")) as marker:
            await marker.from_network("http://x/pin.png")
            await marker.clear_cache()
            await marker.clear_cache()
            await marker.from_network("http://x/pin.png")
            assert len(hits) == 2

    async def test_config_default_size(self, tmp_path, fetcher, processor):
        async with CachedMarker(
            fetcher=fetcher,
            processor=processor,
            cache_db_path=str(tmp_path / "c.db"),
            default_width=64,
            default_height=32,
        ) as marker:
            descriptor = await marker.from_network("http://x/pin.png")
            assert (descriptor.width, descriptor.height) == (64, 32)

    async def test_injected_cache_manager(self, tmp_path, fetcher, processor):
        mgr = CacheManager(disk_path=tmp_path / "c.db")
        marker = CachedMarker(cache_manager=mgr, fetcher=fetcher, processor=processor)
        assert marker.cache_manager is mgr
        await marker.from_network("http://x/pin.png")
        assert marker.stats().entries >= 1
        await marker.close()

    async def test_prefetch_reports_failures(self, tmp_path, sample_image_bytes):
        handler, _ = _png_server(sample_image_bytes)
        fetcher = HttpFetcher(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))

        async with CachedMarker(fetcher=fetcher, cache_db_path=str(tmp_path / "c.db")) as marker:
            results = await marker.prefetch(
                ["http://x/a.png", "http://x/missing.png"], width=10, height=10
            )
            assert results[0].ok
            assert results[0].cache_key == "http://x/a.png-10-10"
            assert not results[1].ok

    async def test_fetch_error_surfaces(self, tmp_path, sample_image_bytes):
        handler, _ = _png_server(sample_image_bytes)
        fetcher = HttpFetcher(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))

        async with CachedMarker(fetcher=fetcher, cache_db_path=str(tmp_path / "c.db")) as marker:
            with pytest.raises(FetchError):
                await marker.from_network("http://x/missing.png")
            assert marker.stats().entries == 0

    async def test_cache_disabled(self, tmp_path, fetcher, processor):
        async with CachedMarker(
            fetcher=fetcher, processor=processor, cache_disabled=True,
        ) as marker:
            await marker.from_network("http://x/pin.png")
            await marker.from_network("http://x/pin.png")
            assert fetcher.fetch.call_count == 2

    def test_builds_retrying_fetcher_when_configured(self, tmp_path):
        marker = CachedMarker(cache_db_path=str(tmp_path / "c.db"), fetch_retries=2)
        assert isinstance(marker._fetcher, RetryingFetcher)

    def test_plain_fetcher_by_default(self, tmp_path):
        marker = CachedMarker(cache_db_path=str(tmp_path / "c.db"))
        assert isinstance(marker._fetcher, HttpFetcher)

    async def test_close_closes_fetcher(self, tmp_path, processor):
        fetcher = AsyncMock()
        fetcher.close = AsyncMock()
        marker = CachedMarker(fetcher=fetcher, processor=processor,
                              cache_db_path=str(tmp_path / "c.db"))
        await marker.close()
        fetcher.close.assert_awaited_once()


class TestSyncWrapper:
    def test_from_network(self, tmp_path, monkeypatch, sample_image_bytes):
        handler, _ = _png_server(sample_image_bytes)
        real_client = httpx.AsyncClient

        def _client(**kwargs):
            return real_client(transport=httpx.MockTransport(handler), **kwargs)

        monkeypatch.setattr("cached_marker.fetch.network.httpx.AsyncClient", _client)
        descriptor = from_network(
            "http://x/pin.png", width=12, height=12, cache_db_path=str(tmp_path / "c.db"),
        )
        assert Image.open(io.BytesIO(descriptor.data)).size == (12, 12)
