import io
from unittest.mock import AsyncMock

import pytest
from PIL import Image

from cached_marker.cache.stats import CachedImage


class FakeStore:
    """In-memory stand-in for CacheManager that records every tier access."""

    def __init__(self) -> None:
        self.memory: dict[str, CachedImage] = {}
        self.disk: dict[str, CachedImage] = {}
        self.calls: list[tuple[str, str]] = []

    def get_from_memory(self, key, record_stats=True):
        self.calls.append(("memory", key))
        return self.memory.get(key)

    def get_from_disk(self, key, record_stats=True):
        self.calls.append(("disk", key))
        return self.disk.get(key)

    def put(self, key, data, width=0, height=0, source_url=""):
        self.calls.append(("put", key))
        image = data if isinstance(data, CachedImage) else CachedImage(
            key=key, data=data, width=width, height=height, source_url=source_url,
        )
        self.disk[key] = image
        return image

    def empty_all(self):
        self.calls.append(("empty_all", ""))
        self.memory.clear()
        self.disk.clear()


def make_png(width: int = 4, height: int = 3, color=(255, 0, 0, 255)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGBA", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def sample_image_bytes():
    """Small valid PNG (4x3 red)."""
    return make_png()


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def fetcher():
    """Fetcher double returning fixed raw bytes."""
    mock = AsyncMock()
    mock.fetch = AsyncMock(return_value=b"raw-bytes")
    return mock


@pytest.fixture
def processor():
    """Processor double tagging its output with the requested size."""
    mock = AsyncMock()

    async def _process(raw, width, height):
        return b"processed:" + raw + f":{width}x{height}".encode()

    mock.process = AsyncMock(side_effect=_process)
    return mock


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep tests away from the user's real config and cache database."""
    monkeypatch.setattr(
        "cached_marker.config.hierarchy._GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml"
    )
    monkeypatch.setenv("CACHED_MARKER_CACHE_DB_PATH", str(tmp_path / "default-cache.db"))


@pytest.fixture
def png_factory():
    return make_png
