"""Pillow-backed resize/re-encode step."""

from __future__ import annotations

import asyncio
import io
import logging
from typing import Protocol

from PIL import Image, UnidentifiedImageError

from cached_marker.errors.exceptions import ProcessingError

logger = logging.getLogger(__name__)

_MAX_SOURCE_BYTES = 50 * 1024 * 1024  # 50 MB
_PASSTHROUGH_MODES = {"RGB", "RGBA", "L", "LA"}


class ImageProcessor(Protocol):
    """Resizes raw image bytes to an exact pixel size."""

    async def process(self, raw: bytes, width: int, height: int) -> bytes: ...


class PillowImageProcessor:
    """Decodes with Pillow, resizes to exactly ``width`` x ``height``, encodes PNG.

    PNG keeps the re-encode lossless. Decoding and resampling run in a worker
    thread so a large image doesn't block the event loop.
    """

    def __init__(self, resample: Image.Resampling = Image.Resampling.LANCZOS) -> None:
        self._resample = resample

    async def process(self, raw: bytes, width: int, height: int) -> bytes:
        _validate_dimensions(width, height)
        if len(raw) > _MAX_SOURCE_BYTES:
            raise ProcessingError(
                f"Source image too large ({len(raw)} bytes, max {_MAX_SOURCE_BYTES})",
                width=width,
                height=height,
            )
        return await asyncio.to_thread(self._resize, raw, width, height)

    def _resize(self, raw: bytes, width: int, height: int) -> bytes:
        try:
            with Image.open(io.BytesIO(raw)) as img:
                img.load()
                if img.mode not in _PASSTHROUGH_MODES:
                    img = img.convert("RGBA")
                resized = img.resize((width, height), resample=self._resample)
        except (
            UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError,
        ) as exc:
            raise ProcessingError(
                f"Cannot decode image: {exc}",
                width=width,
                height=height,
                original=exc,
            ) from exc

        logger.debug("Resized image to %dx%d", width, height)
        return _pil_to_png_bytes(resized)


def _validate_dimensions(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise ProcessingError(
            f"Target dimensions must be positive, got {width}x{height}",
            width=width,
            height=height,
        )


def _pil_to_png_bytes(img: Image.Image) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
