"""Cache key derivation: base URL plus output dimensions."""

from __future__ import annotations


def derive_cache_key(url: str, width: int, height: int) -> str:
    """Derive the cache key for a URL rendered at ``width`` x ``height``.

    Everything from the first ``?`` onwards is dropped, so URLs that differ
    only by query string (signatures, cache-busters, tracking params) share
    a key. Different dimensions always produce different keys.
    """
    base = url.split("?", 1)[0]
    return f"{base}-{width}-{height}"
