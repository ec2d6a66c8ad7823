"""Concurrency: bounded batch prefetching."""

from cached_marker.concurrency.pool import PrefetchPool, PrefetchResult

__all__ = ["PrefetchPool", "PrefetchResult"]
