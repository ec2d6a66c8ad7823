"""Network fetching: raw image bytes by URL."""

from cached_marker.fetch.network import HttpFetcher, NetworkFetcher
from cached_marker.fetch.retry import RetryingFetcher

__all__ = ["HttpFetcher", "NetworkFetcher", "RetryingFetcher"]
