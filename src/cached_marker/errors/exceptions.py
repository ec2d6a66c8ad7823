"""Custom exception hierarchy for cached_marker."""

from __future__ import annotations

from typing import Any


class CachedMarkerError(Exception):
    """Base exception for all cached_marker errors."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message


class FetchError(CachedMarkerError):
    """Network retrieval failed.

    Examples: DNS failure, refused connection, timeout, non-2xx response.
    """

    def __init__(
        self,
        message: str = "",
        url: str = "",
        error_type: str = "transport",
        http_status: int | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.error_type = error_type
        self.http_status = http_status
        self.original = original

    @property
    def is_transient(self) -> bool:
        """Whether a retry could plausibly succeed (timeouts, 5xx, 429)."""
        if self.error_type in ("timeout", "connection"):
            return True
        if self.http_status is None:
            return False
        return self.http_status == 429 or self.http_status >= 500


class ProcessingError(CachedMarkerError):
    """Raw bytes could not be decoded, or target dimensions are invalid."""

    def __init__(
        self,
        message: str = "",
        width: int | None = None,
        height: int | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.width = width
        self.height = height
        self.original = original


class CacheError(CachedMarkerError):
    """Backing store read or write failure."""

    def __init__(
        self,
        message: str = "",
        key: str | None = None,
        operation: str = "read",
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.key = key
        self.operation = operation
        self.original = original
