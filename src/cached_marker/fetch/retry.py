"""Opt-in retry wrapper for fetchers."""

from __future__ import annotations

import logging

from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from cached_marker.errors.exceptions import FetchError
from cached_marker.fetch.network import NetworkFetcher

logger = logging.getLogger(__name__)

_MAX_WAIT = 30.0  # seconds


def _is_transient(exc: BaseException) -> bool:
    return isinstance(exc, FetchError) and exc.is_transient


class RetryingFetcher:
    """Wraps a fetcher and retries transient ``FetchError``s with backoff.

    Non-transient failures (404, bad URL) are raised on the first attempt.
    After the last attempt the final ``FetchError`` is re-raised unchanged.
    """

    def __init__(
        self,
        inner: NetworkFetcher,
        max_attempts: int = 3,
        initial_wait: float = 0.5,
    ) -> None:
        self._inner = inner
        self._max_attempts = max_attempts
        self._initial_wait = initial_wait

    async def fetch(self, url: str) -> bytes:
        retrying = AsyncRetrying(
            retry=retry_if_exception(_is_transient),
            wait=wait_exponential(multiplier=self._initial_wait, max=_MAX_WAIT),
            stop=stop_after_attempt(self._max_attempts),
            before_sleep=self._log_retry,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self._inner.fetch(url)
        raise AssertionError("unreachable")  # pragma: no cover

    async def close(self) -> None:
        close = getattr(self._inner, "close", None)
        if close is not None:
            await close()

    def _log_retry(self, retry_state) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "Transient fetch error (attempt %d/%d): %s",
            retry_state.attempt_number,
            self._max_attempts,
            exc,
        )
