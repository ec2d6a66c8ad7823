"""Async HTTP fetcher for source images."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from cached_marker.errors.exceptions import FetchError

logger = logging.getLogger(__name__)

_DEFAULT_USER_AGENT = "cached-marker/0.1"


class NetworkFetcher(Protocol):
    """Retrieves raw bytes for a URL."""

    async def fetch(self, url: str) -> bytes: ...


class HttpFetcher:
    """Fetches URLs with a single HTTP GET.

    No retries. No timeout unless one is passed in; timeout policy belongs
    to the caller.
    """

    def __init__(
        self,
        timeout: float | None = None,
        user_agent: str = _DEFAULT_USER_AGENT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
            headers={"User-Agent": user_agent},
        )

    async def fetch(self, url: str) -> bytes:
        """GET ``url`` and return the response body."""
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise FetchError(
                f"GET {url} returned HTTP {status}",
                url=url,
                error_type="http_status",
                http_status=status,
                original=exc,
            ) from exc
        except httpx.TimeoutException as exc:
            raise FetchError(
                f"GET {url} timed out",
                url=url,
                error_type="timeout",
                original=exc,
            ) from exc
        except httpx.NetworkError as exc:
            raise FetchError(
                f"GET {url} failed to connect: {exc}",
                url=url,
                error_type="connection",
                original=exc,
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FetchError(
                f"GET {url} failed: {exc}",
                url=url,
                error_type="transport",
                original=exc,
            ) from exc

        logger.debug("Fetched %d bytes from %s", len(response.content), url)
        return response.content

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
