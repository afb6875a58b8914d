"""Timed HTTP client for the upstream search API.

Issues one POST per call and reports how long each network phase took:

- DNS resolution and TCP connect (zero when a pooled connection is reused)
- Time to first response byte
- Total time until the response headers arrived

Example:
    >>> from cruiseexporter.http import TimedFetcher
    >>>
    >>> async with TimedFetcher() as fetcher:
    ...     result = await fetcher.post_json(url, {"operationName": "..."})
    ...     print(result.timing.total_ms, len(result.body))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from cruiseexporter.core.config import DEFAULT_USER_AGENT
from cruiseexporter.core.exceptions import FetchError
from cruiseexporter.http.backend import TimedTransport
from cruiseexporter.http.timing import TimingObserver, TimingSample

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Raw response body with the timing of the request that produced it."""

    url: str
    body: bytes
    timing: TimingSample

    @property
    def status_code(self) -> int:
        return self.timing.status_code


class TimedFetcher:
    """Async HTTP client that instruments every request.

    There is no retry: a request that does not produce a response raises
    :class:`FetchError` and the caller decides what to do next. Any HTTP
    status, including 4xx/5xx, is a response and is returned normally.

    Example:
        >>> async with TimedFetcher(user_agent="cruise-exporter/0.1") as fetcher:
        ...     result = await fetcher.post_json(url, payload)

    Attributes:
        user_agent: User-Agent header value
        timeout: Request timeout in seconds, None for no timeout
    """

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the fetcher.

        Args:
            user_agent: User-Agent header
            timeout: Request timeout in seconds (None disables it)
            headers: Additional default headers
            transport: Custom httpx transport; defaults to a TimedTransport
        """
        self._user_agent = user_agent
        self._timeout = timeout
        self._extra_headers = headers or {}
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def user_agent(self) -> str:
        """User-Agent header value."""
        return self._user_agent

    @property
    def timeout(self) -> float | None:
        """Request timeout in seconds."""
        return self._timeout

    @property
    def headers(self) -> dict[str, str]:
        """Default headers for requests."""
        return {
            "User-Agent": self._user_agent,
            "Content-Type": "application/json",
            **self._extra_headers,
        }

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers=self.headers,
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
                transport=self._transport if self._transport is not None else TimedTransport(),
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "TimedFetcher":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def post_json(self, url: str, payload: Any) -> FetchResult:
        """POST ``payload`` as JSON and time the exchange.

        Args:
            url: Absolute target URL
            payload: JSON-serializable request body

        Returns:
            FetchResult with the full body and the request's TimingSample

        Raises:
            FetchError: If no response was received (DNS, connect,
                timeout or protocol failure)
        """
        client = await self._ensure_client()
        observer = TimingObserver()
        token = observer.activate()

        try:
            request = client.build_request("POST", url, json=payload)
            observer.request_started()
            response = await client.send(request, stream=True)
            observer.headers_received()
            try:
                body = await response.aread()
            finally:
                await response.aclose()
        except httpx.TimeoutException as e:
            raise FetchError(url, f"request timeout: {e}") from e
        except httpx.TransportError as e:
            raise FetchError(url, f"request failed: {e!r}") from e
        except httpx.InvalidURL as e:
            raise FetchError(url, f"invalid url: {e}") from e
        finally:
            observer.deactivate(token)

        timing = observer.sample(status_code=response.status_code)
        logger.debug(
            f"POST {url} -> {response.status_code} "
            f"(dns={timing.dns_ms:.0f}ms connect={timing.connect_ms:.0f}ms "
            f"first_byte={timing.first_byte_ms:.0f}ms total={timing.total_ms:.0f}ms)"
        )
        return FetchResult(url=url, body=body, timing=timing)


__all__ = [
    "FetchResult",
    "TimedFetcher",
]
