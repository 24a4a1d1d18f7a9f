"""
Retrying async HTTP GET for the snapshot fetchers.

Transient failures (timeouts, dropped connections, 429 and 5xx) are
retried with exponential backoff and jitter. Everything else surfaces as
an ``HTTPClientError`` subclass so the poller can log it and move on; the
alert engine never sees a failed fetch.
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any

import httpx

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

TRANSIENT_ERRORS = (httpx.TimeoutException, httpx.ConnectError, httpx.ReadError)


@dataclass
class RetryConfig:
    """
    Backoff policy for feed requests.

    The wait before retry ``n`` (0-indexed) is
    ``min(max_backoff_seconds, base_delay * 2**n)`` plus up to
    ``jitter_factor`` of that again.
    """

    max_retries: int = 3
    max_backoff_seconds: float = 60.0
    base_delay: float = 1.0
    jitter_factor: float = 0.1

    def calculate_backoff(self, attempt: int) -> float:
        delay = min(self.base_delay * (2**attempt), self.max_backoff_seconds)
        return delay * (1 + self.jitter_factor * random.random())

    def is_retryable_status(self, status_code: int) -> bool:
        return status_code in RETRYABLE_STATUS_CODES


class HTTPClientError(Exception):
    """A feed request that did not produce a usable response."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class RateLimitError(HTTPClientError):
    """Still rate limited (HTTP 429) after the last retry."""


class FeedError(HTTPClientError):
    """The feed answered, but not with something we can parse."""


class HTTPClient:
    """
    Thin ``httpx.AsyncClient`` wrapper applying a ``RetryConfig``.

    Example:
        async with HTTPClient(RetryConfig(max_retries=3)) as client:
            data = await client.get_json("https://example.com/api/social")
    """

    def __init__(
        self,
        retry_config: RetryConfig | None = None,
        timeout: float = 10.0,
    ):
        self.retry_config = retry_config or RetryConfig()
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "HTTPClient":
        self._client = httpx.AsyncClient(timeout=self.timeout, follow_redirects=True)
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        if self._client is not None:
            await self._client.aclose()
        self._client = None

    async def get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """
        GET ``url`` and decode the body as JSON.

        Raises:
            HTTPClientError: If the request itself fails
            FeedError: If the body is not JSON
        """
        response = await self.get(url, params=params)
        try:
            return response.json()
        except ValueError as e:
            raise FeedError(
                f"Invalid JSON from {url}: {e}",
                status_code=response.status_code,
                response_body=response.text[:500],
            ) from e

    async def _wait(self, attempt: int, url: str, reason: str) -> None:
        delay = self.retry_config.calculate_backoff(attempt)
        logger.warning(
            "GET %s failed (%s), retry %d/%d in %.2fs",
            url, reason, attempt + 1, self.retry_config.max_retries, delay,
        )
        await asyncio.sleep(delay)

    async def get(self, url: str, params: dict[str, Any] | None = None) -> httpx.Response:
        """
        GET ``url``, retrying transient failures.

        Raises:
            RateLimitError: If every attempt was answered with 429
            HTTPClientError: On any other error response or exhausted retries
        """
        if self._client is None:
            raise RuntimeError("HTTPClient must be used as async context manager")

        retries = self.retry_config.max_retries
        attempt = 0
        while True:
            can_retry = attempt < retries
            try:
                response = await self._client.get(url, params=params)
            except TRANSIENT_ERRORS as e:
                if not can_retry:
                    raise HTTPClientError(
                        f"GET {url} failed after {attempt + 1} attempts: {e}"
                    ) from e
                await self._wait(attempt, url, type(e).__name__)
                attempt += 1
                continue

            status = response.status_code
            if self.retry_config.is_retryable_status(status):
                if not can_retry:
                    error_cls = RateLimitError if status == 429 else HTTPClientError
                    raise error_cls(
                        f"GET {url} returned {status} after {attempt + 1} attempts",
                        status_code=status,
                        response_body=response.text,
                    )
                await self._wait(attempt, url, f"HTTP {status}")
                attempt += 1
                continue

            if status >= 400:
                raise HTTPClientError(
                    f"GET {url} returned {status}",
                    status_code=status,
                    response_body=response.text,
                )
            return response
