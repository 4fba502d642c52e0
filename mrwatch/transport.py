"""
Async HTTP transport for the GitLab REST API.

Handles authenticated reads with bounded timeouts, optional retry logic,
pagination and error handling using the httpx async client.
"""

import asyncio
import random
import time
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from typing import Any

import httpx

from mrwatch.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    UpstreamFetchError,
)
from mrwatch.logging import get_logger, log_http_request, log_http_response

logger = get_logger("http")


@dataclass
class RetryConfig:
    """
    Configuration for automatic retry behavior.

    Retries are off by default: a failed read surfaces immediately.
    """

    max_retries: int = 0
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503])
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


class GitLabTransport:
    """
    Async HTTP transport layer for GitLab.

    Handles:
    - PRIVATE-TOKEN authentication
    - Per-request timeouts
    - X-Next-Page pagination
    - Exponential backoff with jitter when retries are enabled
    - Error response parsing into typed exceptions
    """

    DEFAULT_PER_PAGE = 100

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the transport.

        Args:
            base_url: API root (e.g., "https://gitlab.com/api/v4")
            token: Personal or project access token
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
            transport: Optional httpx transport (used by tests to stub the network)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={"PRIVATE-TOKEN": token, "Accept": "application/json"},
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "GitLabTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """
        Make a GET request and return the parsed JSON body.

        Raises:
            UpstreamFetchError: On transport errors, timeouts or non-2xx responses
        """
        response = await self._request(path, params)
        return self._parse_body(response, path)

    async def get_all(self, path: str, params: dict[str, Any] | None = None) -> list[Any]:
        """
        GET every page of a collection endpoint.

        Follows the ``X-Next-Page`` header until GitLab reports no next page.

        Raises:
            UpstreamFetchError: On transport errors, timeouts or non-2xx responses
        """
        items: list[Any] = []
        page_params: dict[str, Any] = {"per_page": self.DEFAULT_PER_PAGE, **(params or {})}
        page: str | None = "1"

        while page:
            page_params["page"] = page
            response = await self._request(path, dict(page_params))
            data = self._parse_body(response, path)
            if not isinstance(data, list):
                raise UpstreamFetchError(f"Expected a list from {path}", path=path, status_code=response.status_code)
            items.extend(data)
            page = response.headers.get("X-Next-Page", "").strip() or None

        return items

    async def _request(self, path: str, params: dict[str, Any] | None) -> httpx.Response:
        async def make_request() -> httpx.Response:
            return await self._client.get(path, params=params)

        log_http_request("GET", f"{self.base_url}{path}", params=params)
        return await self._execute_with_retry(make_request, path)

    async def _execute_with_retry(
        self,
        request_fn: Callable[[], Coroutine[Any, Any, httpx.Response]],
        path: str,
    ) -> httpx.Response:
        """
        Execute a request, retrying retryable failures when configured.

        Returns:
            The successful response

        Raises:
            UpstreamFetchError: On non-retryable errors or after max retries
        """
        for attempt in range(self.retry_config.max_retries + 1):
            started = time.perf_counter()
            try:
                response = await request_fn()
            except httpx.RequestError as e:
                # Network errors and timeouts are retryable
                if attempt >= self.retry_config.max_retries:
                    raise ServerError(f"Request to {path} failed: {e!r}", path=path, cause=e) from e

                logger.warning("Request to %s failed (%r), retrying", path, e)
                await asyncio.sleep(self._get_backoff_time(attempt, None))
                continue

            log_http_response(response.status_code, str(response.url), (time.perf_counter() - started) * 1000)

            if response.status_code < 400:
                return response

            error = self._parse_error_response(response, path)

            if not self._should_retry(response.status_code, attempt):
                raise error from error.cause

            retry_after = response.headers.get("Retry-After")
            wait_time = self._get_backoff_time(attempt, retry_after)
            logger.warning("GET %s returned %s, retrying in %.1fs", path, response.status_code, wait_time)
            await asyncio.sleep(wait_time)

        # Only reachable with a negative max_retries
        raise ServerError(f"Request to {path} was never attempted", path=path)

    def _should_retry(self, status_code: int, attempt: int) -> bool:
        """True while attempts remain and ``status_code`` is in ``RetryConfig.retry_on``."""
        return attempt < self.retry_config.max_retries and status_code in self.retry_config.retry_on

    def _get_backoff_time(self, attempt: int, retry_after: str | None) -> float:
        """
        Seconds to wait before retry number ``attempt`` (0-indexed).

        A numeric Retry-After header wins when ``respect_retry_after`` is set;
        otherwise ``backoff_factor ** attempt`` with jitter, capped at ``max_backoff``.
        """
        config = self.retry_config
        if retry_after and config.respect_retry_after:
            try:
                return float(retry_after)
            except ValueError:
                logger.debug("Ignoring non-numeric Retry-After %r", retry_after)

        wait = config.backoff_factor ** attempt
        spread = wait * config.jitter
        return min(wait + random.uniform(-spread, spread), config.max_backoff)

    def _parse_body(self, response: httpx.Response, path: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamFetchError(
                f"Invalid JSON from {path}", path=path, status_code=response.status_code, cause=e
            ) from e

    def _parse_error_response(self, response: httpx.Response, path: str) -> UpstreamFetchError:
        """Map a GitLab error response to the matching ``UpstreamFetchError`` subclass."""
        status_code = response.status_code
        message = f"GET {path} returned HTTP {status_code}"
        detail = _error_detail(response)
        if detail:
            message = f"{message}: {detail}"
        cause = httpx.HTTPStatusError(message, request=response.request, response=response)

        if status_code == 429:
            header = response.headers.get("Retry-After", "")
            retry_after = int(header) if header.isdigit() else 60
            return RateLimitedError(message, retry_after, path=path, cause=cause)

        error_class = _STATUS_ERRORS.get(status_code)
        if error_class is None:
            error_class = ServerError if status_code >= 500 else UpstreamFetchError
        return error_class(message, path=path, status_code=status_code, cause=cause)


_STATUS_ERRORS: dict[int, type[UpstreamFetchError]] = {
    401: AuthenticationError,
    403: AuthorizationError,
    404: NotFoundError,
}


def _error_detail(response: httpx.Response) -> str | None:
    """GitLab puts the reason in ``message`` or, for OAuth-style errors, ``error``."""
    try:
        data = response.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    detail = data.get("message") or data.get("error")
    return str(detail) if detail else None
