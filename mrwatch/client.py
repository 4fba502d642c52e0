"""
GitLab API client.

Provides the async read interface the report cycle fetches its signals through.
"""

from typing import Any

import httpx

from mrwatch.clients import IssuesClient, MergeRequestsClient
from mrwatch.config import DEFAULT_API_URL, WatchConfig
from mrwatch.exceptions import ConfigurationError
from mrwatch.transport import GitLabTransport, RetryConfig


class GitLabClient:
    """
    Async client for the parts of the GitLab API mrwatch reads.

    Aggregates the resource clients and handles authentication.

    Example:
        ```python
        import asyncio
        from mrwatch import GitLabClient

        async def main():
            async with GitLabClient(token="glpat-...") as client:
                for mr in await client.merge_requests.list_open(42):
                    print(mr.title)

        asyncio.run(main())
        ```
    """

    DEFAULT_BASE_URL = DEFAULT_API_URL
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the GitLab client.

        Args:
            token: Personal or project access token
            base_url: API root (default: https://gitlab.com/api/v4)
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (optional)
            transport: Optional httpx transport, for tests
        """
        if not token:
            raise ConfigurationError("A GitLab token is required")

        self.base_url = base_url
        self.timeout = timeout

        self._transport = GitLabTransport(
            base_url=base_url,
            token=token,
            timeout=timeout,
            retry_config=retry_config,
            transport=transport,
        )

        self.merge_requests = MergeRequestsClient(self._transport)
        self.issues = IssuesClient(self._transport)

    @classmethod
    def from_config(cls, config: WatchConfig) -> "GitLabClient":
        """Create a client from a run configuration."""
        return cls(
            token=config.token,
            base_url=config.api_url,
            timeout=config.timeout,
            retry_config=RetryConfig(max_retries=config.max_retries),
        )

    @classmethod
    def from_env(cls) -> "GitLabClient":
        """
        Create a client from environment variables.

        See ``WatchConfig.from_env`` for the variables read.

        Raises:
            ConfigurationError: If required environment variables are missing
        """
        return cls.from_config(WatchConfig.from_env())

    @property
    def transport(self) -> GitLabTransport:
        """Get the underlying HTTP transport (for advanced use cases)."""
        return self._transport

    async def close(self) -> None:
        """Close the client and release resources."""
        await self._transport.close()

    async def __aenter__(self) -> "GitLabClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit - closes the client."""
        await self.close()
