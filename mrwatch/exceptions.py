"""mrwatch exception classes."""


class MrWatchError(Exception):
    """Base exception for all mrwatch errors."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class ConfigurationError(MrWatchError):
    """Raised when configuration is invalid or a required value is missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class UpstreamFetchError(MrWatchError):
    """
    Raised when a read against the GitLab API fails.

    Covers transport errors, timeouts and non-success responses. The
    underlying exception (if any) is kept in ``cause`` and is also chained
    as ``__cause__`` by the transport.
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        status_code: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__("UPSTREAM_FETCH_FAILED", message)
        self.path = path
        self.status_code = status_code
        self.cause = cause


class AuthenticationError(UpstreamFetchError):
    """Raised when the token is rejected (401)."""

    pass


class AuthorizationError(UpstreamFetchError):
    """Raised when access is denied (403)."""

    pass


class NotFoundError(UpstreamFetchError):
    """Raised when a resource is not found (404)."""

    pass


class RateLimitedError(UpstreamFetchError):
    """Raised when rate limited (429)."""

    def __init__(
        self,
        message: str,
        retry_after: int,
        path: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, path=path, status_code=429, cause=cause)
        self.retry_after = retry_after


class ServerError(UpstreamFetchError):
    """Raised on server errors (5xx), connection failures and timeouts."""

    pass


class NotificationError(MrWatchError):
    """Raised when the chat notification could not be delivered."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__("NOTIFICATION_FAILED", message)
        self.cause = cause
