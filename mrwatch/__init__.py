"""mrwatch - GitLab merge request review status reports for Slack."""

from mrwatch.aggregator import collect, collect_authors, collect_project
from mrwatch.classifier import MergeRequestSignals, classify
from mrwatch.client import GitLabClient
from mrwatch.config import ClassifierConfig, WatchConfig
from mrwatch.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    MrWatchError,
    NotFoundError,
    NotificationError,
    RateLimitedError,
    ServerError,
    UpstreamFetchError,
)
from mrwatch.logging import configure_logging, get_logger
from mrwatch.notifier import Notifier, SlackNotifier
from mrwatch.presenter import format_merge_request, format_report
from mrwatch.runner import run_once
from mrwatch.transport import GitLabTransport, RetryConfig
from mrwatch.types import MergeRequestStatus

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Client
    "GitLabClient",
    "GitLabTransport",
    "RetryConfig",
    # Configuration
    "WatchConfig",
    "ClassifierConfig",
    # Classification
    "MergeRequestSignals",
    "MergeRequestStatus",
    "classify",
    # Aggregation
    "collect",
    "collect_project",
    "collect_authors",
    # Presentation and delivery
    "format_merge_request",
    "format_report",
    "Notifier",
    "SlackNotifier",
    "run_once",
    # Exceptions
    "MrWatchError",
    "UpstreamFetchError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "RateLimitedError",
    "ServerError",
    "NotificationError",
    "ConfigurationError",
    # Logging
    "configure_logging",
    "get_logger",
]
