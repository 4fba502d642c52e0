"""GitLab resource clients."""

from mrwatch.clients.issues import IssuesClient
from mrwatch.clients.merge_requests import MergeRequestsClient

__all__ = [
    "IssuesClient",
    "MergeRequestsClient",
]
