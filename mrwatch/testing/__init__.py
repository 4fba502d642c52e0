"""mrwatch testing utilities.

Provides a mock GitLab client, a recording notifier and record factories
for testing code built on mrwatch.
"""

from mrwatch.testing.fixtures import (
    create_mock_child_item,
    create_mock_discussion,
    create_mock_issue,
    create_mock_merge_request,
)
from mrwatch.testing.mock import MockCall, MockGitLabClient, MockNotifier, MockResponse

__all__ = [
    # Mocks
    "MockGitLabClient",
    "MockNotifier",
    "MockCall",
    "MockResponse",
    # Helper functions
    "create_mock_merge_request",
    "create_mock_issue",
    "create_mock_child_item",
    "create_mock_discussion",
]
