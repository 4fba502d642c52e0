"""
Pytest fixtures for mrwatch testing.

Provides record factories and common fixtures for tests that exercise the
classification pipeline without a GitLab instance.
"""

from collections.abc import Generator, Sequence

import pytest

from mrwatch.config import ClassifierConfig
from mrwatch.testing.mock import MockGitLabClient, MockNotifier
from mrwatch.types.issues import ChildItem, Issue
from mrwatch.types.merge_requests import Discussion, MergeRequest, Note

MOCK_PROJECT_ID = 7
MOCK_QA_REVIEWER = "qa_bob"


# ============================================================================
# Helper Functions
# ============================================================================


def create_mock_merge_request(
    iid: int = 1,
    project_id: int = MOCK_PROJECT_ID,
    title: str | None = None,
    web_url: str | None = None,
    labels: Sequence[str] = (),
    author_username: str | None = "dev_alice",
) -> MergeRequest:
    """
    Create a mock MergeRequest with sensible defaults.

    Example:
        ```python
        mr = create_mock_merge_request(iid=3, title="Draft: WIP")
        ```
    """
    return MergeRequest(
        iid=iid,
        project_id=project_id,
        title=title if title is not None else f"Merge request {iid}",
        web_url=web_url or f"https://gitlab.example.com/group/project-{project_id}/-/merge_requests/{iid}",
        labels=tuple(labels),
        author_username=author_username,
    )


def create_mock_issue(
    iid: int = 10,
    project_id: int = MOCK_PROJECT_ID,
    labels: Sequence[str] = (),
    title: str | None = None,
) -> Issue:
    """Create a mock Issue with sensible defaults."""
    return Issue(
        iid=iid,
        project_id=project_id,
        web_url=f"https://gitlab.example.com/group/project-{project_id}/-/issues/{iid}",
        title=title if title is not None else f"Issue {iid}",
        labels=tuple(labels),
    )


def create_mock_child_item(
    iid: int = 100,
    state: str = "opened",
    title: str = "Button misaligned on checkout",
    author_username: str = MOCK_QA_REVIEWER,
    link_type: str = "relates_to",
) -> ChildItem:
    """Create a mock ChildItem, by default an open one raised by QA."""
    return ChildItem(
        iid=iid,
        state=state,
        title=title,
        author_username=author_username,
        link_type=link_type,
    )


def create_mock_discussion(unresolved: bool = False, discussion_id: str = "d1") -> Discussion:
    """Create a discussion with one resolvable note, resolved unless ``unresolved``."""
    return Discussion(
        discussion_id=discussion_id,
        notes=(
            Note(resolvable=False, resolved=False),
            Note(resolvable=True, resolved=not unresolved),
        ),
    )


# ============================================================================
# Mock Client Fixtures
# ============================================================================


@pytest.fixture
def mock_client() -> Generator[MockGitLabClient, None, None]:
    """
    Provide a MockGitLabClient for testing.

    Example:
        ```python
        def test_my_feature(mock_client):
            mock_client.merge_requests.configure_approvals(7, 1, response=["alice"])
            ...
            assert mock_client.was_called("merge_requests.approvals")
        ```
    """
    client = MockGitLabClient()
    yield client
    client.reset()


@pytest.fixture
def mock_notifier() -> MockNotifier:
    """Provide a notifier that records messages."""
    return MockNotifier()


@pytest.fixture
def mock_project_id() -> int:
    """Provide a test project ID."""
    return MOCK_PROJECT_ID


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def classifier_config() -> ClassifierConfig:
    """Approval-driven rules with ``qa_bob`` as QA reviewer."""
    return ClassifierConfig(qa_reviewer=MOCK_QA_REVIEWER, qa_usernames=frozenset({MOCK_QA_REVIEWER}))


@pytest.fixture
def label_driven_config() -> ClassifierConfig:
    """Label-driven rules with ``qa_bob`` as QA reviewer."""
    return ClassifierConfig(
        qa_reviewer=MOCK_QA_REVIEWER,
        qa_usernames=frozenset({MOCK_QA_REVIEWER}),
        label_driven=True,
    )


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_merge_request() -> MergeRequest:
    """Provide a sample MergeRequest."""
    return create_mock_merge_request()


@pytest.fixture
def sample_issue() -> Issue:
    """Provide a sample Issue."""
    return create_mock_issue()


@pytest.fixture
def sample_child_item() -> ChildItem:
    """Provide a sample open QA ChildItem."""
    return create_mock_child_item()
