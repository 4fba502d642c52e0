"""Detection of QA-raised follow-up work linked from an issue."""

from typing import TYPE_CHECKING

from mrwatch.config import ClassifierConfig
from mrwatch.exceptions import UpstreamFetchError
from mrwatch.logging import get_logger
from mrwatch.types.issues import ChildItem, Issue

if TYPE_CHECKING:
    from mrwatch.client import GitLabClient

logger = get_logger("inspector")


def is_open_qa_child_item(item: ChildItem, config: ClassifierConfig) -> bool:
    """Open, not a test-case container, and opened by someone on the QA team."""
    return (
        item.is_open
        and config.test_case_marker not in item.title
        and item.author_username in config.qa_usernames
    )


async def has_open_qa_child_items(client: "GitLabClient", issue: Issue, config: ClassifierConfig) -> bool:
    """
    Check whether QA opened follow-up work on an issue that is still open.

    A child list that cannot be read (missing permission, deleted issue, ...)
    counts as having no open child items.
    """
    try:
        items = await client.issues.links(issue.project_id, issue.iid)
    except UpstreamFetchError as e:
        logger.warning("Could not list child items of %s, assuming none: %s", issue.web_url, e)
        return False
    return any(is_open_qa_child_item(item, config) for item in items)
