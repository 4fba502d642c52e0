"""Issues resource client."""

from typing import TYPE_CHECKING, Any

from mrwatch.clients.base import parse_records
from mrwatch.types.issues import ChildItem

if TYPE_CHECKING:
    from mrwatch.transport import GitLabTransport


class IssuesClient:
    """Async client for issue reads."""

    def __init__(self, transport: "GitLabTransport") -> None:
        """
        Initialize the issues client.

        Args:
            transport: Async HTTP transport for making requests
        """
        self.transport = transport

    async def links(self, project_id: int, iid: int) -> list[ChildItem]:
        """
        List the work items linked from an issue.

        Args:
            project_id: Project owning the issue
            iid: Issue iid within the project

        Returns:
            List of ChildItem objects
        """
        path = f"/projects/{project_id}/issues/{iid}/links"
        data = await self.transport.get(path)
        return parse_records(path, data, self._parse_child_item)

    def _parse_child_item(self, data: dict[str, Any]) -> ChildItem:
        """Parse a linked issue from API response."""
        author = data.get("author") or {}
        return ChildItem(
            iid=data["iid"],
            state=data.get("state", "opened"),
            title=data.get("title", ""),
            author_username=author.get("username", ""),
            link_type=data.get("link_type", "relates_to"),
        )
