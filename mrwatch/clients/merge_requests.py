"""Merge requests resource client."""

from typing import TYPE_CHECKING, Any

from mrwatch.clients.base import parse_record, parse_records
from mrwatch.types.issues import Issue
from mrwatch.types.merge_requests import Discussion, MergeRequest, Note

if TYPE_CHECKING:
    from mrwatch.transport import GitLabTransport


class MergeRequestsClient:
    """Async client for merge request reads."""

    def __init__(self, transport: "GitLabTransport") -> None:
        """
        Initialize the merge requests client.

        Args:
            transport: Async HTTP transport for making requests
        """
        self.transport = transport

    async def list_open(self, project_id: int | str) -> list[MergeRequest]:
        """
        List open merge requests of a project.

        Args:
            project_id: Numeric project id or URL-encoded path

        Returns:
            List of MergeRequest objects in API order
        """
        path = f"/projects/{project_id}/merge_requests"
        data = await self.transport.get_all(path, params={"state": "opened"})
        return parse_records(path, data, self._parse_merge_request)

    async def list_open_by_author(self, author_username: str) -> list[MergeRequest]:
        """
        List open merge requests authored by a user across every visible project.

        Args:
            author_username: GitLab username of the author

        Returns:
            List of MergeRequest objects in API order
        """
        path = "/merge_requests"
        data = await self.transport.get_all(
            path,
            params={"state": "opened", "scope": "all", "author_username": author_username},
        )
        return parse_records(path, data, self._parse_merge_request)

    async def discussions(self, project_id: int, iid: int) -> list[Discussion]:
        """Return every discussion thread of a merge request."""
        path = f"/projects/{project_id}/merge_requests/{iid}/discussions"
        data = await self.transport.get_all(path)
        return parse_records(path, data, self._parse_discussion)

    async def approvals(self, project_id: int, iid: int) -> list[str]:
        """Return the usernames that approved a merge request."""
        path = f"/projects/{project_id}/merge_requests/{iid}/approvals"
        data = await self.transport.get(path)
        return parse_record(path, data, self._parse_approvers)

    async def related_issues(self, project_id: int, iid: int) -> list[Issue]:
        """Return the issues linked to a merge request."""
        path = f"/projects/{project_id}/merge_requests/{iid}/related_issues"
        data = await self.transport.get_all(path)
        return parse_records(path, data, self._parse_issue)

    def _parse_merge_request(self, data: dict[str, Any]) -> MergeRequest:
        """Parse merge request data from API response."""
        author = data.get("author") or {}
        return MergeRequest(
            iid=data["iid"],
            project_id=data["project_id"],
            title=data["title"],
            web_url=data["web_url"],
            labels=tuple(data.get("labels", [])),
            author_username=author.get("username"),
        )

    def _parse_approvers(self, data: dict[str, Any]) -> list[str]:
        return [entry["user"]["username"] for entry in data.get("approved_by") or []]

    def _parse_discussion(self, data: dict[str, Any]) -> Discussion:
        notes = tuple(
            Note(resolvable=bool(note.get("resolvable")), resolved=bool(note.get("resolved")))
            for note in data.get("notes", [])
        )
        return Discussion(discussion_id=str(data.get("id", "")), notes=notes)

    def _parse_issue(self, data: dict[str, Any]) -> Issue:
        return Issue(
            iid=data["iid"],
            project_id=data["project_id"],
            web_url=data["web_url"],
            title=data.get("title", ""),
            labels=tuple(data.get("labels", [])),
        )
