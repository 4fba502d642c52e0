"""Issue-related data models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Issue:
    """An issue related to a merge request."""

    iid: int
    project_id: int
    web_url: str
    title: str = ""
    labels: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ChildItem:
    """A work item linked from an issue."""

    iid: int
    state: str  # "opened", "closed"
    title: str
    author_username: str
    link_type: str  # "relates_to", "blocks", "is_blocked_by"

    @property
    def is_open(self) -> bool:
        return self.state == "opened"
