"""Merge request-related data models."""

from dataclasses import dataclass, field

from mrwatch.types.issues import Issue
from mrwatch.types.status import MergeRequestStatus


@dataclass(frozen=True)
class Note:
    """A single note inside a discussion thread."""

    resolvable: bool
    resolved: bool

    @property
    def is_unresolved(self) -> bool:
        return self.resolvable and not self.resolved


@dataclass(frozen=True)
class Discussion:
    """A review discussion thread."""

    discussion_id: str
    notes: tuple[Note, ...] = field(default_factory=tuple)

    @property
    def has_unresolved_notes(self) -> bool:
        return any(note.is_unresolved for note in self.notes)


@dataclass(frozen=True)
class MergeRequest:
    """Open merge request snapshot."""

    iid: int
    project_id: int
    title: str
    web_url: str
    labels: tuple[str, ...] = field(default_factory=tuple)
    author_username: str | None = None

    @property
    def key(self) -> tuple[int, int]:
        """Identity of the merge request across projects."""
        return (self.project_id, self.iid)


@dataclass(frozen=True)
class ClassifiedMergeRequest:
    """A merge request with the status derived for it in this run."""

    merge_request: MergeRequest
    status: MergeRequestStatus
    related_issues: tuple[Issue, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Report:
    """Ordered classification results ready to be rendered."""

    items: tuple[ClassifiedMergeRequest, ...]
    remaining: int = 0
    overflow_url: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.items and not self.remaining
