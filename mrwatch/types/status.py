"""Merge request status vocabulary."""

from enum import Enum


class MergeRequestStatus(Enum):
    """
    Review/QA status of a merge request.

    Members are declared in display order: ``priority`` 1 is shown first.
    """

    READY_TO_MERGE = "✅ Ready to Merge"
    WAITING_CODE_REVIEW = "🕵️‍♂️ Waiting Code Review"
    THREADS_PENDING = "💬 Threads Pending"
    CHANGES_REQUESTED_BY_QA = "🛠️ Changes Requested by QA"
    WAITING_QA_REVIEW = "🔍 Waiting QA Review"
    WAITING_CSM = "🤝 Waiting CSM"

    @property
    def label(self) -> str:
        return self.value

    @property
    def priority(self) -> int:
        return list(MergeRequestStatus).index(self) + 1
