"""mrwatch type definitions.

This module exports all data model types used by the package.
"""

from mrwatch.types.issues import ChildItem, Issue
from mrwatch.types.merge_requests import (
    ClassifiedMergeRequest,
    Discussion,
    MergeRequest,
    Note,
    Report,
)
from mrwatch.types.status import MergeRequestStatus

__all__ = [
    # Merge request types
    "MergeRequest",
    "Discussion",
    "Note",
    "ClassifiedMergeRequest",
    "Report",
    # Issue types
    "Issue",
    "ChildItem",
    # Status vocabulary
    "MergeRequestStatus",
]
