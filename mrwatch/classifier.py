"""
Merge request status classification.

``classify`` is a pure function of the signals fetched for one merge request.
The rules are evaluated in order and the first match wins:

1. unresolved actionable thread -> Threads Pending
2. QA change request label, or open QA child item -> Changes Requested by QA
3. (label-driven) issue at or past the deploy stage -> Ready to Merge
4. (label-driven) issue at or past the CSM stage -> Waiting CSM
5. approvals: two distinct approvers plus QA sign-off -> Ready to Merge,
   otherwise Waiting QA Review
6. no approvals, issue at or past the Waiting QA stage -> Waiting QA Review
7. Waiting Code Review
"""

from dataclasses import dataclass, field

from mrwatch.config import ClassifierConfig
from mrwatch.types.issues import Issue
from mrwatch.types.merge_requests import Discussion
from mrwatch.types.status import MergeRequestStatus


@dataclass(frozen=True)
class MergeRequestSignals:
    """Raw review signals of one merge request, fetched in a single cycle."""

    discussions: tuple[Discussion, ...] = field(default_factory=tuple)
    approvals: tuple[str, ...] = field(default_factory=tuple)
    related_issues: tuple[Issue, ...] = field(default_factory=tuple)
    has_open_qa_child_items: bool = False

    @property
    def has_unresolved_threads(self) -> bool:
        return any(discussion.has_unresolved_notes for discussion in self.discussions)


def _any_issue_at_or_past(issues: tuple[Issue, ...], stage: str, config: ClassifierConfig) -> bool:
    return any(config.is_at_or_past(issue.labels, stage) for issue in issues)


def _qa_requested_changes(signals: MergeRequestSignals, config: ClassifierConfig) -> bool:
    if signals.has_open_qa_child_items:
        return True
    return any(config.qa_changes_label in issue.labels for issue in signals.related_issues)


def _qa_signed_off(signals: MergeRequestSignals, config: ClassifierConfig) -> bool:
    if config.qa_reviewer and config.qa_reviewer in signals.approvals:
        return True
    return config.label_driven and _any_issue_at_or_past(signals.related_issues, config.tested_stage, config)


def classify(signals: MergeRequestSignals, config: ClassifierConfig) -> MergeRequestStatus:
    """Map the signals of a merge request to its status."""
    issues = signals.related_issues

    if signals.has_unresolved_threads:
        return MergeRequestStatus.THREADS_PENDING

    if _qa_requested_changes(signals, config):
        return MergeRequestStatus.CHANGES_REQUESTED_BY_QA

    # Stage labels take precedence over the approval count here.
    if config.label_driven:
        if _any_issue_at_or_past(issues, config.deploy_stage, config):
            return MergeRequestStatus.READY_TO_MERGE
        if _any_issue_at_or_past(issues, config.csm_stage, config):
            return MergeRequestStatus.WAITING_CSM

    if signals.approvals:
        if len(set(signals.approvals)) >= 2 and _qa_signed_off(signals, config):
            return MergeRequestStatus.READY_TO_MERGE
        return MergeRequestStatus.WAITING_QA_REVIEW

    if _any_issue_at_or_past(issues, config.waiting_qa_stage, config):
        return MergeRequestStatus.WAITING_QA_REVIEW

    return MergeRequestStatus.WAITING_CODE_REVIEW
