"""
Fetching, classifying and ordering the merge requests of one report cycle.

Two modes are supported:

- single project: every open merge request of one project; any failed read
  aborts the cycle.
- multi author: open merge requests of several authors across all projects;
  a failed read while classifying one merge request only degrades that item.

Reads for independent merge requests run concurrently. Output order is
decided by the status sort alone, never by which request finished first.
"""

import asyncio
from collections.abc import Awaitable, Iterable, Sequence
from typing import TYPE_CHECKING, Any

from mrwatch.classifier import MergeRequestSignals, classify
from mrwatch.config import ClassifierConfig, WatchConfig
from mrwatch.exceptions import UpstreamFetchError
from mrwatch.inspector import has_open_qa_child_items
from mrwatch.logging import get_logger
from mrwatch.types.merge_requests import ClassifiedMergeRequest, MergeRequest, Report
from mrwatch.types.status import MergeRequestStatus

if TYPE_CHECKING:
    from mrwatch.client import GitLabClient

logger = get_logger("aggregator")


async def gather_or_cancel(*aws: Awaitable[Any]) -> list[Any]:
    """
    Await ``aws`` concurrently and return their results in input order.

    If one of them raises, the others are cancelled and awaited before the
    error propagates, so no request outlives the client it was issued on.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def fetch_signals(client: "GitLabClient", mr: MergeRequest, config: ClassifierConfig) -> MergeRequestSignals:
    """Read discussions, approvals, related issues and QA child items of a merge request."""
    discussions, approvals, issues = await gather_or_cancel(
        client.merge_requests.discussions(mr.project_id, mr.iid),
        client.merge_requests.approvals(mr.project_id, mr.iid),
        client.merge_requests.related_issues(mr.project_id, mr.iid),
    )
    signals = MergeRequestSignals(
        discussions=tuple(discussions),
        approvals=tuple(approvals),
        related_issues=tuple(issues),
    )

    # Threads Pending wins over anything the child items could say
    if signals.has_unresolved_threads or not config.qa_usernames or not issues:
        return signals

    flags = await gather_or_cancel(*(has_open_qa_child_items(client, issue, config) for issue in issues))
    return MergeRequestSignals(
        discussions=signals.discussions,
        approvals=signals.approvals,
        related_issues=signals.related_issues,
        has_open_qa_child_items=any(flags),
    )


async def classify_merge_request(
    client: "GitLabClient", mr: MergeRequest, config: ClassifierConfig
) -> ClassifiedMergeRequest:
    signals = await fetch_signals(client, mr, config)
    status = classify(signals, config)
    logger.debug("%s!%s classified as %s", mr.project_id, mr.iid, status.name)
    return ClassifiedMergeRequest(merge_request=mr, status=status, related_issues=signals.related_issues)


async def _classify_or_degrade(
    client: "GitLabClient", mr: MergeRequest, config: ClassifierConfig
) -> ClassifiedMergeRequest:
    try:
        return await classify_merge_request(client, mr, config)
    except UpstreamFetchError as e:
        logger.warning("Could not classify %s, reporting it as waiting code review: %s", mr.web_url, e)
        return ClassifiedMergeRequest(merge_request=mr, status=MergeRequestStatus.WAITING_CODE_REVIEW)


def drop_drafts(mrs: Iterable[MergeRequest], config: ClassifierConfig) -> list[MergeRequest]:
    return [mr for mr in mrs if not config.is_draft(mr.title)]


def deduplicate(mrs: Iterable[MergeRequest]) -> list[MergeRequest]:
    """Keep the first occurrence of every (project, iid) pair."""
    seen: set[tuple[int, int]] = set()
    unique: list[MergeRequest] = []
    for mr in mrs:
        if mr.key in seen:
            continue
        seen.add(mr.key)
        unique.append(mr)
    return unique


def is_blocked(item: ClassifiedMergeRequest, config: ClassifierConfig) -> bool:
    """True when a related issue carries a label mentioning "blocked" in any case."""
    return any(config.is_blocked_label(label) for issue in item.related_issues for label in issue.labels)


def sort_by_priority(items: Iterable[ClassifiedMergeRequest]) -> list[ClassifiedMergeRequest]:
    """Order by status priority; equal statuses keep their input order."""
    return sorted(items, key=lambda item: item.status.priority)


def build_report(
    items: Sequence[ClassifiedMergeRequest],
    max_display: int = 0,
    overflow_url: str | None = None,
) -> Report:
    """
    Sort classified merge requests and cut the list at ``max_display``.

    A ``max_display`` of 0 shows everything.
    """
    ordered = sort_by_priority(items)
    if max_display and len(ordered) > max_display:
        return Report(
            items=tuple(ordered[:max_display]),
            remaining=len(ordered) - max_display,
            overflow_url=overflow_url,
        )
    return Report(items=tuple(ordered), overflow_url=overflow_url)


async def collect_project(
    client: "GitLabClient",
    project_id: int | str,
    config: ClassifierConfig,
    max_display: int = 0,
    overflow_url: str | None = None,
) -> Report:
    """
    Report on every open, non-draft merge request of one project.

    Raises:
        UpstreamFetchError: If any read fails
    """
    mrs = await client.merge_requests.list_open(project_id)
    logger.info("Found %d open merge requests in project %s", len(mrs), project_id)

    candidates = drop_drafts(mrs, config)
    classified = await gather_or_cancel(*(classify_merge_request(client, mr, config) for mr in candidates))
    return build_report(classified, max_display, overflow_url)


async def collect_authors(
    client: "GitLabClient",
    authors: Sequence[str],
    config: ClassifierConfig,
    max_display: int = 0,
    overflow_url: str | None = None,
) -> Report:
    """
    Report on the open merge requests of several authors across projects.

    Merge requests matched by more than one author query are reported once.
    Items whose related issues are blocked are left out.

    Raises:
        UpstreamFetchError: If an author's merge request list cannot be read
    """
    per_author = await gather_or_cancel(*(client.merge_requests.list_open_by_author(author) for author in authors))
    merged = [mr for mrs in per_author for mr in mrs]
    logger.info("Found %d open merge requests for %d authors", len(merged), len(authors))

    candidates = drop_drafts(deduplicate(merged), config)
    classified = await gather_or_cancel(*(_classify_or_degrade(client, mr, config) for mr in candidates))

    visible = [item for item in classified if not is_blocked(item, config)]
    if len(visible) < len(classified):
        logger.info("Skipped %d blocked merge requests", len(classified) - len(visible))
    return build_report(visible, max_display, overflow_url)


async def collect(client: "GitLabClient", config: WatchConfig) -> Report:
    """
    Run the aggregation mode selected by the configuration.

    Authors take precedence over a project id. With neither configured the
    report is empty.
    """
    if config.multi_author:
        return await collect_authors(
            client, config.authors, config.classifier, config.max_display, config.overflow_url
        )
    if config.project_id:
        return await collect_project(
            client, config.project_id, config.classifier, config.max_display, config.overflow_url
        )
    logger.info("No authors or project configured, nothing to report")
    return Report(items=())
