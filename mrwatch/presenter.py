"""Slack mrkdwn rendering of classified merge requests."""

from mrwatch.types.merge_requests import ClassifiedMergeRequest, Report
from mrwatch.types.status import MergeRequestStatus

REPORT_HEADER = "🚨 *Pending Merge Requests:*"
NO_PENDING_MESSAGE = "✅ No open merge requests right now."


def escape(text: str) -> str:
    """Escape the characters Slack treats as markup in message text."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def link(url: str, text: str) -> str:
    # "|" would end the URL part of the link
    return f"<{url}|{escape(text).replace('|', '¦')}>"


def format_merge_request(item: ClassifiedMergeRequest) -> str:
    mr = item.merge_request
    lines = [
        f"> {link(mr.web_url, mr.title)}",
        f"> *Status:*  {item.status.label}",
    ]
    if item.status is MergeRequestStatus.CHANGES_REQUESTED_BY_QA and item.related_issues:
        issue = item.related_issues[0]
        lines.append(f"> 👉 Check the subtasks of {link(issue.web_url, issue.title or f'#{issue.iid}')}")
    return "\n".join(lines) + "\n"


def format_summary(remaining: int, overflow_url: str | None = None) -> str:
    text = f"...and {remaining} more pending"
    if overflow_url:
        return f"> _{link(overflow_url, text)}_\n"
    return f"> _{text}_\n"


def format_report(report: Report) -> str:
    """
    Render a whole report as one message.

    The blocks appear in report order, followed by the "more pending"
    summary when the list was truncated.
    """
    if report.is_empty:
        return NO_PENDING_MESSAGE

    blocks = [format_merge_request(item) for item in report.items]
    if report.remaining:
        blocks.append(format_summary(report.remaining, report.overflow_url))
    return REPORT_HEADER + "\n" + "\n".join(blocks)
