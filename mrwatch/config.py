"""
Run configuration.

Values are plain data; ``WatchConfig.from_env`` reads them from the
environment the same way the GitLab client does.
"""

import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from urllib.parse import urlencode

from mrwatch.exceptions import ConfigurationError

DEFAULT_API_URL = "https://gitlab.com/api/v4"

DEFAULT_BOARD_LABELS = (
    "WIP::Dev",
    "WIP::Waiting Code Review",
    "WIP::Waiting QA",
    "WIP::QA",
    "WIP::Tested",
    "WIP::CSM",
    "WIP::Waiting Deploy",
)


@dataclass(frozen=True)
class ClassifierConfig:
    """
    Data that drives the status rules.

    ``board_labels`` is the ordered workflow; the ``*_stage`` fields name
    positions in it. A stage that is not part of ``board_labels`` never
    matches, which is how a board without e.g. a CSM column disables that
    rule.
    """

    board_labels: tuple[str, ...] = DEFAULT_BOARD_LABELS
    waiting_qa_stage: str = "WIP::Waiting QA"
    tested_stage: str = "WIP::Tested"
    csm_stage: str = "WIP::CSM"
    deploy_stage: str = "WIP::Waiting Deploy"
    qa_changes_label: str = "QA::Waiting to dev"
    qa_reviewer: str | None = None
    qa_usernames: frozenset[str] = field(default_factory=frozenset)
    label_driven: bool = False
    draft_markers: tuple[str, ...] = ("Draft", "[Draft]", "(Draft)")
    test_case_marker: str = "Test Case"
    blocked_marker: str = "blocked"

    def stage_index(self, label: str) -> int | None:
        """Position of a label in the board sequence, None when it is not a board label."""
        try:
            return self.board_labels.index(label)
        except ValueError:
            return None

    def is_at_or_past(self, labels: Iterable[str], stage: str) -> bool:
        """True when any of ``labels`` sits at ``stage`` or later on the board."""
        target = self.stage_index(stage)
        if target is None:
            return False
        for label in labels:
            index = self.stage_index(label)
            if index is not None and index >= target:
                return True
        return False

    def is_draft(self, title: str) -> bool:
        return title.startswith(self.draft_markers)

    def is_blocked_label(self, label: str) -> bool:
        return self.blocked_marker.lower() in label.lower()


@dataclass(frozen=True)
class WatchConfig:
    """Everything one report cycle needs."""

    token: str
    api_url: str = DEFAULT_API_URL
    project_id: str | None = None
    project_path: str | None = None
    authors: tuple[str, ...] = ()
    max_display: int = 0  # 0 disables truncation
    timeout: float = 30.0
    max_retries: int = 0
    slack_token: str | None = None
    slack_channel: str | None = None
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)

    @property
    def multi_author(self) -> bool:
        return bool(self.authors)

    @property
    def web_url(self) -> str:
        """Browser root of the GitLab instance, derived from the API URL."""
        url = self.api_url.rstrip("/")
        for suffix in ("/api/v4", "/api"):
            if url.endswith(suffix):
                return url[: -len(suffix)]
        return url

    @property
    def overflow_url(self) -> str | None:
        """Page listing every open merge request this run reports on."""
        if self.multi_author:
            query = urlencode([("author_username[]", author) for author in self.authors])
            return f"{self.web_url}/dashboard/merge_requests?{query}"
        if self.project_path:
            return f"{self.web_url}/{self.project_path}/-/merge_requests"
        return None

    @classmethod
    def from_env(cls) -> "WatchConfig":
        """
        Create a configuration from environment variables.

        Environment variables:
            GITLAB_TOKEN: Access token (required)
            GITLAB_API_URL: API root (optional, default: https://gitlab.com/api/v4)
            GITLAB_PROJECT_ID: Project for single-project mode
            GITLAB_PROJECT_PATH: Project path, used for the "more pending" link
            GITLAB_AUTHORS: Comma separated usernames; enables multi-author mode
            GITLAB_QA_REVIEWER_USERNAME: Designated QA approver
            GITLAB_QA_USERNAMES: Comma separated QA usernames (default: the QA reviewer)
            MRWATCH_MAX_DISPLAY: Maximum merge requests listed (default: 0, no limit)
            MRWATCH_BOARD_LABELS: Comma separated board-stage labels, in order
            MRWATCH_LABEL_DRIVEN: Enable the label-driven rules ("1", "true", "yes")
            MRWATCH_TIMEOUT: Per-request timeout in seconds (default: 30)
            MRWATCH_MAX_RETRIES: Retries for 429/5xx responses (default: 0)
            SLACK_TOKEN: Slack bot token
            SLACK_CHANNEL: Slack channel id or name

        Raises:
            ConfigurationError: If the token is missing or a number is malformed
        """
        token = os.environ.get("GITLAB_TOKEN")
        if not token:
            raise ConfigurationError("GITLAB_TOKEN environment variable not set")

        qa_reviewer = os.environ.get("GITLAB_QA_REVIEWER_USERNAME") or None
        qa_usernames = frozenset(_split_csv(os.environ.get("GITLAB_QA_USERNAMES")))
        if not qa_usernames and qa_reviewer:
            qa_usernames = frozenset({qa_reviewer})

        classifier = ClassifierConfig(
            board_labels=_split_csv(os.environ.get("MRWATCH_BOARD_LABELS")) or DEFAULT_BOARD_LABELS,
            qa_reviewer=qa_reviewer,
            qa_usernames=qa_usernames,
            label_driven=_bool_env("MRWATCH_LABEL_DRIVEN"),
        )

        return cls(
            token=token,
            api_url=os.environ.get("GITLAB_API_URL", DEFAULT_API_URL),
            project_id=os.environ.get("GITLAB_PROJECT_ID") or None,
            project_path=os.environ.get("GITLAB_PROJECT_PATH") or None,
            authors=_split_csv(os.environ.get("GITLAB_AUTHORS")),
            max_display=_int_env("MRWATCH_MAX_DISPLAY", 0),
            timeout=_float_env("MRWATCH_TIMEOUT", 30.0),
            max_retries=_int_env("MRWATCH_MAX_RETRIES", 0),
            slack_token=os.environ.get("SLACK_TOKEN") or None,
            slack_channel=os.environ.get("SLACK_CHANNEL") or None,
            classifier=classifier,
        )


def _split_csv(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"Invalid {name}: {raw!r}. Must be an integer") from None
    if value < 0:
        raise ConfigurationError(f"Invalid {name}: {raw!r}. Must not be negative")
    return value


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"Invalid {name}: {raw!r}. Must be a number") from None


def _bool_env(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")
