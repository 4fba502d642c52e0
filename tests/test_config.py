"""
Tests for run configuration.
"""

import pytest

from mrwatch.config import DEFAULT_BOARD_LABELS, ClassifierConfig, WatchConfig
from mrwatch.exceptions import ConfigurationError

ENV_VARS = [
    "GITLAB_TOKEN",
    "GITLAB_API_URL",
    "GITLAB_PROJECT_ID",
    "GITLAB_PROJECT_PATH",
    "GITLAB_AUTHORS",
    "GITLAB_QA_REVIEWER_USERNAME",
    "GITLAB_QA_USERNAMES",
    "MRWATCH_MAX_DISPLAY",
    "MRWATCH_BOARD_LABELS",
    "MRWATCH_LABEL_DRIVEN",
    "MRWATCH_TIMEOUT",
    "MRWATCH_MAX_RETRIES",
    "SLACK_TOKEN",
    "SLACK_CHANNEL",
]


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GITLAB_TOKEN", "glpat-env")
    return monkeypatch


class TestBoardStages:
    def test_stage_index(self) -> None:
        config = ClassifierConfig()

        assert config.stage_index("WIP::Dev") == 0
        assert config.stage_index("WIP::Waiting Deploy") == len(DEFAULT_BOARD_LABELS) - 1
        assert config.stage_index("frontend") is None

    def test_at_or_past(self) -> None:
        config = ClassifierConfig()

        assert config.is_at_or_past(["WIP::Waiting QA"], "WIP::Waiting QA")
        assert config.is_at_or_past(["bug", "WIP::CSM"], "WIP::Waiting QA")
        assert not config.is_at_or_past(["WIP::Dev"], "WIP::Waiting QA")
        assert not config.is_at_or_past([], "WIP::Waiting QA")

    def test_unknown_stage_never_matches(self) -> None:
        assert not ClassifierConfig().is_at_or_past(["WIP::Waiting Deploy"], "WIP::Nowhere")

    def test_custom_board(self) -> None:
        config = ClassifierConfig(board_labels=("Todo", "Review", "QA", "Done"), waiting_qa_stage="QA")

        assert config.is_at_or_past(["Done"], "QA")
        assert not config.is_at_or_past(["WIP::Tested"], "QA")

    def test_blocked_label_is_case_insensitive_substring(self) -> None:
        config = ClassifierConfig()

        assert config.is_blocked_label("Partially Blocked")
        assert config.is_blocked_label("BLOCKED::backend")
        assert not config.is_blocked_label("blocker-free")

    def test_draft_markers(self) -> None:
        config = ClassifierConfig()

        assert config.is_draft("Draft: payments")
        assert config.is_draft("(Draft) payments")
        assert not config.is_draft("Payments draft")


class TestWatchConfig:
    def test_from_env_defaults(self, clean_env: pytest.MonkeyPatch) -> None:
        config = WatchConfig.from_env()

        assert config.token == "glpat-env"
        assert config.api_url == "https://gitlab.com/api/v4"
        assert config.project_id is None
        assert config.authors == ()
        assert config.max_display == 0
        assert config.classifier.board_labels == DEFAULT_BOARD_LABELS
        assert not config.classifier.label_driven

    def test_from_env_values(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("GITLAB_AUTHORS", "alice, carol,,")
        clean_env.setenv("GITLAB_QA_REVIEWER_USERNAME", "qa_bob")
        clean_env.setenv("MRWATCH_MAX_DISPLAY", "4")
        clean_env.setenv("MRWATCH_BOARD_LABELS", "Todo,QA,Done")
        clean_env.setenv("MRWATCH_LABEL_DRIVEN", "true")
        clean_env.setenv("MRWATCH_TIMEOUT", "5.5")

        config = WatchConfig.from_env()

        assert config.authors == ("alice", "carol")
        assert config.multi_author
        assert config.max_display == 4
        assert config.timeout == 5.5
        assert config.classifier.qa_reviewer == "qa_bob"
        assert config.classifier.qa_usernames == frozenset({"qa_bob"})
        assert config.classifier.board_labels == ("Todo", "QA", "Done")
        assert config.classifier.label_driven

    def test_qa_usernames_override_reviewer(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("GITLAB_QA_REVIEWER_USERNAME", "qa_bob")
        clean_env.setenv("GITLAB_QA_USERNAMES", "qa_eve,qa_bob")

        config = WatchConfig.from_env()

        assert config.classifier.qa_usernames == frozenset({"qa_eve", "qa_bob"})

    def test_missing_token(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.delenv("GITLAB_TOKEN")

        with pytest.raises(ConfigurationError):
            WatchConfig.from_env()

    @pytest.mark.parametrize("name", ["MRWATCH_MAX_DISPLAY", "MRWATCH_MAX_RETRIES", "MRWATCH_TIMEOUT"])
    def test_malformed_number(self, clean_env: pytest.MonkeyPatch, name: str) -> None:
        clean_env.setenv(name, "many")

        with pytest.raises(ConfigurationError):
            WatchConfig.from_env()

    def test_negative_max_display(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("MRWATCH_MAX_DISPLAY", "-1")

        with pytest.raises(ConfigurationError):
            WatchConfig.from_env()

    def test_web_url_and_overflow_links(self) -> None:
        project = WatchConfig(token="t", api_url="https://git.internal/api/v4/", project_path="shop/app")
        authors = WatchConfig(token="t", authors=("alice", "carol"))

        assert project.web_url == "https://git.internal"
        assert project.overflow_url == "https://git.internal/shop/app/-/merge_requests"
        assert authors.overflow_url == (
            "https://gitlab.com/dashboard/merge_requests?author_username%5B%5D=alice&author_username%5B%5D=carol"
        )
        assert WatchConfig(token="t", project_id="7").overflow_url is None

    def test_overflow_link_encodes_usernames(self) -> None:
        config = WatchConfig(token="t", authors=("dev&qa", "a b"))

        query = config.overflow_url.split("?", 1)[1]

        assert query == "author_username%5B%5D=dev%26qa&author_username%5B%5D=a+b"
