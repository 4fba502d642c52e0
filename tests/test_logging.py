"""
Tests for mrwatch logging.
"""

import io
import logging

from hypothesis import given, settings
from hypothesis import strategies as st

from mrwatch.logging import (
    configure_logging,
    get_logger,
    log_http_request,
    mask_sensitive_data,
    safe_log_dict,
)

token_strategy = st.text(
    alphabet=st.sampled_from("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_-"),
    min_size=20,
    max_size=40,
)


@given(token=token_strategy)
@settings(max_examples=100)
def test_gitlab_token_is_masked(token: str) -> None:
    masked = mask_sensitive_data(f"using glpat-{token} for requests")

    assert token not in masked
    assert "[GITLAB_TOKEN_REDACTED]" in masked


@given(token=token_strategy)
@settings(max_examples=100)
def test_slack_token_is_masked(token: str) -> None:
    masked = mask_sensitive_data(f"posting with xoxb-{token}")

    assert token not in masked


@given(token=token_strategy)
@settings(max_examples=100)
def test_safe_log_dict_masks_private_token_header(token: str) -> None:
    data = {"PRIVATE-TOKEN": token, "Accept": "application/json", "nested": {"token": token}}

    safe = safe_log_dict(data)

    assert token not in str(safe)
    assert safe["PRIVATE-TOKEN"] == "[REDACTED]"
    assert safe["Accept"] == "application/json"


def test_get_logger_hierarchy() -> None:
    assert get_logger().name == "mrwatch"
    assert get_logger("aggregator").name == "mrwatch.aggregator"


def test_http_request_logging_masks_headers() -> None:
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    logger = logging.getLogger("mrwatch")
    try:
        configure_logging(level=logging.INFO, http_level=logging.DEBUG, handler=handler, format_string="%(message)s")

        log_http_request(
            "GET",
            "https://gitlab.example.com/api/v4/merge_requests",
            headers={"PRIVATE-TOKEN": "glpat-abcdefghijklmnop"},
            params={"state": "opened"},
        )

        output = stream.getvalue()
        assert "GET https://gitlab.example.com/api/v4/merge_requests" in output
        assert "glpat-abcdefghijklmnop" not in output
        assert "'state': 'opened'" in output
    finally:
        logger.removeHandler(handler)
        logging.getLogger("mrwatch.http").setLevel(logging.NOTSET)
        logger.setLevel(logging.NOTSET)
