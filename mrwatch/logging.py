"""
mrwatch logging utilities.

All loggers live under the ``mrwatch`` namespace. GitLab request traces go to
``mrwatch.http`` and are only produced at DEBUG level. GitLab and Slack
tokens are masked before anything is written.
"""

import logging
import re
from collections.abc import Mapping
from typing import Any

ROOT_LOGGER_NAME = "mrwatch"
HTTP_LOGGER_NAME = f"{ROOT_LOGGER_NAME}.http"
DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
REDACTED = "[REDACTED]"

_pkg_logger = logging.getLogger(ROOT_LOGGER_NAME)
_http_logger = logging.getLogger(HTTP_LOGGER_NAME)
_installed_handler: logging.Handler | None = None

_TOKEN_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"glpat-[A-Za-z0-9_\-]{8,}"), "[GITLAB_TOKEN_REDACTED]"),
    (re.compile(r"xox[abposr]-[A-Za-z0-9_\-]{8,}"), "[SLACK_TOKEN_REDACTED]"),
    (re.compile(r"(PRIVATE-TOKEN['\"]?\s*[:=]\s*)['\"]?[^'\"\s,}]+['\"]?", re.IGNORECASE), rf"\1{REDACTED}"),
    (re.compile(r"(secret|token|password|api_key)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), rf"\1: {REDACTED}"),
)

_DEFAULT_SENSITIVE_KEYS = frozenset({"private-token", "authorization", "secret", "token", "password", "api_key"})


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Attach a handler to the ``mrwatch`` logger and set its levels.

    Calling this again replaces the handler installed by the previous call,
    so repeated CLI runs in one process do not duplicate output.

    Args:
        level: Level of the package logger
        http_level: Level of ``mrwatch.http`` (default: ``level``); DEBUG traces every GitLab call
        handler: Handler to install (default: stderr stream)
        format_string: Record format (default: ``DEFAULT_FORMAT``)
    """
    global _installed_handler

    if _installed_handler is not None:
        _pkg_logger.removeHandler(_installed_handler)

    target = handler or logging.StreamHandler()
    target.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    _pkg_logger.addHandler(target)
    _installed_handler = target

    _pkg_logger.setLevel(level)
    _http_logger.setLevel(level if http_level is None else http_level)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``mrwatch`` or the ``mrwatch.<name>`` child logger."""
    return logging.getLogger(ROOT_LOGGER_NAME if not name else f"{ROOT_LOGGER_NAME}.{name}")


def mask_sensitive_data(text: str) -> str:
    """Replace GitLab/Slack tokens and ``key=value`` secrets found in ``text``."""
    for pattern, replacement in _TOKEN_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def _is_sensitive(key: str, sensitive_keys: frozenset[str] | set[str]) -> bool:
    lowered = key.lower()
    return any(marker in lowered for marker in sensitive_keys)


def safe_log_dict(data: Mapping[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """
    Copy ``data`` with the values of secret-looking keys replaced.

    A key is secret-looking when it contains any of ``sensitive_keys``
    (case-insensitive). Nested mappings, and mappings inside lists, are
    masked the same way.
    """
    keys = _DEFAULT_SENSITIVE_KEYS if sensitive_keys is None else sensitive_keys

    def scrub(value: Any) -> Any:
        if isinstance(value, Mapping):
            return safe_log_dict(value, keys)
        if isinstance(value, list):
            return [scrub(item) for item in value]
        return value

    return {key: REDACTED if _is_sensitive(key, keys) else scrub(value) for key, value in data.items()}


def log_http_request(
    method: str,
    url: str,
    headers: Mapping[str, str] | None = None,
    params: Mapping[str, Any] | None = None,
) -> None:
    """Trace an outgoing GitLab request on ``mrwatch.http``."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    message = f"{method} {mask_sensitive_data(url)}"
    if headers:
        message += f" | headers={safe_log_dict(headers)}"
    if params:
        message += f" | params={safe_log_dict(params)}"
    _http_logger.debug(message)


def log_http_response(status_code: int, url: str, elapsed_ms: float | None = None) -> None:
    """Trace a GitLab response on ``mrwatch.http``."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    timing = "" if elapsed_ms is None else f" in {elapsed_ms:.1f}ms"
    _http_logger.debug("%s <- %s%s", status_code, mask_sensitive_data(url), timing)


__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
]
