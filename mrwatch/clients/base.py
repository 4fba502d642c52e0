"""Shared helpers for turning GitLab payloads into typed records."""

from collections.abc import Callable
from typing import Any, TypeVar

from mrwatch.exceptions import UpstreamFetchError

T = TypeVar("T")

# Raised by parsers on missing keys or unexpected shapes
_MALFORMED = (KeyError, TypeError, AttributeError, ValueError)


def parse_record(path: str, data: Any, parser: Callable[[Any], T]) -> T:
    """
    Apply ``parser`` to one payload from ``path``.

    Raises:
        UpstreamFetchError: If the payload does not have the expected shape
    """
    try:
        return parser(data)
    except _MALFORMED as e:
        raise UpstreamFetchError(f"Malformed response from {path}: {e!r}", path=path, cause=e) from e


def parse_records(path: str, items: Any, parser: Callable[[Any], T]) -> list[T]:
    """Apply ``parser`` to every item of a collection payload from ``path``."""
    if not isinstance(items, list):
        raise UpstreamFetchError(f"Expected a list from {path}", path=path)
    return [parse_record(path, item, parser) for item in items]
