"""Parsing helpers for list-valued deployment parameters."""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any


def _clean(values: Iterable[Any]) -> list[str]:
    return [str(v).strip() for v in values if str(v).strip()]


def parse_scopes(value: Any) -> list[str] | None:
    """Parse scopes from environment variables or other sources.

    Accepts a JSON list string (``'["User.Read", "openid"]'``), a comma- or
    whitespace-separated string, or a list. Blank entries are dropped.

    Returns:
        List of scopes, or None if ``value`` is None
    """
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return _clean(value)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return []
        if value.startswith("["):
            try:
                parsed = json.loads(value)
            except json.JSONDecodeError:
                pass
            else:
                if isinstance(parsed, list):
                    return _clean(parsed)
        if "," in value:
            return _clean(value.split(","))
        return value.split()
    raise ValueError(f"Invalid scopes value: {value!r}")


def parse_comma_separated(value: Any) -> list[str]:
    """Parse a comma-separated string or a list into trimmed, non-empty items.

    Order is preserved and empty entries, such as the one a trailing comma
    produces, are dropped. None gives an empty list.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return _clean(value)
    if isinstance(value, str):
        return _clean(value.split(","))
    raise ValueError(f"Invalid comma-separated value: {value!r}")


def parse_client_ids(value: Any) -> list[str]:
    """Parse the pre-authorized client ID list.

    Example:
        >>> parse_client_ids("a, b,, c ")
        ['a', 'b', 'c']
    """
    return parse_comma_separated(value)


def unique(values: Iterable[str]) -> list[str]:
    """Collapse duplicates, keeping first-seen order."""
    return list(dict.fromkeys(values))
