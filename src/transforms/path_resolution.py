"""Nested path resolution over schema-less records.

This module walks dot-separated paths through nested mappings and
optionally matches the resolved leaf against a regular expression.
Resolution is total: malformed input yields False, never an exception.
"""

from __future__ import annotations

import json
import re
from typing import Any, Mapping, Sequence

from core.constants import PATH_DELIMITER
from core.types import RecordValue


def split_path(path: str) -> tuple[str, ...]:
    """Split a dot-joined path into its non-empty segments.

    Args:
        path: External path string, e.g. ``user.screen_name``.

    Returns:
        Ordered segments; repeated or boundary delimiters are dropped.
    """
    return tuple(segment for segment in path.split(PATH_DELIMITER) if segment)


def is_empty_value(value: RecordValue) -> bool:
    """Return whether a record value counts as absent.

    None, False, numeric zero, ``""``, ``"0"`` and empty containers
    are all empty for require and grep purposes.

    Args:
        value: Any record value.

    Returns:
        True when the value is treated as missing.
    """
    if value is None or value is False:
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, str):
        return value in ("", "0")
    if isinstance(value, (Mapping, Sequence, set, frozenset)):
        return len(value) == 0
    return False


def resolve_path(
    record: Any,
    path: str,
    match_pattern: re.Pattern[str] | str | None = None,
) -> bool:
    """Check that a path holds a non-empty value, optionally matching a pattern.

    Examples:
        >>> data = {"name1": {"name2": "value", "name3": None}}
        >>> resolve_path(data, "name1.name2")
        True
        >>> resolve_path(data, "name1.name3")
        False
        >>> resolve_path(data, "name1.name2", r"alu")
        True
        >>> resolve_path(data, "name1.name2", r"^alu")
        False

    Args:
        record: Record to walk; non-mapping input never resolves.
        path: Dot-joined path. A path with no segments resolves to True.
        match_pattern: Optional regex searched in the leaf's string form.

    Returns:
        True when every segment resolves and the optional pattern matches.
    """
    segments = split_path(path)
    current: Any = record
    for segment in segments:
        if not isinstance(current, Mapping) or segment not in current:
            return False
        current = current[segment]
        if is_empty_value(current):
            return False
    if match_pattern is None or not segments:
        return True
    return _search(match_pattern, stringify_value(current))


def stringify_value(value: RecordValue) -> str:
    """Render a leaf value as the text a pattern is matched against.

    Args:
        value: Resolved leaf value.

    Returns:
        Strings unchanged, booleans lowercased, numbers via ``str``,
        containers as compact sorted JSON.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    try:
        return json.dumps(value, sort_keys=True, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return str(value)


def _search(match_pattern: re.Pattern[str] | str, text: str) -> bool:
    if isinstance(match_pattern, str):
        try:
            return re.search(match_pattern, text) is not None
        except re.error:
            return False
    return match_pattern.search(text) is not None


def lookup_path(record: Any, path: str) -> Any | None:
    """Return the non-empty value at a path, or None when it does not resolve.

    Args:
        record: Record to walk.
        path: Dot-joined path with at least one segment.

    Returns:
        The resolved leaf value, or None.
    """
    segments = split_path(path)
    if not segments:
        return None
    current: Any = record
    for segment in segments:
        if not isinstance(current, Mapping) or segment not in current:
            return None
        current = current[segment]
        if is_empty_value(current):
            return None
    return current
