"""Record admission predicates.

This module validates raw require/grep options into a typed predicate
and evaluates that predicate against nested records. Evaluation is pure:
identical inputs always give identical answers.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from core.errors import ChirpConfigError
from core.types import RecordPredicate
from transforms.keyword_patterns import build_keyword_pattern
from transforms.path_resolution import resolve_path, split_path


def build_predicate(require: Any = (), grep: Any = None) -> RecordPredicate:
    """Validate raw caller options into a predicate.

    Args:
        require: Sequence of path strings.
        grep: Mapping from path string to a keyword or keyword sequence.

    Returns:
        Immutable predicate.

    Raises:
        ChirpConfigError: If either option has the wrong shape, a path
            has no segments, or a keyword list is empty.
    """
    return RecordPredicate(
        require=_validate_require(require),
        grep=_validate_grep({} if grep is None else grep),
    )


def match_record(record: Mapping[str, Any], predicate: RecordPredicate) -> bool:
    """Return whether a record satisfies both require and grep conditions.

    Args:
        record: Record to test.
        predicate: Validated predicate; the empty predicate admits everything.

    Returns:
        True when every condition holds.
    """
    return matches_require(record, predicate.require) and matches_grep(record, predicate.grep)


def matches_require(record: Mapping[str, Any], require: Sequence[str]) -> bool:
    """Check that every required path holds a non-empty value."""
    return all(resolve_path(record, path) for path in require)


def matches_grep(record: Mapping[str, Any], grep: Mapping[str, Sequence[str]]) -> bool:
    """Check that every grep path holds a value matching one of its keywords."""
    for path, keywords in grep.items():
        if not resolve_path(record, path, build_keyword_pattern(keywords)):
            return False
    return True


def _validate_require(require: Any) -> tuple[str, ...]:
    if not _is_list_like(require):
        raise ChirpConfigError(
            f"Invalid require option: expected a list of paths, got {type(require).__name__}. "
            "Pass require as a list, e.g. ['user.screen_name']."
        )
    paths = tuple(require)
    for path in paths:
        _validate_path(path, option_name="require")
    return paths


def _validate_grep(grep: Any) -> dict[str, tuple[str, ...]]:
    if not isinstance(grep, Mapping):
        raise ChirpConfigError(
            f"Invalid grep option: expected a mapping of path to keywords, got {type(grep).__name__}. "
            "Pass grep as a mapping, e.g. {'text': ['python', 'mongodb']}."
        )
    validated: dict[str, tuple[str, ...]] = {}
    for path, keywords in grep.items():
        _validate_path(path, option_name="grep")
        validated[path] = _validate_keywords(path, keywords)
    return validated


def _validate_path(path: Any, option_name: str) -> None:
    if not isinstance(path, str):
        raise ChirpConfigError(
            f"Invalid {option_name} path {path!r}: expected a dot-separated string."
        )
    if not split_path(path):
        raise ChirpConfigError(
            f"Invalid {option_name} path {path!r}: path has no segments. "
            "Use at least one field name, e.g. 'user.name'."
        )


def _validate_keywords(path: str, keywords: Any) -> tuple[str, ...]:
    if isinstance(keywords, str):
        values: tuple[Any, ...] = (keywords,)
    elif _is_list_like(keywords):
        values = tuple(keywords)
    else:
        raise ChirpConfigError(
            f"Invalid grep keywords for '{path}': expected a string or list of strings, "
            f"got {type(keywords).__name__}."
        )
    if not values or not all(isinstance(value, str) and value for value in values):
        raise ChirpConfigError(
            f"Invalid grep keywords for '{path}': keywords must be non-empty strings."
        )
    build_keyword_pattern(values)
    return values


def _is_list_like(value: Any) -> bool:
    return isinstance(value, (Sequence, set, frozenset)) and not isinstance(
        value, (str, bytes, bytearray)
    )
