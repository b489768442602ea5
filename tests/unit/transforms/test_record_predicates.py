"""Unit tests for record admission predicates."""

from __future__ import annotations

import pytest

from core.errors import ChirpConfigError
from core.types import RecordPredicate
from transforms.record_predicates import build_predicate, match_record

PLAIN = {
    "name": {"name2": {"name3": "yeppa"}, "name4": "yuppi"},
    "surname": "yappi",
}
WORDY = {
    "name": {"name2": {"name3": "yep pa"}, "name4": "pa red pa"},
    "surname": "#blue sky",
}


@pytest.mark.parametrize("record", [{}, PLAIN, {"x": None}, {"deep": {"er": [1, 2]}}])
def test_empty_predicate_admits_every_record(record: dict) -> None:
    """No conditions means vacuous truth."""
    assert match_record(record, RecordPredicate())
    assert match_record(record, build_predicate())


def test_require_passes_when_every_path_resolves() -> None:
    """All required paths present should match."""
    predicate = build_predicate(require=["surname", "name", "name.name2.name3", "name.name4"])

    assert match_record(PLAIN, predicate)


def test_require_fails_when_any_path_is_missing() -> None:
    """One missing required path should reject the record."""
    predicate = build_predicate(require=["surname", "name", "name.name2.name5", "name.name4"])

    assert not match_record(PLAIN, predicate)


def test_require_fails_on_empty_value() -> None:
    """Empty values count as missing for require."""
    predicate = build_predicate(require=["user.name"])

    assert not match_record({"user": {"name": ""}}, predicate)


def test_grep_matches_keyword_list_on_nested_path() -> None:
    """One matching keyword of the list is enough."""
    predicate = build_predicate(grep={"name.name2.name3": ["yep", "blue", "red"]})

    assert match_record(WORDY, predicate)


def test_grep_requires_every_path_to_match() -> None:
    """All grep entries must hold, mixing strings and lists."""
    predicate = build_predicate(
        grep={
            "name.name2.name3": ["yep", "blue", "red"],
            "name.name4": "red",
            "surname": ["blue"],
        }
    )

    assert match_record(WORDY, predicate)


def test_grep_rejects_partial_word_matches() -> None:
    """``ye`` inside ``yep`` is not a whole-word match."""
    predicate = build_predicate(grep={"name.name2.name3": ["ye", "blue", "red"]})

    assert not match_record(WORDY, predicate)


def test_grep_fails_on_missing_path() -> None:
    """A grep path that does not resolve rejects the record."""
    predicate = build_predicate(grep={"name.missing": "red"})

    assert not match_record(WORDY, predicate)


def test_require_and_grep_combine_with_and() -> None:
    """Both halves must pass."""
    passing_grep = build_predicate(require=["name.missing"], grep={"surname": "blue"})
    passing_require = build_predicate(require=["surname"], grep={"surname": "green"})

    assert not match_record(WORDY, passing_grep)
    assert not match_record(WORDY, passing_require)


def test_match_record_is_repeatable() -> None:
    """Evaluation should not depend on earlier calls."""
    accept = build_predicate(grep={"surname": "blue"})
    reject = build_predicate(grep={"surname": "sky blue"})

    results = [match_record(WORDY, accept), match_record(WORDY, reject), match_record(WORDY, accept)]

    assert results == [True, False, True]


@pytest.mark.parametrize("require", ["surname", 7, {"surname": 1}, None])
def test_build_predicate_rejects_non_list_require(require: object) -> None:
    """Require must be list-like."""
    with pytest.raises(ChirpConfigError):
        build_predicate(require=require)


@pytest.mark.parametrize("grep", ["text", ["text"], 3])
def test_build_predicate_rejects_non_mapping_grep(grep: object) -> None:
    """Grep must be a mapping."""
    with pytest.raises(ChirpConfigError):
        build_predicate(grep=grep)


@pytest.mark.parametrize("keywords", [[], [""], [1], 5, None])
def test_build_predicate_rejects_bad_keywords(keywords: object) -> None:
    """Grep keywords must be non-empty strings."""
    with pytest.raises(ChirpConfigError):
        build_predicate(grep={"text": keywords})


@pytest.mark.parametrize("path", ["", "...", 12])
def test_build_predicate_rejects_paths_without_segments(path: object) -> None:
    """Delimiter-only paths would always pass, so they are rejected."""
    with pytest.raises(ChirpConfigError):
        build_predicate(require=[path])
    with pytest.raises(ChirpConfigError):
        build_predicate(grep={path: "word"})


def test_build_predicate_normalizes_keyword_strings_to_tuples() -> None:
    """Single keyword strings become one-element tuples."""
    predicate = build_predicate(require=["a"], grep={"text": "red", "user.name": ["x", "y"]})

    assert predicate.require == ("a",)
    assert predicate.grep == {"text": ("red",), "user.name": ("x", "y")}
