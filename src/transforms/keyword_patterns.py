"""Keyword pattern compilation for grep conditions.

This module turns one keyword or a keyword list into a single
case-insensitive pattern that only matches whole-word occurrences.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Sequence

from core.constants import KEYWORD_BOUNDARY_TEMPLATE
from core.errors import ChirpConfigError


def build_keyword_pattern(keywords: str | Sequence[str]) -> re.Pattern[str]:
    """Compile keywords into one bounded alternation pattern.

    ``["one", "two"]`` compiles to
    ``((^|\\s|\\W)one\\b)|((^|\\s|\\W)two\\b)`` with IGNORECASE.
    Keywords are inserted verbatim, so regex syntax inside them is honored.

    Args:
        keywords: A single keyword or an ordered keyword sequence.

    Returns:
        Compiled case-insensitive pattern.

    Raises:
        ChirpConfigError: If no keywords are given or the result is not a valid regex.
    """
    if isinstance(keywords, str):
        return _compile_alternation((keywords,))
    return _compile_alternation(tuple(keywords))


@lru_cache(maxsize=256)
def _compile_alternation(keywords: tuple[str, ...]) -> re.Pattern[str]:
    if not keywords:
        raise ChirpConfigError(
            "Grep keyword list is empty. Provide at least one keyword per grep path."
        )
    alternation = "|".join(
        KEYWORD_BOUNDARY_TEMPLATE.format(keyword=keyword) for keyword in keywords
    )
    try:
        return re.compile(alternation, re.IGNORECASE)
    except re.error as error:
        raise ChirpConfigError(
            f"Grep keywords {list(keywords)!r} do not form a valid pattern: {error}. "
            "Escape regex metacharacters in keywords."
        ) from error
