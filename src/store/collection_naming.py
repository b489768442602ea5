"""Endpoint to collection name mapping.

Endpoint ``statuses/user_timeline`` is cached in collection
``statuses-user_timeline``.
"""

from __future__ import annotations

import re

from core.constants import COLLECTION_SEPARATOR, ENDPOINT_DELIMITER

_DELIMITER_RUN = re.compile(f"{re.escape(ENDPOINT_DELIMITER)}+")


def normalize_collection_name(endpoint: str) -> str:
    """Trim boundary delimiters and collapse inner delimiter runs.

    Example:
        ``///first//second/////`` becomes ``first-second``.

    Args:
        endpoint: Feed endpoint identifier.

    Returns:
        Collection name; normalizing it again returns it unchanged.
    """
    trimmed = endpoint.strip(ENDPOINT_DELIMITER)
    return _DELIMITER_RUN.sub(COLLECTION_SEPARATOR, trimmed)
