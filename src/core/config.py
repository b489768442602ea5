"""Runtime configuration model for Chirp.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from core.constants import (
    DEFAULT_API_BASE_URL,
    DEFAULT_CONTENT_FIELD,
    DEFAULT_DATABASE_NAME,
    DEFAULT_DEDUP_WORKERS,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_ID_FIELD,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MONGO_URI,
)
from core.errors import ChirpConfigError


@dataclass(frozen=True)
class ChirpConfig:
    """Validated runtime configuration.

    Attributes:
        api_base_url: Feed API root, always ending with a slash.
        bearer_token: Optional token sent in the Authorization header.
        http_timeout: Feed request timeout in seconds.
        mongo_uri: Document store connection URI.
        database_name: Document store database name.
        id_field: Path of the unique identifier inside each record.
        content_field: Path of the textual content inside each record.
        dedup_workers: Thread count for per-record existence checks.
        log_level: Standard logging level name.
    """

    api_base_url: str = DEFAULT_API_BASE_URL
    bearer_token: str | None = None
    http_timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    mongo_uri: str = DEFAULT_MONGO_URI
    database_name: str = DEFAULT_DATABASE_NAME
    id_field: str = DEFAULT_ID_FIELD
    content_field: str = DEFAULT_CONTENT_FIELD
    dedup_workers: int = DEFAULT_DEDUP_WORKERS
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "ChirpConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            ChirpConfigError: If environment values are invalid.
        """
        base_url = os.getenv("CHIRP_API_BASE_URL", DEFAULT_API_BASE_URL)
        database_name = os.getenv("CHIRP_MONGO_DB", DEFAULT_DATABASE_NAME).strip()
        if not database_name:
            raise ChirpConfigError(
                "Invalid CHIRP_MONGO_DB value: database name is empty. "
                "Set CHIRP_MONGO_DB to the database that holds cached records."
            )
        return cls(
            api_base_url=base_url.rstrip("/") + "/",
            bearer_token=os.getenv("CHIRP_BEARER_TOKEN") or None,
            http_timeout=_parse_timeout(
                os.getenv("CHIRP_HTTP_TIMEOUT", str(DEFAULT_HTTP_TIMEOUT_SECONDS))
            ),
            mongo_uri=os.getenv("CHIRP_MONGO_URI", DEFAULT_MONGO_URI),
            database_name=database_name,
            id_field=os.getenv("CHIRP_ID_FIELD", DEFAULT_ID_FIELD),
            content_field=os.getenv("CHIRP_CONTENT_FIELD", DEFAULT_CONTENT_FIELD),
            dedup_workers=_parse_dedup_workers(
                os.getenv("CHIRP_DEDUP_WORKERS", str(DEFAULT_DEDUP_WORKERS))
            ),
            log_level=_parse_log_level(os.getenv("CHIRP_LOG_LEVEL", DEFAULT_LOG_LEVEL)),
        )


def _parse_timeout(raw_value: str) -> float:
    """Parse the HTTP timeout environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Positive timeout in seconds.

    Raises:
        ChirpConfigError: If value is not a positive number.
    """
    try:
        timeout = float(raw_value)
    except ValueError as error:
        raise ChirpConfigError(
            "Invalid CHIRP_HTTP_TIMEOUT value: "
            f"expected number of seconds, got '{raw_value}'."
        ) from error
    if timeout <= 0:
        raise ChirpConfigError(
            f"Invalid CHIRP_HTTP_TIMEOUT value: expected a positive number, got '{raw_value}'."
        )
    return timeout


def _parse_dedup_workers(raw_value: str) -> int:
    """Parse the existence-check worker count."""
    try:
        workers = int(raw_value)
    except ValueError as error:
        raise ChirpConfigError(
            "Invalid CHIRP_DEDUP_WORKERS value: "
            f"expected integer, got '{raw_value}'. "
            "Set CHIRP_DEDUP_WORKERS to 1 or more."
        ) from error
    if workers < 1:
        raise ChirpConfigError(
            f"Invalid CHIRP_DEDUP_WORKERS value: expected 1 or more, got {workers}."
        )
    return workers


def _parse_log_level(raw_value: str) -> str:
    level_name = raw_value.strip().upper()
    if not isinstance(logging.getLevelName(level_name), int):
        raise ChirpConfigError(
            f"Invalid CHIRP_LOG_LEVEL value: unknown level '{raw_value}'. "
            "Use DEBUG, INFO, WARNING, or ERROR."
        )
    return level_name
