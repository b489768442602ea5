"""Core constants used across Chirp modules.

This module centralizes feed, store, and matching constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

DEFAULT_API_BASE_URL = "https://api.twitter.com/1.1/"
RESOURCE_SUFFIX = ".json"
DEFAULT_HTTP_TIMEOUT_SECONDS = 10.0
DEFAULT_MONGO_URI = "mongodb://localhost:27017"
DEFAULT_DATABASE_NAME = "chirp"
DEFAULT_ID_FIELD = "id_str"
DEFAULT_CONTENT_FIELD = "text"
DEFAULT_DEDUP_WORKERS = 1
DEFAULT_LOG_LEVEL = "INFO"
PATH_DELIMITER = "."
ENDPOINT_DELIMITER = "/"
COLLECTION_SEPARATOR = "-"
ERROR_PAYLOAD_KEY = "errors"
MONGO_DUPLICATE_KEY_CODE = 11000
KEYWORD_BOUNDARY_TEMPLATE = r"((^|\s|\W){keyword}\b)"
