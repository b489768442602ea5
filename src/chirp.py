"""Public SDK surface for Chirp.

This module provides a stable import path for library users.
It re-exports the client, typed models, and matching helpers.
"""

from __future__ import annotations

from core.config import ChirpConfig
from core.errors import (
    ChirpConfigError,
    ChirpDependencyError,
    ChirpError,
    ChirpFeedError,
    ChirpStoreError,
)
from core.types import IngestionResult, ReadOptions, RecordPredicate, WriteOptions
from ingest.feed_client import FeedClient
from ingest.pipeline import ingest_endpoint
from store.cache_sdk import ChirpClient
from store.collection_naming import normalize_collection_name
from store.document_store import MongoDocumentStore
from transforms.keyword_patterns import build_keyword_pattern
from transforms.path_resolution import resolve_path
from transforms.record_predicates import build_predicate, match_record

__all__ = [
    "ChirpClient",
    "ChirpConfig",
    "ChirpConfigError",
    "ChirpDependencyError",
    "ChirpError",
    "ChirpFeedError",
    "ChirpStoreError",
    "FeedClient",
    "IngestionResult",
    "MongoDocumentStore",
    "ReadOptions",
    "RecordPredicate",
    "WriteOptions",
    "build_keyword_pattern",
    "build_predicate",
    "ingest_endpoint",
    "match_record",
    "normalize_collection_name",
    "resolve_path",
]
