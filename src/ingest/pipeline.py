"""Selective ingest orchestration.

This module fetches one endpoint, filters records through the
admission predicate, checks identifiers against the store, and
persists the unseen remainder as a single batch.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Mapping, Protocol, Sequence

from core.config import ChirpConfig
from core.constants import ERROR_PAYLOAD_KEY
from core.errors import ChirpConfigError
from core.logging_config import get_logger
from core.types import FeedPayload, IngestionResult, Record, RecordPredicate, WriteOptions
from store.collection_naming import normalize_collection_name
from store.document_store import DocumentCollection, DocumentStore
from transforms.path_resolution import is_empty_value, lookup_path
from transforms.record_predicates import build_predicate, match_record

_LOGGER = get_logger(__name__)


class FeedSource(Protocol):
    """Anything able to fetch an endpoint with query parameters."""

    def fetch(self, endpoint: str, query: Mapping[str, Any] | None = None) -> FeedPayload: ...


class FeedIngestRunner:
    """Single-use runner for one selective ingestion call.

    Options are validated on construction, before any feed or store access.
    """

    def __init__(
        self,
        options: WriteOptions,
        feed: FeedSource,
        store: DocumentStore,
        config: ChirpConfig,
    ) -> None:
        self._options = options
        self._feed = feed
        self._store = store
        self._config = config
        self._collection_name = _collection_name_for(options.endpoint)
        self._query = clean_query(options.query)
        self._predicate = build_predicate(options.require, options.grep)

    @property
    def predicate(self) -> RecordPredicate:
        return self._predicate

    def run(self) -> IngestionResult:
        """Execute fetch, filter, dedup, and persist stages."""
        payload = self._feed.fetch(self._options.endpoint, self._query)
        if not payload:
            return IngestionResult(saved=(), read=[])
        if isinstance(payload, Mapping):
            if ERROR_PAYLOAD_KEY in payload:
                _LOGGER.warning(
                    "upstream_error_payload",
                    endpoint=self._options.endpoint,
                    errors=payload[ERROR_PAYLOAD_KEY],
                )
            return IngestionResult(saved=(), read=payload)
        collection = self._store.collection(self._collection_name)
        candidates = self._filter_records(payload)
        unseen = self._select_unseen(collection, candidates)
        saved = self._persist(collection, unseen)
        _log_ingest_completion(
            self._options.endpoint, collection.name, len(payload), len(candidates), len(saved)
        )
        return IngestionResult(saved=saved, read=payload)

    def _filter_records(self, records: Sequence[Any]) -> list[Record]:
        admitted: list[Record] = []
        seen_identifiers: set[str] = set()
        for record in records:
            if not self._is_eligible(record) or not match_record(record, self._predicate):
                continue
            identifier = _identifier_key(lookup_path(record, self._config.id_field))
            if identifier in seen_identifiers:
                continue
            seen_identifiers.add(identifier)
            admitted.append(record)
        _LOGGER.debug(
            "records_filtered",
            endpoint=self._options.endpoint,
            input_count=len(records),
            admitted_count=len(admitted),
        )
        return admitted

    def _is_eligible(self, record: Any) -> bool:
        if not isinstance(record, Mapping):
            return False
        identifier = lookup_path(record, self._config.id_field)
        content = lookup_path(record, self._config.content_field)
        return identifier is not None and content is not None

    def _select_unseen(
        self,
        collection: DocumentCollection,
        candidates: list[Record],
    ) -> list[Record]:
        id_field = self._config.id_field

        def is_stored(record: Record) -> bool:
            return collection.exists({id_field: lookup_path(record, id_field)})

        workers = self._config.dedup_workers
        if workers > 1 and len(candidates) > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                stored_flags = list(executor.map(is_stored, candidates))
        else:
            stored_flags = [is_stored(record) for record in candidates]
        return [record for record, stored in zip(candidates, stored_flags) if not stored]

    def _persist(
        self,
        collection: DocumentCollection,
        records: list[Record],
    ) -> tuple[Record, ...]:
        if not records:
            return ()
        collection.ensure_unique_index(self._config.id_field)
        result = collection.insert_batch(records)
        return tuple(
            record
            for index, record in enumerate(records)
            if index not in result.duplicate_indexes
        )


def ingest_endpoint(
    options: WriteOptions,
    feed: FeedSource,
    store: DocumentStore,
    config: ChirpConfig,
) -> IngestionResult:
    """Fetch an endpoint and persist matching, previously unseen records.

    Args:
        options: Endpoint, query, and require/grep options.
        feed: Feed API collaborator.
        store: Document store collaborator.
        config: Runtime configuration naming identifier and content fields.

    Returns:
        Saved records and the raw feed result. Upstream error payloads
        are returned as ``read`` with nothing saved.

    Raises:
        ChirpConfigError: If options have the wrong shape; raised before any I/O.
        ChirpFeedError: If the feed request fails.
        ChirpStoreError: If the store query or insert fails.
    """
    runner = FeedIngestRunner(options, feed, store, config)
    return runner.run()


def clean_query(query: Any) -> dict[str, Any]:
    """Drop empty values from a query mapping.

    Args:
        query: Raw query mapping.

    Returns:
        New mapping without None, False, zero, or empty values.

    Raises:
        ChirpConfigError: If query is not a mapping.
    """
    if query is None:
        return {}
    if not isinstance(query, Mapping):
        raise ChirpConfigError(
            f"Invalid query option: expected a mapping of parameters, got {type(query).__name__}. "
            "Pass query as a mapping, e.g. {'screen_name': 'example'}."
        )
    return {key: value for key, value in query.items() if not is_empty_value(value)}


def _collection_name_for(endpoint: str) -> str:
    name = normalize_collection_name(endpoint)
    if not name:
        raise ChirpConfigError(
            f"Invalid endpoint '{endpoint}': it names no collection. "
            "Use an endpoint path such as 'statuses/user_timeline'."
        )
    return name


def _identifier_key(identifier: Any) -> str:
    return repr(identifier)


def _log_ingest_completion(
    endpoint: str,
    collection_name: str,
    read_count: int,
    admitted_count: int,
    saved_count: int,
) -> None:
    """Log pipeline completion with contextual metadata."""
    _LOGGER.info(
        "ingest_completed",
        endpoint=endpoint,
        collection=collection_name,
        read_count=read_count,
        admitted_count=admitted_count,
        saved_count=saved_count,
    )
