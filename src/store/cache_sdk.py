"""Python SDK for feed caching.

This module exposes high-level APIs for writing endpoint results
into the document store and reading cached records back.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from core.config import ChirpConfig
from core.logging_config import configure_logging
from core.types import FeedPayload, IngestionResult, ReadOptions, WriteOptions
from ingest.feed_client import FeedClient
from ingest.pipeline import FeedSource, ingest_endpoint
from store.collection_naming import normalize_collection_name
from store.document_store import DocumentCollection, DocumentStore, MongoDocumentStore


class ChirpClient:
    """Primary SDK entry point for caching feed endpoints."""

    def __init__(
        self,
        config: ChirpConfig | None = None,
        feed: FeedSource | None = None,
        store: DocumentStore | None = None,
    ) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration, read from env when omitted.
            feed: Optional feed collaborator; a FeedClient by default.
            store: Optional document store; a MongoDocumentStore by default.
        """
        self._config = config or ChirpConfig.from_env()
        configure_logging(self._config.log_level)
        self._feed = feed or FeedClient(self._config)
        self._store = store or MongoDocumentStore(self._config)

    @property
    def config(self) -> ChirpConfig:
        return self._config

    def resource_url(self, endpoint: str) -> str:
        """Return the feed resource URL for an endpoint."""
        resource_url = getattr(self._feed, "resource_url", None)
        if callable(resource_url):
            return resource_url(endpoint)
        return FeedClient(self._config).resource_url(endpoint)

    def collection(self, endpoint: str) -> DocumentCollection:
        """Return the collection caching an endpoint.

        ``statuses/user_timeline`` is cached in ``statuses-user_timeline``.
        """
        return self._store.collection(normalize_collection_name(endpoint))

    def feed_request(self, endpoint: str, query: Mapping[str, Any] | None = None) -> FeedPayload:
        """Perform a raw feed request without touching the store.

        Raises:
            ChirpFeedError: If the request fails.
        """
        return self._feed.fetch(endpoint, query)

    def write(
        self,
        endpoint: str,
        query: Mapping[str, Any] | None = None,
        require: Sequence[str] = (),
        grep: Mapping[str, str | Sequence[str]] | None = None,
    ) -> IngestionResult:
        """Fetch an endpoint and cache matching records not seen before.

        Args:
            endpoint: Feed endpoint, e.g. ``statuses/user_timeline``.
            query: Query parameters; empty values are dropped.
            require: Paths that must hold non-empty values.
            grep: Paths mapped to keywords that must appear as whole words.

        Returns:
            Saved records and the raw feed result.

        Raises:
            ChirpConfigError: If options have the wrong shape.
            ChirpFeedError: If the feed request fails.
            ChirpStoreError: If the store query or insert fails.
        """
        options = WriteOptions(
            endpoint=endpoint,
            query={} if query is None else query,
            require=require,
            grep={} if grep is None else grep,
        )
        return ingest_endpoint(options, self._feed, self._store, self._config)

    def read(
        self,
        endpoint: str,
        filter_spec: Mapping[str, Any] | None = None,
        limit: int | None = None,
        sort: Sequence[tuple[str, int]] = (),
    ) -> list[dict[str, Any]] | dict[str, Any] | None:
        """Read cached records for an endpoint.

        Args:
            endpoint: Feed endpoint whose collection is read.
            filter_spec: Exact-match filter.
            limit: Maximum records; ``1`` returns one record or None.
            sort: Ordered ``(field, direction)`` pairs.

        Returns:
            List of records, or a single record when ``limit == 1``.

        Raises:
            ChirpStoreError: If the query fails.
        """
        options = ReadOptions(
            endpoint=endpoint,
            filter=dict(filter_spec or {}),
            limit=limit,
            sort=tuple(sort),
        )
        return read_cached(self._store, options)


def read_cached(
    store: DocumentStore,
    options: ReadOptions,
) -> list[dict[str, Any]] | dict[str, Any] | None:
    """Read records from the collection of ``options.endpoint``."""
    collection = store.collection(normalize_collection_name(options.endpoint))
    if options.limit == 1:
        if options.sort:
            first = collection.find(options.filter, limit=1, sort=options.sort)
            return first[0] if first else None
        return collection.find_one(options.filter)
    return collection.find(options.filter, limit=options.limit, sort=options.sort)
