"""Document store boundary and MongoDB adapter.

This module defines the collection protocol consumed by the ingest
pipeline and implements it over pymongo. Driver failures are wrapped
in ChirpStoreError; duplicate-key rejections are reported, not raised.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence

from core.config import ChirpConfig
from core.constants import MONGO_DUPLICATE_KEY_CODE
from core.errors import ChirpDependencyError, ChirpStoreError
from core.logging_config import get_logger
from core.types import BatchInsertResult, Record

_LOGGER = get_logger(__name__)


class DocumentCollection(Protocol):
    """One named partition of cached records."""

    @property
    def name(self) -> str: ...

    def exists(self, filter_spec: Mapping[str, Any]) -> bool: ...

    def insert_batch(self, records: Sequence[Record]) -> BatchInsertResult: ...

    def find(
        self,
        filter_spec: Mapping[str, Any],
        limit: int | None = None,
        sort: Sequence[tuple[str, int]] = (),
    ) -> list[dict[str, Any]]: ...

    def find_one(self, filter_spec: Mapping[str, Any]) -> dict[str, Any] | None: ...

    def ensure_unique_index(self, field_path: str) -> None: ...


class DocumentStore(Protocol):
    """Source of named collections."""

    def collection(self, name: str) -> DocumentCollection: ...


class MongoDocumentCollection:
    """DocumentCollection backed by a pymongo collection.

    ``indexed_fields`` may be shared between handles on the same collection
    so a unique index is created only once per store.
    """

    def __init__(self, collection: Any, indexed_fields: set[str] | None = None) -> None:
        self._collection = collection
        self._indexed_fields = indexed_fields if indexed_fields is not None else set()

    @property
    def name(self) -> str:
        return str(self._collection.name)

    def exists(self, filter_spec: Mapping[str, Any]) -> bool:
        """Return whether any document matches the exact-match filter.

        Raises:
            ChirpStoreError: If the query fails.
        """
        try:
            found = self._collection.find_one(dict(filter_spec), projection={"_id": 1})
        except Exception as error:
            raise ChirpStoreError(
                f"Failed to query collection '{self.name}' with {dict(filter_spec)!r}: {error}. "
                "Check the document store connection and retry."
            ) from error
        return found is not None

    def insert_batch(self, records: Sequence[Record]) -> BatchInsertResult:
        """Insert records as one unordered batch.

        Records are copied before insert so callers never see driver-added
        ``_id`` fields. Duplicate-key rejections leave sibling records
        committed and are reported through ``duplicate_indexes``.

        Args:
            records: Records to write, in order.

        Returns:
            Inserted count and rejected batch positions.

        Raises:
            ChirpStoreError: If the insert fails for any other reason.
        """
        if not records:
            return BatchInsertResult(inserted_count=0)
        documents = [dict(record) for record in records]
        try:
            result = self._collection.insert_many(documents, ordered=False)
        except Exception as error:
            duplicate_indexes = _duplicate_key_indexes(error)
            if duplicate_indexes is None:
                raise ChirpStoreError(
                    f"Failed to insert {len(documents)} records into '{self.name}': {error}. "
                    "Check the document store connection and retry."
                ) from error
            _LOGGER.info(
                "duplicate_records_skipped",
                collection=self.name,
                duplicate_count=len(duplicate_indexes),
            )
            return BatchInsertResult(
                inserted_count=len(documents) - len(duplicate_indexes),
                duplicate_indexes=frozenset(duplicate_indexes),
            )
        return BatchInsertResult(inserted_count=len(result.inserted_ids))

    def find(
        self,
        filter_spec: Mapping[str, Any],
        limit: int | None = None,
        sort: Sequence[tuple[str, int]] = (),
    ) -> list[dict[str, Any]]:
        """Return documents matching the filter.

        Raises:
            ChirpStoreError: If the query fails.
        """
        try:
            cursor = self._collection.find(dict(filter_spec))
            if sort:
                cursor = cursor.sort(list(sort))
            if limit:
                cursor = cursor.limit(limit)
            return [dict(document) for document in cursor]
        except Exception as error:
            raise ChirpStoreError(
                f"Failed to read collection '{self.name}': {error}. "
                "Check the document store connection and filter."
            ) from error

    def find_one(self, filter_spec: Mapping[str, Any]) -> dict[str, Any] | None:
        """Return the first matching document or None.

        Raises:
            ChirpStoreError: If the query fails.
        """
        try:
            document = self._collection.find_one(dict(filter_spec))
        except Exception as error:
            raise ChirpStoreError(
                f"Failed to read collection '{self.name}': {error}. "
                "Check the document store connection and filter."
            ) from error
        return None if document is None else dict(document)

    def ensure_unique_index(self, field_path: str) -> None:
        """Create a unique ascending index on the identifier field.

        Raises:
            ChirpStoreError: If index creation fails, e.g. existing duplicates.
        """
        if field_path in self._indexed_fields:
            return
        try:
            self._collection.create_index(
                [(field_path, 1)], unique=True, name=f"{field_path}_unique"
            )
        except Exception as error:
            raise ChirpStoreError(
                f"Failed to create unique index on '{field_path}' in '{self.name}': {error}. "
                "Remove duplicate records or fix permissions and retry."
            ) from error
        self._indexed_fields.add(field_path)


class MongoDocumentStore:
    """DocumentStore over one MongoDB database.

    Unique indexes are ensured once per collection name for the life of
    the store.
    """

    def __init__(self, config: ChirpConfig, client: Any | None = None) -> None:
        """Initialize the store.

        Args:
            config: Runtime configuration with URI and database name.
            client: Optional pre-built MongoClient; created lazily otherwise.
        """
        self._config = config
        self._client = client
        self._database: Any | None = None
        self._indexed_fields: dict[str, set[str]] = {}

    @property
    def database_name(self) -> str:
        return self._config.database_name

    def collection(self, name: str) -> MongoDocumentCollection:
        """Return the named collection handle.

        Raises:
            ChirpStoreError: If the database or collection cannot be selected.
        """
        database = self._get_database()
        try:
            collection = database[name]
        except Exception as error:
            raise ChirpStoreError(
                f"Failed to select collection '{name}' in '{self.database_name}': {error}. "
                "Use an endpoint that maps to a valid collection name."
            ) from error
        return MongoDocumentCollection(collection, self._indexed_fields.setdefault(name, set()))

    def close(self) -> None:
        """Close the underlying client if one was opened."""
        if self._client is not None:
            self._client.close()
        self._client = None
        self._database = None

    def _get_database(self) -> Any:
        if self._database is not None:
            return self._database
        if self._client is None:
            self._client = create_mongo_client(self._config)
        try:
            self._database = self._client[self._config.database_name]
        except Exception as error:
            raise ChirpStoreError(
                f"Failed to select database '{self._config.database_name}': {error}. "
                "Set CHIRP_MONGO_DB to a valid database name."
            ) from error
        return self._database


def create_mongo_client(config: ChirpConfig) -> Any:
    """Create a pymongo client for the configured URI.

    Args:
        config: Runtime config with the connection URI.

    Returns:
        MongoClient instance. Connection is established lazily by the driver.

    Raises:
        ChirpDependencyError: If pymongo is missing.
        ChirpStoreError: If the URI is rejected.
    """
    try:
        import pymongo
    except ImportError as error:
        raise ChirpDependencyError(
            "Document store access requires pymongo, but it is not installed. "
            "Install pymongo to cache feed records in MongoDB."
        ) from error
    try:
        return pymongo.MongoClient(config.mongo_uri)
    except Exception as error:
        raise ChirpStoreError(
            f"Invalid document store URI '{config.mongo_uri}': {error}. "
            "Set CHIRP_MONGO_URI to a mongodb:// or mongodb+srv:// URI."
        ) from error


def _duplicate_key_indexes(error: Exception) -> set[int] | None:
    """Return batch positions rejected as duplicates, or None for other failures.

    Only bulk write errors whose write errors are all duplicate-key
    rejections qualify.
    """
    details = getattr(error, "details", None)
    if not isinstance(details, Mapping):
        return None
    if details.get("writeConcernErrors"):
        return None
    write_errors = details.get("writeErrors") or []
    if not write_errors:
        return None
    indexes: set[int] = set()
    for write_error in write_errors:
        if write_error.get("code") != MONGO_DUPLICATE_KEY_CODE:
            return None
        indexes.add(int(write_error["index"]))
    return indexes
