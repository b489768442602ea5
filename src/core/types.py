"""Shared typed models.

This module defines immutable data models used by the matching,
ingest, and store layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence, Union

from core.constants import ERROR_PAYLOAD_KEY

Scalar = Union[str, int, float, bool, None]
RecordValue = Union[Scalar, Mapping[str, Any], Sequence[Any]]
Record = Mapping[str, Any]
FeedPayload = Union[list[Any], dict[str, Any]]


@dataclass(frozen=True)
class RecordPredicate:
    """Validated admission test over one record.

    Attributes:
        require: Paths that must hold non-empty values.
        grep: Paths mapped to keywords, one of which must match the value.
    """

    require: tuple[str, ...] = ()
    grep: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        """Whether the predicate admits every record."""
        return not self.require and not self.grep


@dataclass(frozen=True)
class WriteOptions:
    """Caller options for one selective ingestion.

    Values are kept raw so the pipeline can validate shapes before I/O.

    Attributes:
        endpoint: Feed endpoint, e.g. ``statuses/user_timeline``.
        query: Query parameters sent with the feed request.
        require: Paths that must be present with non-empty values.
        grep: Paths mapped to one keyword or a list of keywords.
    """

    endpoint: str
    query: Any = field(default_factory=dict)
    require: Any = ()
    grep: Any = field(default_factory=dict)


@dataclass(frozen=True)
class ReadOptions:
    """Options for reading cached records back from the store.

    Attributes:
        endpoint: Feed endpoint whose collection is read.
        filter: Exact-match store filter.
        limit: Maximum records; ``1`` returns a single record or None.
        sort: Ordered ``(field, direction)`` pairs, direction 1 or -1.
    """

    endpoint: str
    filter: Mapping[str, Any] = field(default_factory=dict)
    limit: int | None = None
    sort: tuple[tuple[str, int], ...] = ()


@dataclass(frozen=True)
class BatchInsertResult:
    """Outcome of one batch insert.

    Attributes:
        inserted_count: Number of records written.
        duplicate_indexes: Batch positions rejected by the unique index.
    """

    inserted_count: int
    duplicate_indexes: frozenset[int] = frozenset()


@dataclass(frozen=True)
class IngestionResult:
    """Result of one selective ingestion call.

    Attributes:
        saved: Records persisted by this call, in fetch order.
        read: Raw feed result, or the upstream error payload unchanged.
    """

    saved: tuple[Record, ...]
    read: FeedPayload

    @property
    def is_upstream_error(self) -> bool:
        """Whether ``read`` is an error payload from the feed API."""
        return isinstance(self.read, Mapping) and ERROR_PAYLOAD_KEY in self.read
