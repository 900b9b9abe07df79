"""Error taxonomy for entity access and report recomputation."""

from __future__ import annotations

from typing import Any


class HirevoError(Exception):
    """Base class for all hirevo errors."""

    code = "HIREVO_ERROR"


class NotFoundError(HirevoError):
    """Raised when a lookup matches no row."""

    code = "NOT_FOUND"

    def __init__(self, collection: str, lookup: Any):
        self.collection = collection
        self.lookup = lookup
        super().__init__(f"No record found in {collection} for {lookup}")


class QueryError(HirevoError):
    """Raised when reading from a collection fails."""

    code = "QUERY_FAILED"

    def __init__(self, collection: str, reason: str):
        self.collection = collection
        self.reason = reason
        super().__init__(f"Query on {collection} failed: {reason}")


class StorageError(HirevoError):
    """Raised when persisting an entity fails."""

    code = "STORAGE_FAILED"

    def __init__(self, collection: str, entity_id: str | None, reason: str):
        self.collection = collection
        self.entity_id = entity_id
        self.reason = reason
        super().__init__(f"Failed to persist {collection} record {entity_id}: {reason}")


class RateParseError(HirevoError):
    """Raised when a rate interval instant cannot be parsed."""

    code = "RATE_PARSE_FAILED"

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Cannot parse {field}={value!r}: {reason}")
