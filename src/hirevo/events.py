"""Record mutation events.

Events are immutable and describe one successful create or update of a
record. They carry the store the mutation went through so handlers keep
working inside the same unit of work.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from hirevo.models import Base
    from hirevo.store import EntityStore


class RecordAction(str, Enum):
    """Kinds of record mutations that fire hooks."""

    CREATE = "create"
    UPDATE = "update"


@dataclass(frozen=True)
class RecordEvent:
    """A record was created or updated in ``collection``."""

    collection: str
    action: RecordAction
    record: Base
    store: EntityStore

    def get(self, field: str) -> Any:
        """Field value of the resulting record, None when absent."""
        return getattr(self.record, field, None)
