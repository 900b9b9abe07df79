"""Record service: persist mutations and fire their after-success hooks."""

from __future__ import annotations

from typing import Any, TypeVar

from hirevo.events import RecordAction, RecordEvent
from hirevo.models import Base
from hirevo.services.hooks import HookRegistry
from hirevo.store import EntityStore, collection_name

M = TypeVar("M", bound=Base)


class RecordService:
    """Creates and updates records through the store.

    Hooks fire only after the write succeeded. A failing hook propagates,
    leaving the caller to roll the unit of work back.
    """

    def __init__(self, store: EntityStore, hooks: HookRegistry):
        self.store = store
        self.hooks = hooks

    async def create(self, record: M) -> M:
        """Persist a new record and fire create hooks."""
        await self.store.save(record)
        await self._fire(RecordAction.CREATE, record)
        return record

    async def update(self, record: M, **changes: Any) -> M:
        """Apply field changes to a record, persist it and fire update hooks."""
        model = type(record)
        unknown = [name for name in changes if name not in model.__mapper__.attrs]
        if unknown:
            raise ValueError(f"Unknown fields for {collection_name(model)}: {', '.join(unknown)}")

        for name, value in changes.items():
            setattr(record, name, value)
        await self.store.save(record)
        await self._fire(RecordAction.UPDATE, record)
        return record

    async def _fire(self, action: RecordAction, record: Base) -> None:
        event = RecordEvent(
            collection=collection_name(type(record)),
            action=action,
            record=record,
            store=self.store,
        )
        await self.hooks.trigger(event)
