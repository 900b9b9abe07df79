"""After-success hooks for record mutations.

Usage:
    hooks = HookRegistry()
    hooks.on_after_create_success("jobs", handle_job)
    hooks.on_after_update_success("jobs", handle_job)

    await hooks.trigger(event)

Unlike a fire-and-forget emitter, handlers run in registration order and
the first failure propagates, so the caller can reject the mutation.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from hirevo.events import RecordAction, RecordEvent

logger = logging.getLogger(__name__)

RecordHandler = Callable[[RecordEvent], Awaitable[Any]]


@dataclass
class HandlerRegistration:
    """Registration of a record hook handler."""

    handler: RecordHandler
    collection: str
    action: RecordAction


class HookRegistry:
    """Per-collection after-success hooks."""

    def __init__(self) -> None:
        self._handlers: list[HandlerRegistration] = []

    def on_after_create_success(self, collection: str, handler: RecordHandler) -> None:
        """Register handler for successful creates in a collection."""
        self._handlers.append(
            HandlerRegistration(handler=handler, collection=collection, action=RecordAction.CREATE)
        )

    def on_after_update_success(self, collection: str, handler: RecordHandler) -> None:
        """Register handler for successful updates in a collection."""
        self._handlers.append(
            HandlerRegistration(handler=handler, collection=collection, action=RecordAction.UPDATE)
        )

    def off(self, handler: RecordHandler) -> None:
        """Unregister a handler from every collection."""
        self._handlers = [reg for reg in self._handlers if reg.handler is not handler]

    def handlers_for(self, collection: str, action: RecordAction) -> list[RecordHandler]:
        return [
            reg.handler
            for reg in self._handlers
            if reg.collection == collection and reg.action == action
        ]

    async def trigger(self, event: RecordEvent) -> None:
        """Run every matching handler in order, propagating the first failure."""
        for handler in self.handlers_for(event.collection, event.action):
            try:
                await handler(event)
            except Exception:
                logger.exception(
                    "Hook %s failed for %s on %s",
                    getattr(handler, "__qualname__", handler),
                    event.action.value,
                    event.collection,
                )
                raise
