"""Publish/subscribe hooks fired after CRM mutations.

Subscribers are isolated from each other and from the publisher: a failing
handler is logged and the remaining handlers still run. ``emit`` schedules
delivery on the running event loop and returns immediately, ``publish``
awaits delivery to every subscriber.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

EventHandler = Callable[[Any], Awaitable[None] | None]


class CrmEvent(str, Enum):
    """Events emitted by the CRM core."""

    CONTACT_CREATED = "contact.created"
    CONTACT_UPDATED = "contact.updated"
    CONTACT_DELETED = "contact.deleted"
    INTERACTION_LOGGED = "interaction.logged"


class EventBus:
    """In-process event bus with per-subscriber failure isolation."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)
        self._pending: set[asyncio.Task[None]] = set()

    def subscribe(self, event: CrmEvent | str, handler: EventHandler) -> None:
        self._handlers[_event_key(event)].append(handler)

    def unsubscribe(self, event: CrmEvent | str, handler: EventHandler) -> None:
        handlers = self._handlers.get(_event_key(event), [])
        if handler in handlers:
            handlers.remove(handler)

    def handlers(self, event: CrmEvent | str) -> list[EventHandler]:
        return list(self._handlers.get(_event_key(event), []))

    def emit(self, event: CrmEvent | str, payload: Any) -> None:
        """Schedule delivery of ``payload`` without waiting for subscribers."""

        if not self._handlers.get(_event_key(event)):
            return
        task = asyncio.get_running_loop().create_task(self.publish(event, payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def publish(self, event: CrmEvent | str, payload: Any) -> None:
        """Deliver ``payload`` to every subscriber concurrently."""

        key = _event_key(event)
        handlers = self.handlers(key)
        if not handlers:
            return
        await asyncio.gather(*(self._deliver(key, handler, payload) for handler in handlers))

    async def wait_idle(self) -> None:
        """Wait until every scheduled delivery has finished."""

        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def _deliver(self, event: str, handler: EventHandler, payload: Any) -> None:
        try:
            result = handler(payload)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception(
                "Event handler failed",
                extra={"event": event, "handler": getattr(handler, "__qualname__", repr(handler))},
            )


def _event_key(event: CrmEvent | str) -> str:
    return event.value if isinstance(event, CrmEvent) else str(event)
