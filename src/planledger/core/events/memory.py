"""
In-memory event bus for a single process.

The ledger publishes from whatever thread records a message, and each such
publish may run in its own short-lived event loop. The subscription table is
therefore guarded by a ``threading.Lock`` rather than an ``asyncio.Lock``:
it is shared between loops, and a handler snapshot taken in one thread is
never torn by a subscribe or unsubscribe in another.

Events are delivered to a snapshot of the matching handlers and are not
stored.

Tags:
    plan-ledger, events, in-memory, threads, testing
"""

from __future__ import annotations

import asyncio
import itertools
import threading
from dataclasses import dataclass

from planledger.core.events import Event, EventHandler
from planledger.core.logging import get_logger

__all__ = ["InMemoryEventBus"]

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class _Subscription:
    sub_id: str
    pattern: str
    handler: EventHandler


class InMemoryEventBus:
    """Event bus delivering to in-process async handlers.

    Safe to publish to from several threads at once, each running its own
    loop. Handler failures are logged as ``event_handler_error`` and counted,
    never raised to the publisher.

    Example::

        bus = InMemoryEventBus()

        async def show(event: Event):
            print(event.payload["message"])

        await bus.subscribe("error-message", show)
        await bus.publish(Event(event_type="error-message", source="automation",
                                payload={"message": "Scan failed"}))
        # Output: Scan failed
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscriptions: dict[str, _Subscription] = {}
        self._ids = itertools.count(1)
        self._closed = False
        self._delivered = 0
        self._failed = 0

    def _matching(self, event: Event) -> tuple[_Subscription, ...]:
        with self._lock:
            if self._closed:
                return ()
            return tuple(
                sub for sub in self._subscriptions.values()
                if event.matches(sub.pattern)
            )

    async def publish(self, event: Event) -> None:
        """Deliver *event* to every matching handler, concurrently."""
        targets = self._matching(event)
        if not targets:
            return

        outcomes = await asyncio.gather(
            *(sub.handler(event) for sub in targets),
            return_exceptions=True,
        )

        failed = 0
        for sub, outcome in zip(targets, outcomes):
            if isinstance(outcome, Exception):
                failed += 1
                log.warning(
                    "event_handler_error",
                    subscription_id=sub.sub_id,
                    event_type=event.event_type,
                    error_type=type(outcome).__name__,
                    error=str(outcome),
                )
            elif isinstance(outcome, BaseException):
                raise outcome

        with self._lock:
            self._delivered += len(targets) - failed
            self._failed += failed

    async def subscribe(self, event_type: str, handler: EventHandler) -> str:
        """Subscribe *handler* to a topic or pattern (``*``, ``prefix.*``)."""
        return self.add_subscription(event_type, handler)

    async def unsubscribe(self, subscription_id: str) -> None:
        self.remove_subscription(subscription_id)

    def add_subscription(self, pattern: str, handler: EventHandler) -> str:
        """Register *handler* without needing a running loop."""
        with self._lock:
            sub_id = f"sub_{next(self._ids)}"
            self._subscriptions[sub_id] = _Subscription(sub_id, pattern, handler)
        return sub_id

    def remove_subscription(self, subscription_id: str) -> bool:
        """Drop a subscription. Returns ``False`` if the id was unknown."""
        with self._lock:
            return self._subscriptions.pop(subscription_id, None) is not None

    async def close(self) -> None:
        """Drop every subscription. Later publishes are ignored."""
        with self._lock:
            self._closed = True
            self._subscriptions.clear()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def subscription_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    @property
    def delivered_count(self) -> int:
        """Handler calls that completed without raising."""
        with self._lock:
            return self._delivered

    @property
    def failed_count(self) -> int:
        """Handler calls that raised."""
        with self._lock:
            return self._failed
