"""Event system for ledger notifications.

Why This Package Exists
-----------------------
The ledger announces every recorded message so that external subscribers
(a GUI panel, a progress reporter, a test harness) can follow a run as it
happens. The ledger has no knowledge of who, if anyone, is listening.

The ``EventBus`` protocol with a pluggable backend decouples the ledger from
its consumers.  The in-memory backend suits single-process runs and tests.

Usage::

    from planledger.core.events import Event, get_event_bus

    bus = get_event_bus()

    async def handler(event: Event):
        print(f"Error: {event.payload['message']}")

    sub_id = await bus.subscribe("error-message", handler)

Modules
-------
memory      InMemoryEventBus -- asyncio, single-node
"""

from __future__ import annotations

import asyncio
import functools
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Protocol, runtime_checkable

from planledger.core.logging import get_logger

__all__ = [
    "Event",
    "EventBus",
    "EventHandler",
    "get_event_bus",
    "set_event_bus",
    "publish_event",
]

log = get_logger(__name__)

# Publishes scheduled on a running loop, held until done
_background_tasks: set[asyncio.Task] = set()


# ── Event Model ──────────────────────────────────────────────────────────


@dataclass
class Event:
    """Event payload delivered to subscribers.

    Attributes:
        event_type: Topic name (e.g., ``error-message``, ``run.started``)
        source: Origin component
        payload: Event-specific data
        timestamp: When the event occurred (UTC)
        correlation_id: Optional ID linking related events (the run id)
        event_id: Unique event identifier
    """

    event_type: str
    source: str
    payload: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    correlation_id: str | None = None
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def matches(self, pattern: str) -> bool:
        """Check if event type matches a pattern (supports wildcards).

        Examples:
            - ``run.*`` matches ``run.started``, ``run.completed``
            - ``*`` matches everything
            - ``error-message`` matches exactly ``error-message``
        """
        if pattern == "*":
            return True
        if pattern.endswith(".*"):
            prefix = pattern[:-2]
            return self.event_type.startswith(prefix + ".")
        return self.event_type == pattern


# ── Type Aliases ─────────────────────────────────────────────────────────

EventHandler = Callable[[Event], Awaitable[None]]


# ── EventBus Protocol ────────────────────────────────────────────────────


@runtime_checkable
class EventBus(Protocol):
    """Protocol for event bus implementations."""

    async def publish(self, event: Event) -> None:
        """Publish an event to all matching subscribers."""
        ...

    async def subscribe(
        self,
        event_type: str,
        handler: EventHandler,
    ) -> str:
        """Subscribe to events matching a pattern.

        Returns:
            Subscription ID for later unsubscription
        """
        ...

    async def unsubscribe(self, subscription_id: str) -> None:
        """Remove a subscription."""
        ...

    async def close(self) -> None:
        """Clean up resources."""
        ...


# ── Default Event Bus ────────────────────────────────────────────────────

_event_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Get the global event bus, creating an in-memory one if none is set."""
    global _event_bus
    if _event_bus is None:
        from planledger.core.events.memory import InMemoryEventBus
        _event_bus = InMemoryEventBus()
    return _event_bus


def set_event_bus(bus: EventBus | None) -> None:
    """Set (or with ``None``, reset) the global event bus instance."""
    global _event_bus
    _event_bus = bus


def publish_event(
    event_type: str,
    source: str,
    payload: dict[str, Any] | None = None,
    correlation_id: str | None = None,
    *,
    bus: EventBus | None = None,
    timeout: float | None = None,
) -> bool:
    """Publish an event without blocking the caller on subscriber failures.

    Inside a running event loop the publish is scheduled as a task. Without
    one, it runs to completion in a fresh loop, bounded by *timeout*.
    Failures are logged and swallowed, including those of a scheduled task
    once it finishes.

    Args:
        event_type: Topic name
        source: Component origin
        payload: Event-specific data dictionary
        correlation_id: Optional correlation ID for linking related events
        bus: Target bus (defaults to the global bus)
        timeout: Seconds allowed for a synchronous publish

    Returns:
        ``False`` if a synchronous publish failed or timed out, else ``True``.
    """
    event = Event(
        event_type=event_type,
        source=source,
        payload=payload or {},
        correlation_id=correlation_id,
    )
    target = bus if bus is not None else get_event_bus()

    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop is not None:
        task = loop.create_task(target.publish(event))
        _background_tasks.add(task)
        task.add_done_callback(functools.partial(_publish_done, event_type))
        return True

    try:
        asyncio.run(asyncio.wait_for(target.publish(event), timeout=timeout))
    except Exception as e:
        _log_publish_failure(event_type, e)
        return False
    return True


def _log_publish_failure(event_type: str, error: BaseException) -> None:
    log.warning(
        "event_publish_failed",
        event_type=event_type,
        error_type=type(error).__name__,
        error=str(error),
    )


def _publish_done(event_type: str, task: asyncio.Task) -> None:
    _background_tasks.discard(task)
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        _log_publish_failure(event_type, error)
