"""
Tests for message event publication from AutomationProgress.

Tests cover:
- One event per record on the severity topic
- Payload, source and correlation id
- Delivery from sync code and from inside a running loop
- Subscriber, bus and timeout failures never reaching the caller
- publish_events toggle
"""

import asyncio

import pytest
from structlog.testing import capture_logs

from planledger.automation import AutomationProgress
from planledger.core.events import Event, set_event_bus
from planledger.core.events.memory import InMemoryEventBus
from planledger.core.settings import LedgerSettings


def _subscribe(bus, pattern):
    received: list[Event] = []

    async def handler(event: Event):
        received.append(event)

    asyncio.run(bus.subscribe(pattern, handler))
    return received


class TestPublishFromSyncCode:
    def test_publishes_on_severity_topics(self, bus):
        received = _subscribe(bus, "*")
        progress = AutomationProgress(settings=LedgerSettings(), event_bus=bus, run_id="r1")

        progress.error("E1")
        progress.warn("W1")
        progress.info("I1")

        assert [e.event_type for e in received] == [
            "error-message",
            "warning-message",
            "info-message",
        ]
        assert [e.payload for e in received] == [
            {"message": "E1"},
            {"message": "W1"},
            {"message": "I1"},
        ]
        assert all(e.source == "automation" for e in received)
        assert all(e.correlation_id == "r1" for e in received)

    def test_topic_subscription_filters(self, bus):
        errors = _subscribe(bus, "error-message")
        progress = AutomationProgress(settings=LedgerSettings(), event_bus=bus)

        progress.info("I1")
        progress.error("E1")

        assert [e.payload["message"] for e in errors] == ["E1"]

    def test_uses_global_bus_by_default(self):
        bus = InMemoryEventBus()
        set_event_bus(bus)
        received = _subscribe(bus, "info-message")

        AutomationProgress(settings=LedgerSettings()).info("I1")

        assert len(received) == 1

    def test_publish_disabled(self, bus):
        received = _subscribe(bus, "*")
        progress = AutomationProgress(
            settings=LedgerSettings(publish_events=False),
            event_bus=bus,
        )

        progress.error("E1")

        assert received == []
        assert progress.errors == ["E1"]


class TestPublishFailures:
    def test_failing_subscriber_is_swallowed(self, bus):
        async def broken(event: Event):
            raise RuntimeError("subscriber exploded")

        asyncio.run(bus.subscribe("*", broken))
        progress = AutomationProgress(settings=LedgerSettings(), event_bus=bus)

        progress.error("E1")

        assert progress.errors == ["E1"]

    def test_failing_bus_is_swallowed(self):
        class BrokenBus:
            async def publish(self, event):
                raise ConnectionError("bus down")

        progress = AutomationProgress(settings=LedgerSettings(), event_bus=BrokenBus())

        with capture_logs() as logs:
            progress.warn("W1")

        assert progress.warnings == ["W1"]
        failures = [entry for entry in logs if entry["event"] == "event_publish_failed"]
        assert failures[0]["error_type"] == "ConnectionError"

    def test_slow_bus_times_out(self):
        class SlowBus:
            async def publish(self, event):
                await asyncio.sleep(10)

        progress = AutomationProgress(
            settings=LedgerSettings(publish_timeout=0.05),
            event_bus=SlowBus(),
        )

        with capture_logs() as logs:
            progress.info("I1")

        assert progress.infos == ["I1"]
        assert any(entry["event"] == "event_publish_failed" for entry in logs)


class TestPublishInsideEventLoop:
    @pytest.mark.asyncio
    async def test_publish_is_scheduled(self):
        bus = InMemoryEventBus()
        received: list[Event] = []

        async def handler(event: Event):
            received.append(event)

        await bus.subscribe("error-message", handler)
        progress = AutomationProgress(settings=LedgerSettings(), event_bus=bus)

        progress.error("E1")
        assert progress.errors == ["E1"]

        await asyncio.sleep(0.05)
        assert [e.payload["message"] for e in received] == ["E1"]

    @pytest.mark.asyncio
    async def test_failing_bus_inside_loop_is_logged(self):
        class BrokenBus:
            async def publish(self, event):
                raise ConnectionError("bus down")

        progress = AutomationProgress(settings=LedgerSettings(), event_bus=BrokenBus())

        with capture_logs() as logs:
            progress.warn("W1")
            await asyncio.sleep(0.05)

        assert progress.warnings == ["W1"]
        failures = [entry for entry in logs if entry["event"] == "event_publish_failed"]
        assert len(failures) == 1
        assert failures[0]["event_type"] == "warning-message"
        assert failures[0]["error_type"] == "ConnectionError"
