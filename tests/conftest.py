"""
Shared pytest fixtures and configuration for plan-ledger tests.

This module provides:
- Global state cleanup (event bus, cached settings, logging context)
- A quiet ledger (no event publication, in-memory mirror sink)
- An in-memory event bus

Usage:
    Fixtures are auto-discovered by pytest. Use them as function arguments.
"""

from pathlib import Path

import pytest

from planledger.automation import AutomationProgress, CollectingSink, JobHandle
from planledger.core.events import set_event_bus
from planledger.core.events.memory import InMemoryEventBus
from planledger.core.logging import clear_context
from planledger.core.settings import LedgerSettings, get_settings


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        if "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration", "slow"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Global State Cleanup
# =============================================================================


@pytest.fixture(autouse=True)
def reset_global_state(monkeypatch):
    """Isolate tests from the environment and from each other."""
    for name in [
        "PLANLEDGER_MIRROR_TO_STDOUT",
        "PLANLEDGER_PUBLISH_EVENTS",
        "PLANLEDGER_PUBLISH_TIMEOUT",
        "PLANLEDGER_LOG_LEVEL",
        "PLANLEDGER_LOG_FORMAT",
    ]:
        monkeypatch.delenv(name, raising=False)
    set_event_bus(None)
    get_settings.cache_clear()
    clear_context()
    yield
    set_event_bus(None)
    get_settings.cache_clear()
    clear_context()


# =============================================================================
# Ledger Fixtures
# =============================================================================


@pytest.fixture
def quiet_settings() -> LedgerSettings:
    """Settings with event publication off."""
    return LedgerSettings(publish_events=False)


@pytest.fixture
def sink() -> CollectingSink:
    return CollectingSink()


@pytest.fixture
def progress(quiet_settings, sink) -> AutomationProgress:
    """A fresh ledger that neither publishes nor prints."""
    return AutomationProgress(settings=quiet_settings, sink=sink, run_id="run-test")


@pytest.fixture
def bus() -> InMemoryEventBus:
    return InMemoryEventBus()


@pytest.fixture
def job_a() -> JobHandle:
    return JobHandle.create("spider", job_type="spider")


@pytest.fixture
def job_b() -> JobHandle:
    return JobHandle.create("activeScan", job_type="activeScan")
