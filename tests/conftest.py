"""
Shared test fixtures for the plant registry test suite.

Provides:
- In-memory key-value store and a PlantRepository over it
- Synchronous EventBus plus a recorder capturing every plant event
- A PlantRegistryService driven by a controllable clock

Usage:
    def test_example(registry, events, clock):
        plant_id = registry.register_plant("Basil", "Ocimum", owner="alice")
        clock.advance(days=10)
        assert events.topics() == ["plant_registered"]
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from app.enums.events import PlantEvent
from app.services.application.access_control import AccessControl
from app.services.application.plant_registry_service import PlantRegistryService
from app.utils.event_bus import EventBus
from infrastructure.database.kv_store import InMemoryKeyValueStore
from infrastructure.database.repositories.plants import PlantRepository

# ---------------------------------------------------------------------------
# Logging — keep test output clean
# ---------------------------------------------------------------------------
logging.getLogger("infrastructure").setLevel(logging.WARNING)
logging.getLogger("app").setLevel(logging.WARNING)


T0 = datetime(2026, 1, 1, 8, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: Any) -> datetime:
        self.now = self.now + timedelta(**delta)
        return self.now


class EventRecorder:
    """Collects (topic, payload) pairs for every plant event."""

    def __init__(self, event_bus: EventBus) -> None:
        self.received: list[tuple[str, dict]] = []
        for event in PlantEvent:
            event_bus.subscribe(event, self._make_callback(event.value))

    def _make_callback(self, topic: str):
        def _callback(payload: dict) -> None:
            self.received.append((topic, payload))

        return _callback

    def topics(self) -> list[str]:
        return [topic for topic, _ in self.received]

    def of(self, event: PlantEvent) -> list[dict]:
        return [payload for topic, payload in self.received if topic == event.value]

    def clear(self) -> None:
        self.received.clear()


# ========================== Storage Fixtures ==============================


@pytest.fixture()
def store():
    """Fresh in-memory store — no cross-test contamination."""
    return InMemoryKeyValueStore()


@pytest.fixture()
def plant_repo(store):
    return PlantRepository(store)


# ========================== Service Fixtures ==============================


@pytest.fixture()
def event_bus():
    return EventBus(asynchronous=False, queue_size=16)


@pytest.fixture()
def events(event_bus):
    return EventRecorder(event_bus)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def registry(plant_repo, event_bus, events, clock):
    return PlantRegistryService(
        plant_repo=plant_repo,
        event_bus=event_bus,
        access_control=AccessControl(),
        clock=clock,
    )


@pytest.fixture()
def plant_id(registry):
    """A plant owned by alice, registered at T0."""
    return registry.register_plant("Basil", "Ocimum basilicum", owner="alice")
