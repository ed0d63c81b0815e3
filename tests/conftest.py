"""Shared pytest fixtures for taskboard tests."""

from __future__ import annotations

import pytest

from taskboard.backends.mock import MockStore
from taskboard.coordinator import SyncCoordinator
from taskboard.events import ChangeEventBus
from taskboard.models.events import ChangeEvent
from taskboard.models.status import Notice
from taskboard.selector import BackendSelector

from .fakes import FakeRemoteGateway


@pytest.fixture
def bus() -> ChangeEventBus:
    return ChangeEventBus()


@pytest.fixture
def mock_store(bus: ChangeEventBus) -> MockStore:
    """Mock store with latencies disabled."""
    return MockStore(bus, latency_scale=0)


@pytest.fixture
def emitted(bus: ChangeEventBus) -> list[ChangeEvent]:
    """Every event published on the bus, in order."""
    events: list[ChangeEvent] = []
    bus.subscribe(events.append)
    return events


@pytest.fixture
def notices() -> list[Notice]:
    return []


@pytest.fixture
def remote() -> FakeRemoteGateway:
    return FakeRemoteGateway()


@pytest.fixture
def coordinator(
    remote: FakeRemoteGateway,
    mock_store: MockStore,
    bus: ChangeEventBus,
    notices: list[Notice],
) -> SyncCoordinator:
    """Coordinator with a configured (fake) remote backend."""
    selector = BackendSelector(remote, remote_configured=True)
    return SyncCoordinator(selector, mock_store, bus, notify=notices.append)


@pytest.fixture
def demo_coordinator(mock_store: MockStore, bus: ChangeEventBus, notices: list[Notice]) -> SyncCoordinator:
    """Coordinator without remote credentials."""
    selector = BackendSelector(None, remote_configured=False)
    return SyncCoordinator(selector, mock_store, bus, notify=notices.append)
