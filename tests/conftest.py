"""Pytest configuration and shared fixtures."""

import shutil
import tempfile
from pathlib import Path

import pytest

from src.domain.scaling import Scaling
from src.rangeslider.interaction.events import Event, EventBus, EventType


# Internal percent ranges onto an external 0..1000 range, denser at the low end
PIECEWISE_SEGMENTS = [
    ((0, 50), (0, 100)),
    ((50, 75), (100, 200)),
    ((75, 90), (200, 500)),
    ((90, 100), (500, 1000)),
]


class EventRecorder:
    """Collects every event emitted on a bus."""

    def __init__(self, bus: EventBus):
        self.events: list[Event] = []
        for event_type in EventType:
            bus.subscribe(event_type, self.events.append)

    def of(self, event_type: EventType) -> list[Event]:
        return [e for e in self.events if e.type == event_type]

    def clear(self) -> None:
        self.events.clear()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def linear_scaling():
    """Identity scaling over 0..100."""
    return Scaling.linear(0, 100)


@pytest.fixture
def piecewise_scaling():
    """Four-segment scaling from internal 0..100 onto external 0..1000."""
    return Scaling.piecewise(PIECEWISE_SEGMENTS)


@pytest.fixture
def event_bus():
    """Fresh event bus."""
    return EventBus(name="test")


@pytest.fixture
def recorder(event_bus):
    """Recorder subscribed to every event type of ``event_bus``."""
    return EventRecorder(event_bus)
