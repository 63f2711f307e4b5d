"""Shared test fixtures for the widget sync test suite.

This module provides reusable fixtures for common test scenarios including:
- Fixed local clocks
- Deterministic timers for the debounce state machine
- In-memory snapshot stores and recording display registries
- Configuration isolation
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable

import pytest

from widgetsync.core.config import ConfigManager
from widgetsync.snapshot.model import Snapshot
from widgetsync.widgets.base import DisplayKind

# ============================================================================
# Clock Fixtures
# ============================================================================


class FakeClock:
    """Settable local wall clock."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    """Sunday 2026-10-18 14:30 local time."""
    return FakeClock(datetime(2026, 10, 18, 14, 30))


# ============================================================================
# Timer Fixtures
# ============================================================================


class FakeTimer:
    """threading.Timer stand-in that only fires when told to."""

    def __init__(self, interval: float, function: Callable[[], None]) -> None:
        self.interval = interval
        self.function = function
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        """Run the timer function the way an expired threading.Timer would."""
        if not self.cancelled:
            self.function()


class FakeTimerFactory:
    """Records every timer a watcher creates."""

    def __init__(self) -> None:
        self.timers: list[FakeTimer] = []

    def __call__(self, interval: float, function: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(interval, function)
        self.timers.append(timer)
        return timer

    @property
    def live(self) -> list[FakeTimer]:
        return [t for t in self.timers if t.started and not t.cancelled]


@pytest.fixture
def timer_factory() -> FakeTimerFactory:
    return FakeTimerFactory()


# ============================================================================
# Snapshot / Display Fixtures
# ============================================================================


class MemorySnapshotStore:
    """Snapshot store backed by an attribute."""

    def __init__(self, snapshot: Snapshot | None = None) -> None:
        self.snapshot = snapshot
        self.reads = 0

    def read(self) -> Snapshot | None:
        self.reads += 1
        return self.snapshot


class RecordingRegistry:
    """Display registry that records every applied view model."""

    def __init__(self, instances: dict[DisplayKind, list[str]] | None = None) -> None:
        if instances is None:
            instances = {kind: [f"{kind.value}-1"] for kind in DisplayKind}
        self._instances = instances
        self.applied: list[tuple[DisplayKind, str, object]] = []
        self.failing: set[DisplayKind] = set()

    def instances(self, kind: DisplayKind) -> list[str]:
        return list(self._instances.get(kind, []))

    def apply(self, kind: DisplayKind, instance_id: str, view: object) -> None:
        if kind in self.failing:
            raise RuntimeError(f"{kind.value} display unavailable")
        self.applied.append((kind, instance_id, view))

    def views_for(self, kind: DisplayKind) -> list[object]:
        return [view for k, _, view in self.applied if k == kind]


@pytest.fixture
def sample_snapshot() -> Snapshot:
    """Snapshot as the journal app writes it on 2026-10-18."""
    return Snapshot.model_validate(
        {
            "habitsCompleted": 3,
            "habitsTotal": 5,
            "habitsDate": "2026-10-18",
            "todaySnippet": "Long walk by the river.",
            "todayDate": "2026-10-18",
            "statsEntries": 120,
            "statsStreak": 12,
            "statsWords": 45210,
            "themeColor": "#FF5733",
            "lastUpdated": "2026-10-18T14:00:00",
            "calendarDays": {
                "2026-10-01": {"habitProgress": 100, "hasEntry": True},
                "2026-10-17": {"habitProgress": 40, "hasEntry": False},
                "2026-10-18": {"habitProgress": 60, "hasEntry": True},
                "2026-09-30": {"habitProgress": 80, "hasEntry": True},
            },
        }
    )


@pytest.fixture
def memory_store(sample_snapshot: Snapshot) -> MemorySnapshotStore:
    return MemorySnapshotStore(sample_snapshot)


@pytest.fixture
def recording_registry() -> RecordingRegistry:
    return RecordingRegistry()


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def reset_config_singleton():
    """Keep the ConfigManager singleton from leaking between tests."""
    ConfigManager.reset_instance()
    yield
    ConfigManager.reset_instance()
