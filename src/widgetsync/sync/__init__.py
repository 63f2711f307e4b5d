"""Refresh triggers and the dispatcher they share.

Provides:
- RefreshDispatcher, the single refresh entry point
- DebouncedChangeWatcher for snapshot file changes
- DailyBoundaryScheduler and the AlarmClock it arms on
"""

from .alarms import AlarmClock, ScheduledWake
from .boundary import DailyBoundaryScheduler
from .dispatcher import RefreshDispatcher, RefreshReport
from .watcher import DebouncedChangeWatcher

__all__ = [
    "AlarmClock",
    "ScheduledWake",
    "DailyBoundaryScheduler",
    "RefreshDispatcher",
    "RefreshReport",
    "DebouncedChangeWatcher",
]
