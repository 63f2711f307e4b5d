"""Snapshot model and storage.

Provides:
- Snapshot / DayStats value models parsed from the app's JSON document
- SnapshotStore protocol and the JSON file implementation
"""

from .model import DayStats, Snapshot
from .store import JsonFileSnapshotStore, SnapshotStore

__all__ = [
    "DayStats",
    "Snapshot",
    "JsonFileSnapshotStore",
    "SnapshotStore",
]
