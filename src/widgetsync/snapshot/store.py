"""Snapshot storage.

The journal app owns the snapshot and replaces it wholesale. Readers get
either the latest complete document or None; never a partial write.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable

from ..core.errors import SnapshotError
from .model import Snapshot

logger = logging.getLogger(__name__)


@runtime_checkable
class SnapshotStore(Protocol):
    """Read side of the snapshot resource."""

    def read(self) -> Snapshot | None:
        """Return the latest snapshot, or None when absent or unreadable."""
        ...


class JsonFileSnapshotStore:
    """Snapshot stored as a single JSON file.

    Writes go through a temp file in the same directory followed by an
    atomic rename, so a concurrent ``read`` sees the old or the new
    document in full.

    Usage:
        store = JsonFileSnapshotStore(Path("data/widget-data.json"))
        snapshot = store.read() or Snapshot()
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        """Path of the snapshot file."""
        return self._path

    def load(self) -> Snapshot | None:
        """Read and parse the snapshot file.

        Returns:
            Parsed snapshot, or None if the file does not exist

        Raises:
            SnapshotError: If the file exists but cannot be read or parsed
        """
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise SnapshotError(
                "Failed to read snapshot", details={"path": str(self._path)}, cause=e
            ) from e

        return Snapshot.from_json(raw)

    def read(self) -> Snapshot | None:
        """Return the latest snapshot, or None when absent or unparseable."""
        try:
            snapshot = self.load()
        except SnapshotError as e:
            logger.warning("Ignoring unreadable snapshot %s: %s", self._path, e)
            return None

        if snapshot is None:
            logger.debug("Snapshot file not found: %s", self._path)
        return snapshot

    def write(self, snapshot: Snapshot) -> None:
        """Atomically replace the snapshot document.

        Raises:
            SnapshotError: If the file cannot be written
        """
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(
            prefix=".widget-data-", suffix=".tmp", dir=self._path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(snapshot.to_json())
            os.replace(temp_name, self._path)
        except OSError as e:
            Path(temp_name).unlink(missing_ok=True)
            raise SnapshotError(
                "Failed to write snapshot", details={"path": str(self._path)}, cause=e
            ) from e

        logger.debug("Wrote snapshot to %s", self._path)
