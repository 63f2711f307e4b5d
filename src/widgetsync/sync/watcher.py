"""Debounced snapshot change watcher.

A watchdog observer watches the snapshot's directory; every qualifying
event restarts a short quiet timer, and only when the timer runs out is the
refresh callback invoked. A burst of writes therefore yields one refresh.
"""

import logging
import os
import threading
from pathlib import Path
from typing import Any, Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

DEFAULT_QUIET_INTERVAL = 0.1

_WATCHED_EVENTS = frozenset({"created", "modified", "moved", "closed"})

TimerFactory = Callable[[float, Callable[[], None]], Any]


class _SnapshotEventHandler(FileSystemEventHandler):
    """Forwards events touching one file name to the watcher."""

    def __init__(self, file_name: str, on_event: Callable[[], None]) -> None:
        super().__init__()
        self._file_name = file_name
        self._on_event = on_event

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in _WATCHED_EVENTS:
            return

        # Atomic writers rename a temp file onto the target
        path = event.dest_path if event.event_type == "moved" else event.src_path
        if os.path.basename(os.fsdecode(path)) != self._file_name:
            return

        logger.debug("Snapshot %s event", event.event_type)
        self._on_event()


class DebouncedChangeWatcher:
    """Coalesces snapshot changes into single refreshes.

    Usage:
        watcher = DebouncedChangeWatcher(Path("data/widget-data.json"), dispatcher.refresh_all)
        watcher.start()
    """

    def __init__(
        self,
        path: str | Path,
        on_change: Callable[[], object],
        quiet_interval: float = DEFAULT_QUIET_INTERVAL,
        timer_factory: TimerFactory = threading.Timer,
    ) -> None:
        """Initialize the watcher.

        Args:
            path: Snapshot file to watch
            on_change: Refresh callback
            quiet_interval: Seconds without events before firing
            timer_factory: Builds a startable, cancellable timer from
                (interval, function), like threading.Timer
        """
        if quiet_interval <= 0:
            raise ValueError("quiet_interval must be positive")

        self._path = Path(path)
        self._on_change = on_change
        self._quiet_interval = quiet_interval
        self._timer_factory = timer_factory

        self._lock = threading.Lock()
        self._timer: Any = None
        self._observer: Any = None
        self._stopped = False

    @property
    def path(self) -> Path:
        return self._path

    @property
    def is_running(self) -> bool:
        return self._observer is not None

    @property
    def pending(self) -> bool:
        """True while a fire is scheduled."""
        with self._lock:
            return self._timer is not None

    def start(self) -> None:
        """Begin watching the snapshot's directory."""
        if self._observer is not None:
            logger.warning("Watcher already running")
            return

        directory = self._path.parent
        directory.mkdir(parents=True, exist_ok=True)

        with self._lock:
            self._stopped = False

        handler = _SnapshotEventHandler(self._path.name, self.notify_change)
        observer = Observer()
        observer.schedule(handler, str(directory), recursive=False)
        observer.daemon = True
        observer.start()
        self._observer = observer
        logger.info("Watching %s (quiet interval %.2fs)", self._path, self._quiet_interval)

    def stop(self) -> None:
        """Stop watching and drop any pending fire.

        Changes notified after this returns are ignored until the next
        ``start``.
        """
        with self._lock:
            self._stopped = True

        observer, self._observer = self._observer, None
        if observer is not None:
            logger.info("Stopping watcher")
            observer.stop()
            observer.join(timeout=2.0)

        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def notify_change(self) -> None:
        """Record a change: restart the quiet window."""
        with self._lock:
            if self._stopped:
                return

            if self._timer is not None:
                self._timer.cancel()

            timer = self._timer_factory(self._quiet_interval, lambda: self._fire(timer))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def _fire(self, timer: Any) -> None:
        with self._lock:
            # A newer event or stop() may have replaced this timer after it expired
            if self._stopped or self._timer is not timer:
                return
            self._timer = None

        logger.debug("Quiet window elapsed, refreshing")
        try:
            self._on_change()
        except Exception as e:
            logger.exception("Change refresh failed: %s", e)
