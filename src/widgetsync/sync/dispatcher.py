"""Refresh dispatcher: snapshot in, every installed display updated.

All trigger sources (change watcher, daily boundary, foreground resume)
call ``refresh_all``. It reads everything it needs fresh on each call, so
concurrent or repeated invocations converge on the same displays.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable

from ..core.threading import AtomicCounter, LockedValue
from ..snapshot.model import Snapshot
from ..snapshot.store import SnapshotStore
from ..widgets.base import DisplayKind, DisplayRegistry
from ..widgets.views import build_view, parse_accent

logger = logging.getLogger(__name__)


@dataclass
class RefreshReport:
    """Outcome of one refresh pass."""

    today: date
    snapshot_present: bool
    applied: list[DisplayKind] = field(default_factory=list)
    failed: list[DisplayKind] = field(default_factory=list)
    finished_at: datetime | None = None

    @property
    def ok(self) -> bool:
        return not self.failed


class RefreshDispatcher:
    """Recomputes and applies every display kind.

    Usage:
        dispatcher = RefreshDispatcher(store, registry)
        report = dispatcher.refresh_all()
    """

    def __init__(
        self,
        store: SnapshotStore,
        registry: DisplayRegistry,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._registry = registry
        self._clock = clock

        self._refresh_count = AtomicCounter()
        self._last_report: LockedValue[RefreshReport | None] = LockedValue(None)

    @property
    def refresh_count(self) -> int:
        """Number of completed refresh passes."""
        return self._refresh_count.value

    @property
    def last_report(self) -> RefreshReport | None:
        return self._last_report.get()

    def refresh_all(self) -> RefreshReport:
        """Rebuild and apply the view of every kind with installed instances.

        A failure in one kind is logged and the remaining kinds are still
        attempted. Never raises for snapshot or display problems.
        """
        try:
            snapshot = self._store.read()
        except Exception as e:
            logger.exception("Reading snapshot failed, using defaults: %s", e)
            snapshot = None

        today = self._clock().date()
        report = RefreshReport(today=today, snapshot_present=snapshot is not None)
        if snapshot is None:
            snapshot = Snapshot()

        accent = parse_accent(snapshot.theme_color)

        for kind in DisplayKind:
            try:
                instance_ids = list(self._registry.instances(kind))
                if not instance_ids:
                    continue

                view = build_view(kind, snapshot, today, accent)
                for instance_id in instance_ids:
                    self._registry.apply(kind, instance_id, view)
                report.applied.append(kind)
            except Exception as e:
                logger.exception("Refreshing %s displays failed: %s", kind.value, e)
                report.failed.append(kind)

        report.finished_at = self._clock()
        self._last_report.set(report)
        count = self._refresh_count.increment()

        logger.info(
            "Refresh #%d for %s: %d kind(s) applied, %d failed%s",
            count,
            today,
            len(report.applied),
            len(report.failed),
            "" if report.snapshot_present else " (no snapshot, defaults used)",
        )
        return report
