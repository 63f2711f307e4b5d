"""Wall-clock alarm facility.

Alarms are checked against the local wall clock on every poll rather than
waited out with a monotonic delay, so an alarm that became due while the
host was suspended fires on the first poll after wake.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from ..core.errors import SchedulingError
from ..core.threading import StoppableThread, ThreadSafeDict

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduledWake:
    """One armed alarm."""

    identity: str
    at: datetime
    callback: Callable[[], None]


class AlarmClock:
    """Identity-keyed one-shot alarms.

    Arming an identity that is already armed replaces the earlier alarm,
    so at most one alarm per identity is ever pending.

    Usage:
        clock = AlarmClock()
        clock.start()
        clock.arm("daily-widget-refresh", tomorrow, refresh)
    """

    def __init__(
        self,
        poll_interval: float = 1.0,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._poll_interval = poll_interval
        self._clock = clock
        self._alarms: ThreadSafeDict[str, ScheduledWake] = ThreadSafeDict()
        self._thread: StoppableThread | None = None
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def pending_count(self) -> int:
        return len(self._alarms)

    def start(self) -> None:
        """Start the polling thread."""
        if self._running:
            logger.warning("Alarm clock already running")
            return

        logger.info("Starting alarm clock (poll every %.2fs)", self._poll_interval)
        self._running = True
        self._thread = StoppableThread(target=self._poll_loop, name="AlarmClockThread")
        self._thread.start()

    def stop(self) -> None:
        """Stop polling. Armed alarms are kept but no longer fire."""
        if not self._running:
            return

        logger.info("Stopping alarm clock")
        self._running = False
        if self._thread:
            self._thread.stop(timeout=2.0)
            self._thread = None

    def arm(self, identity: str, at: datetime, callback: Callable[[], None]) -> ScheduledWake:
        """Arm an alarm, replacing any alarm with the same identity.

        Raises:
            SchedulingError: If the alarm clock is not running
        """
        if not self._running:
            raise SchedulingError(
                "Alarm clock is not running",
                details={"identity": identity, "at": at.isoformat()},
            )

        wake = ScheduledWake(identity=identity, at=at, callback=callback)
        previous = self._alarms.swap(identity, wake)
        if previous is not None:
            logger.debug("Replaced alarm %s (%s -> %s)", identity, previous.at, at)
        else:
            logger.debug("Armed alarm %s for %s", identity, at)
        return wake

    def cancel(self, identity: str) -> bool:
        """Disarm an alarm. Returns True if one was pending."""
        return self._alarms.pop(identity, None) is not None

    def pending(self, identity: str) -> ScheduledWake | None:
        return self._alarms.get(identity)

    def fire_due(self) -> int:
        """Fire every alarm whose instant has passed.

        Returns:
            Number of alarms fired
        """
        now = self._clock()
        due = self._alarms.pop_where(lambda _identity, wake: wake.at <= now)

        for identity, wake in due:
            logger.info("Alarm %s due (armed for %s)", identity, wake.at)
            try:
                wake.callback()
            except Exception as e:
                logger.exception("Alarm %s callback failed: %s", identity, e)

        return len(due)

    def _poll_loop(self, thread: StoppableThread) -> None:
        logger.debug("Alarm loop started")

        while not thread.wait(self._poll_interval):
            try:
                self.fire_due()
            except Exception as e:
                logger.exception("Alarm loop error: %s", e)

        logger.debug("Alarm loop stopped")
