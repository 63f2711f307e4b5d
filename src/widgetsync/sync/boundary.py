"""Daily boundary refresh.

Keeps exactly one alarm armed for shortly after the next local midnight.
Each fire refreshes the displays and then arms the following day.
"""

import logging
from datetime import datetime, time, timedelta
from typing import Callable

from ..core.errors import SchedulingError
from .alarms import AlarmClock, ScheduledWake

logger = logging.getLogger(__name__)

DEFAULT_TIMER_ID = "daily-widget-refresh"
DEFAULT_OFFSET_SECONDS = 5


class DailyBoundaryScheduler:
    """Arms the daily midnight refresh on an AlarmClock.

    Usage:
        scheduler = DailyBoundaryScheduler(alarm_clock, dispatcher.refresh_all)
        scheduler.schedule_next_boundary()
    """

    def __init__(
        self,
        alarm_clock: AlarmClock,
        on_boundary: Callable[[], object],
        offset_seconds: int = DEFAULT_OFFSET_SECONDS,
        timer_id: str = DEFAULT_TIMER_ID,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the scheduler.

        Args:
            alarm_clock: Alarm facility to arm on
            on_boundary: Refresh callback run on each fire
            offset_seconds: Seconds after midnight to fire (0-3599)
            timer_id: Alarm identity; re-arming replaces the prior alarm
            clock: Local wall clock
        """
        if not 0 <= offset_seconds < 3600:
            raise ValueError(f"offset_seconds must be in 0..3599, got {offset_seconds}")

        self._alarm_clock = alarm_clock
        self._on_boundary = on_boundary
        self._offset = offset_seconds
        self._timer_id = timer_id
        self._clock = clock

    @property
    def timer_id(self) -> str:
        return self._timer_id

    @property
    def pending_wake(self) -> ScheduledWake | None:
        """Currently armed boundary alarm, if any."""
        return self._alarm_clock.pending(self._timer_id)

    def next_boundary(self, now: datetime) -> datetime:
        """Next local midnight plus offset, always on the following day."""
        minutes, seconds = divmod(self._offset, 60)
        return datetime.combine(now.date() + timedelta(days=1), time(0, minutes, seconds))

    def schedule_next_boundary(self) -> ScheduledWake | None:
        """Arm the next boundary, replacing any earlier arming.

        Returns:
            The armed wake, or None if the alarm clock refused it
        """
        at = self.next_boundary(self._clock())
        try:
            wake = self._alarm_clock.arm(self._timer_id, at, self._fire)
        except SchedulingError as e:
            logger.warning("Could not arm daily refresh: %s", e)
            return None

        logger.info("Next daily refresh at %s", at)
        return wake

    def _fire(self) -> None:
        logger.info("Daily boundary reached, refreshing displays")
        try:
            self._on_boundary()
        except Exception as e:
            logger.exception("Daily refresh failed: %s", e)
        finally:
            self.schedule_next_boundary()
