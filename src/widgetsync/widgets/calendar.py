"""Month grid composition for the calendar widget.

The grid is 6 rows by 7 columns, weeks start on Saturday, and every slot
is described by a ``DayCell``. Composition is a pure function of its
arguments.
"""

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Mapping

from ..snapshot.model import DayStats

GRID_ROWS = 6
GRID_COLUMNS = 7
GRID_SIZE = GRID_ROWS * GRID_COLUMNS

# Column headers, Saturday first
WEEKDAY_LABELS = ("S", "S", "M", "T", "W", "T", "F")


@dataclass(frozen=True)
class DayCell:
    """Rendering-ready state of one grid slot.

    Attributes:
        day_number: Day of month, 0 for an empty slot
        progress_percent: Habit completion for the day (0-100)
        has_entry: Whether a journal entry exists for the day
        is_today: Whether the slot is the current local date
    """

    day_number: int = 0
    progress_percent: int = 0
    has_entry: bool = False
    is_today: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "progress_percent", max(0, min(100, self.progress_percent)))

    @property
    def is_empty(self) -> bool:
        return self.day_number == 0


EMPTY_CELL = DayCell()


def first_weekday_offset(year: int, month: int) -> int:
    """Column of day 1 in a Saturday-first week.

    Saturday maps to 0, Sunday to 1, and so on through Friday at 6.
    """
    # date.weekday(): Monday=0 ... Saturday=5, Sunday=6
    return (date(year, month, 1).weekday() + 2) % 7


def days_in_month(year: int, month: int) -> int:
    """Number of days in a month of the Gregorian calendar."""
    return calendar.monthrange(year, month)[1]


def compose(
    year: int,
    month: int,
    today: date,
    per_day_stats: Mapping[date, DayStats],
) -> list[DayCell]:
    """Lay out one month as 42 cells in row-major order.

    Args:
        year: Calendar year
        month: Month (1-12)
        today: Current local date, highlighted when inside the month
        per_day_stats: Stats keyed by exact date; other months are ignored

    Returns:
        List of exactly 42 DayCell values

    Raises:
        ValueError: If month is outside 1-12
    """
    offset = first_weekday_offset(year, month)
    last_day = days_in_month(year, month)

    cells: list[DayCell] = []
    for slot in range(GRID_SIZE):
        day_number = slot - offset + 1
        if day_number < 1 or day_number > last_day:
            cells.append(EMPTY_CELL)
            continue

        day = date(year, month, day_number)
        stats = per_day_stats.get(day)
        cells.append(
            DayCell(
                day_number=day_number,
                progress_percent=stats.progress_percent if stats else 0,
                has_entry=stats.has_entry if stats else False,
                is_today=day == today,
            )
        )

    return cells


def rows(cells: list[DayCell]) -> list[list[DayCell]]:
    """Split a composed grid into its 6 week rows."""
    return [cells[i : i + GRID_COLUMNS] for i in range(0, len(cells), GRID_COLUMNS)]
