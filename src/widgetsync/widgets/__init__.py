"""Widget kinds, view models and calendar composition.

Provides:
- DisplayKind and the DisplayRegistry protocol
- Per-kind view models and build_view()
- compose() for the Saturday-first month grid
"""

from .base import DisplayKind, DisplayRegistry
from .calendar import DayCell, compose, days_in_month, first_weekday_offset
from .views import (
    CalendarView,
    HabitProgressView,
    SnippetView,
    StatsView,
    ViewModel,
    build_view,
    parse_accent,
)

__all__ = [
    "DisplayKind",
    "DisplayRegistry",
    "DayCell",
    "compose",
    "days_in_month",
    "first_weekday_offset",
    "CalendarView",
    "HabitProgressView",
    "SnippetView",
    "StatsView",
    "ViewModel",
    "build_view",
    "parse_accent",
]
