"""Per-kind view models and the rules that derive them from a snapshot.

Each display kind has one frozen view-model type. ``build_view`` is the
single entry point the dispatcher uses; it is deterministic for a given
snapshot, date and accent.
"""

import logging
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Callable, ClassVar, Union

from ..display.graphics import Color, Colors
from ..snapshot.model import Snapshot
from .base import DisplayKind
from .calendar import DayCell, compose

logger = logging.getLogger(__name__)

PROMPTS = (
    "What made you smile today?",
    "What are you grateful for?",
    "What's on your mind right now?",
    "How are you feeling today?",
    "What did you learn today?",
    "What are you looking forward to?",
    "Describe your day in three words...",
)

DEFAULT_ACCENT = Colors.DEFAULT_ACCENT

_EPOCH = date(1970, 1, 1)


# =============================================================================
# View Models
# =============================================================================


@dataclass(frozen=True)
class HabitProgressView:
    """Today's habit completion ring."""

    kind: ClassVar[DisplayKind] = DisplayKind.HABIT_PROGRESS

    completed: int
    total: int
    percent: int
    accent: Color = DEFAULT_ACCENT

    @property
    def label(self) -> str:
        return f"{self.completed}/{self.total}"


@dataclass(frozen=True)
class StatsView:
    """Journal totals."""

    kind: ClassVar[DisplayKind] = DisplayKind.STATS

    entries: int
    streak: int
    words: int
    accent: Color = DEFAULT_ACCENT


@dataclass(frozen=True)
class SnippetView:
    """Today's note, or a writing prompt when there is none."""

    kind: ClassVar[DisplayKind] = DisplayKind.SNIPPET

    text: str
    is_prompt: bool
    date_label: str
    accent: Color = DEFAULT_ACCENT


@dataclass(frozen=True)
class CalendarView:
    """Current month grid with streak header."""

    kind: ClassVar[DisplayKind] = DisplayKind.CALENDAR

    month_label: str
    date_label: str
    streak: int
    cells: tuple[DayCell, ...] = field(default_factory=tuple)
    accent: Color = DEFAULT_ACCENT


ViewModel = Union[HabitProgressView, StatsView, SnippetView, CalendarView]


# =============================================================================
# Derivation Rules
# =============================================================================


def parse_accent(raw: str | None) -> Color:
    """Resolve the stored theme color, falling back to the default accent."""
    if not raw:
        return DEFAULT_ACCENT
    try:
        return Color.from_hex(raw)
    except ValueError:
        logger.warning("Unparseable theme color %r, using default accent", raw)
        return DEFAULT_ACCENT


def habit_percent(completed: int, total: int) -> int:
    """Completion percent rounded half up and clamped to 0-100."""
    if total <= 0:
        return 0
    # floor(completed * 100 / total + 0.5) in integer arithmetic
    percent = (completed * 200 + total) // (2 * total)
    return max(0, min(100, percent))


def epoch_day(day: date) -> int:
    """Days since 1970-01-01."""
    return (day - _EPOCH).days


def prompt_for(day: date) -> str:
    """Writing prompt of the day; the same for every display on that date."""
    return PROMPTS[epoch_day(day) % len(PROMPTS)]


def build_habit_progress(snapshot: Snapshot, today: date, accent: Color) -> HabitProgressView:
    completed = snapshot.habits_completed
    progress_date = snapshot.habits_progress_date
    # Progress recorded on another day resets; the habit count does not
    if progress_date is not None and progress_date != today:
        completed = 0

    total = snapshot.habits_total
    return HabitProgressView(
        completed=completed,
        total=total,
        percent=habit_percent(completed, total),
        accent=accent,
    )


def build_stats(snapshot: Snapshot, today: date, accent: Color) -> StatsView:
    return StatsView(
        entries=snapshot.stats_entries,
        streak=snapshot.stats_streak,
        words=snapshot.stats_words,
        accent=accent,
    )


def build_snippet(snapshot: Snapshot, today: date, accent: Color) -> SnippetView:
    snippet = snapshot.today_snippet.strip()
    date_label = f"{today:%A}, {today:%B} {today.day}, {today.year}"
    if snippet:
        return SnippetView(text=snippet, is_prompt=False, date_label=date_label, accent=accent)
    return SnippetView(text=prompt_for(today), is_prompt=True, date_label=date_label, accent=accent)


def build_calendar(snapshot: Snapshot, today: date, accent: Color) -> CalendarView:
    cells = compose(
        today.year,
        today.month,
        today,
        snapshot.stats_for_month(today.year, today.month),
    )
    return CalendarView(
        month_label=f"{today:%b}".upper(),
        date_label=f"{today:%d-%m-%Y} {today:%a}".upper(),
        streak=snapshot.stats_streak,
        cells=tuple(cells),
        accent=accent,
    )


_BUILDERS: dict[DisplayKind, Callable[[Snapshot, date, Color], ViewModel]] = {
    DisplayKind.HABIT_PROGRESS: build_habit_progress,
    DisplayKind.STATS: build_stats,
    DisplayKind.SNIPPET: build_snippet,
    DisplayKind.CALENDAR: build_calendar,
}


def build_view(
    kind: DisplayKind,
    snapshot: Snapshot,
    today: date,
    accent: Color | None = None,
) -> ViewModel:
    """Build the view model of one display kind.

    Args:
        kind: Display kind
        snapshot: Current snapshot (defaults when absent)
        today: Current local date
        accent: Resolved accent; parsed from the snapshot when omitted

    Returns:
        The kind's view model
    """
    if accent is None:
        accent = parse_accent(snapshot.theme_color)
    return _BUILDERS[DisplayKind(kind)](snapshot, today, accent)


def view_to_dict(view: ViewModel) -> dict[str, Any]:
    """JSON-friendly representation used by the control API."""
    data = asdict(view)
    data["kind"] = view.kind.value
    data["accent"] = view.accent.to_hex()
    if isinstance(view, HabitProgressView):
        data["label"] = view.label
    return data
