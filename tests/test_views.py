"""Tests for view-model derivation."""

import logging
from datetime import date

import pytest

from widgetsync.display.graphics import Color, Colors
from widgetsync.snapshot.model import Snapshot
from widgetsync.widgets.base import DisplayKind
from widgetsync.widgets.views import (
    PROMPTS,
    CalendarView,
    HabitProgressView,
    SnippetView,
    StatsView,
    build_view,
    epoch_day,
    habit_percent,
    parse_accent,
    prompt_for,
    view_to_dict,
)

TODAY = date(2026, 10, 18)


# ============================================================================
# Habit progress
# ============================================================================


class TestHabitPercent:
    @pytest.mark.parametrize(
        ("completed", "total", "expected"),
        [
            (3, 5, 60),
            (1, 3, 33),
            (2, 3, 67),
            (1, 8, 13),  # 12.5 rounds half up
            (5, 5, 100),
            (0, 4, 0),
        ],
    )
    def test_rounds_half_up(self, completed: int, total: int, expected: int) -> None:
        assert habit_percent(completed, total) == expected

    def test_zero_total_is_zero(self) -> None:
        assert habit_percent(3, 0) == 0

    def test_over_completion_clamps_to_100(self) -> None:
        assert habit_percent(7, 5) == 100


class TestHabitProgressView:
    def test_today_progress(self, sample_snapshot: Snapshot) -> None:
        view = build_view(DisplayKind.HABIT_PROGRESS, sample_snapshot, TODAY)
        assert isinstance(view, HabitProgressView)
        assert (view.completed, view.total, view.percent) == (3, 5, 60)
        assert view.label == "3/5"

    def test_stale_date_resets_completed_only(self) -> None:
        snapshot = Snapshot(habits_completed=4, habits_total=6, habits_progress_date=date(2026, 10, 17))
        view = build_view(DisplayKind.HABIT_PROGRESS, snapshot, TODAY)
        assert view.completed == 0
        assert view.total == 6
        assert view.percent == 0
        assert view.label == "0/6"

    def test_missing_date_keeps_completed(self) -> None:
        snapshot = Snapshot(habits_completed=2, habits_total=4)
        view = build_view(DisplayKind.HABIT_PROGRESS, snapshot, TODAY)
        assert view.completed == 2
        assert view.percent == 50

    def test_over_completion_label_unclamped(self) -> None:
        snapshot = Snapshot(habits_completed=7, habits_total=5, habits_progress_date=TODAY)
        view = build_view(DisplayKind.HABIT_PROGRESS, snapshot, TODAY)
        assert view.percent == 100
        assert view.label == "7/5"


# ============================================================================
# Stats and snippet
# ============================================================================


class TestStatsView:
    def test_copies_counters(self, sample_snapshot: Snapshot) -> None:
        view = build_view(DisplayKind.STATS, sample_snapshot, TODAY)
        assert isinstance(view, StatsView)
        assert (view.entries, view.streak, view.words) == (120, 12, 45210)

    def test_defaults_are_zero(self) -> None:
        view = build_view(DisplayKind.STATS, Snapshot(), TODAY)
        assert (view.entries, view.streak, view.words) == (0, 0, 0)


class TestSnippetView:
    def test_uses_snippet_when_present(self, sample_snapshot: Snapshot) -> None:
        view = build_view(DisplayKind.SNIPPET, sample_snapshot, TODAY)
        assert isinstance(view, SnippetView)
        assert view.text == "Long walk by the river."
        assert not view.is_prompt
        assert view.date_label == "Sunday, October 18, 2026"

    def test_blank_snippet_falls_back_to_prompt(self) -> None:
        view = build_view(DisplayKind.SNIPPET, Snapshot(today_snippet="   \n"), TODAY)
        assert view.is_prompt
        assert view.text == prompt_for(TODAY)
        assert view.text in PROMPTS


class TestPrompts:
    def test_epoch_day(self) -> None:
        assert epoch_day(date(1970, 1, 1)) == 0
        assert epoch_day(date(1970, 1, 31)) == 30

    def test_rotation_follows_epoch_day(self) -> None:
        assert prompt_for(date(1970, 1, 1)) == "What made you smile today?"
        assert prompt_for(date(1970, 1, 2)) == "What are you grateful for?"
        assert prompt_for(date(1970, 1, 8)) == "What made you smile today?"

    def test_same_prompt_all_day_and_changes_next_day(self) -> None:
        assert prompt_for(TODAY) == prompt_for(date(2026, 10, 18))
        assert prompt_for(TODAY) != prompt_for(date(2026, 10, 19))

    def test_full_cycle_every_week(self) -> None:
        week = {prompt_for(date(2026, 10, day)) for day in range(12, 19)}
        assert week == set(PROMPTS)


# ============================================================================
# Calendar
# ============================================================================


class TestCalendarView:
    def test_labels_and_cells(self, sample_snapshot: Snapshot) -> None:
        view = build_view(DisplayKind.CALENDAR, sample_snapshot, TODAY)
        assert isinstance(view, CalendarView)
        assert view.month_label == "OCT"
        assert view.date_label == "18-10-2026 SUN"
        assert view.streak == 12
        assert len(view.cells) == 42

    def test_only_current_month_stats(self, sample_snapshot: Snapshot) -> None:
        view = build_view(DisplayKind.CALENDAR, sample_snapshot, TODAY)
        by_day = {cell.day_number: cell for cell in view.cells if not cell.is_empty}
        assert by_day[1].progress_percent == 100 and by_day[1].has_entry
        assert by_day[18].is_today and by_day[18].progress_percent == 60
        # 2026-09-30 must not leak into day 30
        assert by_day[30].progress_percent == 0


# ============================================================================
# Accent
# ============================================================================


class TestAccent:
    def test_absent_uses_default(self) -> None:
        assert parse_accent(None) == Colors.DEFAULT_ACCENT
        assert parse_accent("") == Colors.DEFAULT_ACCENT

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("#FF5733", Color(255, 87, 51)),
            ("#80FF5733", Color(255, 87, 51)),
            ("#F53", Color(255, 85, 51)),
            ("red", Color(255, 0, 0)),
            ("Grey", Color(136, 136, 136)),
            (" teal ", Color(0, 128, 128)),
        ],
    )
    def test_hex_forms(self, raw: str, expected: Color) -> None:
        assert parse_accent(raw) == expected

    def test_unparseable_logs_and_defaults(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="widgetsync.widgets.views"):
            assert parse_accent("not-a-color") == Colors.DEFAULT_ACCENT
        assert "Unparseable theme color" in caplog.text

    def test_every_kind_shares_the_snapshot_accent(self, sample_snapshot: Snapshot) -> None:
        accents = {build_view(kind, sample_snapshot, TODAY).accent for kind in DisplayKind}
        assert accents == {Color(255, 87, 51)}


class TestViewToDict:
    def test_habit_view(self, sample_snapshot: Snapshot) -> None:
        data = view_to_dict(build_view(DisplayKind.HABIT_PROGRESS, sample_snapshot, TODAY))
        assert data["kind"] == "habit_progress"
        assert data["accent"] == "#ff5733"
        assert data["label"] == "3/5"
        assert data["percent"] == 60

    def test_build_is_deterministic(self, sample_snapshot: Snapshot) -> None:
        for kind in DisplayKind:
            assert build_view(kind, sample_snapshot, TODAY) == build_view(kind, sample_snapshot, TODAY)
