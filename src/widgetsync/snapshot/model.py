"""Snapshot value model.

The journal app writes one JSON document with every widget-displayable
value. Parsing is lenient: a malformed field falls back to its default
instead of rejecting the whole document, so a single bad value never
blanks every widget.
"""

import json
import math
import re
from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..core.errors import SnapshotError

_DATE_KEY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date_key(value: Any) -> date | None:
    """Parse a ``YYYY-MM-DD`` key; anything else yields None."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not _DATE_KEY.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def coerce_count(value: Any) -> int:
    """Coerce a counter to a non-negative int, 0 when unusable."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return max(0, value)
    if isinstance(value, float):
        return max(0, int(value)) if math.isfinite(value) else 0
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0
        return max(0, int(number)) if math.isfinite(number) else 0
    return 0


class DayStats(BaseModel):
    """Habit progress and entry flag for one calendar day."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    progress_percent: int = Field(0, alias="habitProgress")
    has_entry: bool = Field(False, alias="hasEntry")

    @field_validator("progress_percent", mode="before")
    @classmethod
    def clamp_percent(cls, v: Any) -> int:
        return min(100, coerce_count(v))

    @field_validator("has_entry", mode="before")
    @classmethod
    def coerce_flag(cls, v: Any) -> bool:
        if isinstance(v, bool):
            return v
        return isinstance(v, int) and v == 1


class Snapshot(BaseModel):
    """Immutable view of everything the widgets display.

    ``habits_completed`` may exceed ``habits_total``; upstream bounds are
    not trusted here and presentation code clamps.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    habits_completed: int = Field(0, alias="habitsCompleted")
    habits_total: int = Field(0, alias="habitsTotal")
    habits_progress_date: date | None = Field(None, alias="habitsDate")
    today_snippet: str = Field("", alias="todaySnippet")
    today_snippet_date: date | None = Field(None, alias="todayDate")
    stats_entries: int = Field(0, alias="statsEntries")
    stats_streak: int = Field(0, alias="statsStreak")
    stats_words: int = Field(0, alias="statsWords")
    theme_color: str | None = Field(None, alias="themeColor")
    last_updated: str | None = Field(None, alias="lastUpdated")
    per_day_stats: dict[date, DayStats] = Field(default_factory=dict, alias="calendarDays")

    @field_validator(
        "habits_completed",
        "habits_total",
        "stats_entries",
        "stats_streak",
        "stats_words",
        mode="before",
    )
    @classmethod
    def lenient_count(cls, v: Any) -> int:
        return coerce_count(v)

    @field_validator("habits_progress_date", "today_snippet_date", mode="before")
    @classmethod
    def lenient_date(cls, v: Any) -> date | None:
        return parse_date_key(v)

    @field_validator("today_snippet", mode="before")
    @classmethod
    def lenient_text(cls, v: Any) -> str:
        return v if isinstance(v, str) else ""

    @field_validator("theme_color", "last_updated", mode="before")
    @classmethod
    def optional_text(cls, v: Any) -> str | None:
        if not isinstance(v, str) or not v.strip():
            return None
        return v.strip()

    @field_validator("per_day_stats", mode="before")
    @classmethod
    def lenient_days(cls, v: Any) -> dict[date, Any]:
        if not isinstance(v, dict):
            return {}
        days: dict[date, Any] = {}
        for key, stats in v.items():
            day = parse_date_key(key)
            if day is None or not isinstance(stats, (dict, DayStats)):
                continue
            days[day] = stats
        return days

    @classmethod
    def from_json(cls, text: str | bytes) -> "Snapshot":
        """Parse a snapshot document.

        Raises:
            SnapshotError: If the text is not a JSON object
        """
        # Deeply nested documents exhaust the decoder's recursion limit
        try:
            data = json.loads(text)
        except (ValueError, UnicodeDecodeError, RecursionError) as e:
            raise SnapshotError("Snapshot is not valid JSON", cause=e) from e

        if not isinstance(data, dict):
            raise SnapshotError(
                "Snapshot must be a JSON object", details={"type": type(data).__name__}
            )

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise SnapshotError("Snapshot failed validation", cause=e) from e

    def to_json(self) -> str:
        """Serialize using the app's camelCase field names."""
        return self.model_dump_json(by_alias=True)

    def stats_for_month(self, year: int, month: int) -> dict[date, DayStats]:
        """Per-day stats restricted to one calendar month."""
        return {
            day: stats
            for day, stats in self.per_day_stats.items()
            if day.year == year and day.month == month
        }
