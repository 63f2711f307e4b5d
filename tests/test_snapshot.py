"""Tests for snapshot parsing and storage."""

import json
from datetime import date
from pathlib import Path

import pytest
from pydantic import ValidationError

from widgetsync.core.errors import SnapshotError
from widgetsync.snapshot.model import Snapshot, coerce_count, parse_date_key
from widgetsync.snapshot.store import JsonFileSnapshotStore, SnapshotStore


# ============================================================================
# Lenient field parsing
# ============================================================================


class TestCoercion:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(5, 5), (-3, 0), ("7", 7), ("abc", 0), (2.9, 2), (None, 0), (float("nan"), 0), ([], 0)],
    )
    def test_coerce_count(self, raw, expected: int) -> None:
        assert coerce_count(raw) == expected

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("2026-10-18", date(2026, 10, 18)),
            ("2026-02-30", None),
            ("2026-10-18T10:00:00", None),
            ("18/10/2026", None),
            (20261018, None),
        ],
    )
    def test_parse_date_key(self, raw, expected) -> None:
        assert parse_date_key(raw) == expected


class TestSnapshotModel:
    def test_empty_document_gives_defaults(self) -> None:
        snapshot = Snapshot.from_json("{}")
        assert snapshot == Snapshot()
        assert snapshot.habits_total == 0
        assert snapshot.today_snippet == ""
        assert snapshot.theme_color is None
        assert snapshot.per_day_stats == {}

    def test_bad_fields_fall_back_individually(self) -> None:
        snapshot = Snapshot.from_json(
            json.dumps(
                {
                    "habitsCompleted": "lots",
                    "habitsTotal": -2,
                    "habitsDate": "yesterday",
                    "statsStreak": 9,
                    "todaySnippet": 42,
                    "themeColor": "  ",
                }
            )
        )
        assert snapshot.habits_completed == 0
        assert snapshot.habits_total == 0
        assert snapshot.habits_progress_date is None
        assert snapshot.stats_streak == 9
        assert snapshot.today_snippet == ""
        assert snapshot.theme_color is None

    def test_calendar_days_drop_bad_keys(self) -> None:
        snapshot = Snapshot.from_json(
            json.dumps(
                {
                    "calendarDays": {
                        "2026-10-01": {"habitProgress": 250, "hasEntry": 1},
                        "not-a-date": {"habitProgress": 10},
                        "2026-10-02": "oops",
                    }
                }
            )
        )
        assert list(snapshot.per_day_stats) == [date(2026, 10, 1)]
        stats = snapshot.per_day_stats[date(2026, 10, 1)]
        assert stats.progress_percent == 100
        assert stats.has_entry

    def test_unknown_fields_ignored(self) -> None:
        snapshot = Snapshot.from_json('{"statsWords": 12, "futureField": true}')
        assert snapshot.stats_words == 12

    @pytest.mark.parametrize("text", ["not json", "[1, 2]", '"text"', b"\xff\xfe"])
    def test_unparseable_documents_raise(self, text) -> None:
        with pytest.raises(SnapshotError):
            Snapshot.from_json(text)

    def test_stats_for_month(self, sample_snapshot: Snapshot) -> None:
        october = sample_snapshot.stats_for_month(2026, 10)
        assert set(october) == {date(2026, 10, 1), date(2026, 10, 17), date(2026, 10, 18)}
        assert sample_snapshot.stats_for_month(2026, 9) == {
            date(2026, 9, 30): sample_snapshot.per_day_stats[date(2026, 9, 30)]
        }

    def test_to_json_uses_app_field_names(self, sample_snapshot: Snapshot) -> None:
        data = json.loads(sample_snapshot.to_json())
        assert data["habitsCompleted"] == 3
        assert data["themeColor"] == "#FF5733"
        assert data["calendarDays"]["2026-10-18"] == {"habitProgress": 60, "hasEntry": True}

    def test_is_immutable(self, sample_snapshot: Snapshot) -> None:
        with pytest.raises(ValidationError):
            sample_snapshot.stats_streak = 99


# ============================================================================
# File store
# ============================================================================


class TestJsonFileSnapshotStore:
    def test_satisfies_protocol(self, tmp_path: Path) -> None:
        assert isinstance(JsonFileSnapshotStore(tmp_path / "widget-data.json"), SnapshotStore)

    def test_missing_file_reads_none(self, tmp_path: Path) -> None:
        store = JsonFileSnapshotStore(tmp_path / "widget-data.json")
        assert store.load() is None
        assert store.read() is None

    def test_deeply_nested_file_reads_none(self, tmp_path: Path) -> None:
        path = tmp_path / "widget-data.json"
        path.write_text('{"calendarDays": ' + "[" * 200000 + "]" * 200000 + "}")
        store = JsonFileSnapshotStore(path)

        with pytest.raises(SnapshotError):
            store.load()
        assert store.read() is None

    def test_unparseable_file_reads_none(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        path = tmp_path / "widget-data.json"
        path.write_text("{ truncated")
        store = JsonFileSnapshotStore(path)

        with pytest.raises(SnapshotError):
            store.load()
        assert store.read() is None
        assert "Ignoring unreadable snapshot" in caplog.text

    def test_write_then_read(self, tmp_path: Path, sample_snapshot: Snapshot) -> None:
        store = JsonFileSnapshotStore(tmp_path / "nested" / "widget-data.json")
        store.write(sample_snapshot)

        assert store.read() == sample_snapshot
        assert [p.name for p in store.path.parent.iterdir()] == ["widget-data.json"]

    def test_write_replaces_whole_document(self, tmp_path: Path, sample_snapshot: Snapshot) -> None:
        store = JsonFileSnapshotStore(tmp_path / "widget-data.json")
        store.write(sample_snapshot)
        store.write(Snapshot(stats_entries=1))

        snapshot = store.read()
        assert snapshot.stats_entries == 1
        assert snapshot.habits_total == 0
