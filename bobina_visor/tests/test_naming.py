"""
Unit tests for the naming module - snapshot filename parsing.

Tests cover:
- parse_snapshot_filename (filename -> FileMeta)
- display labels (short / long / month)
- find_most_recent_snapshot (live inventory source)

Run with: pytest bobina_visor/tests/test_naming.py -v
"""
from datetime import datetime, timezone

import pytest

from bobina_visor.naming import (
    extract_file_meta,
    find_most_recent_snapshot,
    format_date_label,
    format_long_label,
    format_month_label,
    parse_snapshot_filename,
)


def utc_ms(*args) -> int:
    return int(datetime(*args, tzinfo=timezone.utc).timestamp()) * 1000


# ============================================================================
# parse_snapshot_filename
# ============================================================================

class TestParseSnapshotFilename:
    def test_basic(self):
        meta = parse_snapshot_filename("20250910-000000.csv")
        assert meta is not None
        assert meta.timestamp == 1757462400000
        assert meta.date_key == "2025-09-10"
        assert meta.month_key == "2025-09"
        assert meta.raw_name == "20250910-000000.csv"

    def test_time_components(self):
        meta = parse_snapshot_filename("20250913-110416.csv")
        assert meta.timestamp == utc_ms(2025, 9, 13, 11, 4, 16)

    def test_uppercase_extension(self):
        meta = parse_snapshot_filename("20250913-110416.CSV")
        assert meta is not None
        assert meta.timestamp == utc_ms(2025, 9, 13, 11, 4, 16)

    def test_mixed_case_extension(self):
        assert parse_snapshot_filename("20250913-110416.CsV") is not None

    @pytest.mark.parametrize("name", [
        "",
        "inventario.csv",
        "20250913-110416.txt",
        "20250913-110416.csv.bak",
        "x20250913-110416.csv",
        "20250913-110416x.csv",
        "20250913_110416.csv",
        "2025091-110416.csv",
        "20250913-11041.csv",
        "20250913-1104166.csv",
        "20250913-110416",
    ])
    def test_non_matching(self, name):
        assert parse_snapshot_filename(name) is None

    @pytest.mark.parametrize("name", [
        "20251301-000000.csv",   # month 13
        "20250001-000000.csv",   # month 0
        "20250932-000000.csv",   # day 32
        "20250230-000000.csv",   # Feb 30
        "20250910-240000.csv",   # hour 24
        "20250910-006000.csv",   # minute 60
    ])
    def test_invalid_calendar_values(self, name):
        assert parse_snapshot_filename(name) is None

    def test_leap_day(self):
        meta = parse_snapshot_filename("20240229-120000.csv")
        assert meta is not None
        assert meta.date_key == "2024-02-29"

    def test_independent_of_local_timezone(self, monkeypatch):
        monkeypatch.setenv("TZ", "America/Santiago")
        meta = parse_snapshot_filename("20250910-235900.csv")
        assert meta.timestamp == utc_ms(2025, 9, 10, 23, 59, 0)
        assert meta.date_key == "2025-09-10"

    def test_labels(self):
        meta = parse_snapshot_filename("20250910-235900.csv")
        assert meta.date_label == "10-sept-2025"
        assert meta.long_label == "10 de septiembre de 2025"


class TestLabels:
    def test_short_label(self):
        assert format_date_label(utc_ms(2025, 1, 5)) == "05-ene-2025"

    def test_long_label(self):
        assert format_long_label(utc_ms(2025, 12, 31, 23, 59, 59)) == "31 de diciembre de 2025"

    def test_month_label(self):
        assert format_month_label(utc_ms(2025, 8, 1)) == "agosto de 2025"


class TestExtractFileMeta:
    def test_uses_file_name(self, entry_for):
        meta = extract_file_meta(entry_for("20250910-080000.csv"))
        assert meta.date_key == "2025-09-10"

    def test_nested_relative_path(self, snapshot_dir, write_snapshot):
        entry = write_snapshot("sub/20250910-080000.csv", [])
        assert entry.relative_path == "sub/20250910-080000.csv"
        assert extract_file_meta(entry) is not None

    def test_non_matching(self, entry_for):
        assert extract_file_meta(entry_for("notes.csv")) is None


# ============================================================================
# find_most_recent_snapshot
# ============================================================================

class TestFindMostRecentSnapshot:
    def test_empty(self):
        assert find_most_recent_snapshot([]) is None

    def test_picks_newest(self, entry_for):
        entries = [
            entry_for("20250910-080000.csv"),
            entry_for("20250912-070000.csv"),
            entry_for("20250911-235959.csv"),
        ]
        assert find_most_recent_snapshot(entries).name == "20250912-070000.csv"

    def test_ignores_non_matching_names(self, entry_for):
        entries = [
            entry_for("zzz-latest.csv"),
            entry_for("20250910-080000.csv"),
        ]
        assert find_most_recent_snapshot(entries).name == "20250910-080000.csv"

    def test_ignores_invalid_dates(self, entry_for):
        entries = [
            entry_for("20251399-000000.csv"),
            entry_for("20250910-080000.csv"),
        ]
        assert find_most_recent_snapshot(entries).name == "20250910-080000.csv"

    def test_falls_back_to_first_entry(self, entry_for):
        entries = [entry_for("b.csv"), entry_for("a.csv")]
        assert find_most_recent_snapshot(entries).name == "b.csv"

    def test_strict_has_no_fallback(self, entry_for):
        entries = [entry_for("b.csv"), entry_for("a.csv")]
        assert find_most_recent_snapshot(entries, strict=True) is None
