"""
Shared fixtures for the Bobina Visor test suite.

Provides:
- make_row: factory for a keyed CSV record that passes the general filter
- write_snapshot: factory writing snapshot CSV files into tmp_path
"""
import csv
from pathlib import Path

import pytest

from bobina_visor.models import FileEntry

COLUMNS = ["ROLL_ID", "PAPER_CODE", "WIDTH", "ESTADO", "COMPLETA", "LOCATION", "DEPO"]


def _row(**overrides) -> dict:
    row = {
        "ROLL_ID": "R1",
        "PAPER_CODE": "A",
        "WIDTH": "100",
        "ESTADO": "Stock",
        "COMPLETA": "Saldo",
        "LOCATION": "X",
        "DEPO": "Planta SFM",
    }
    row.update(overrides)
    return row


@pytest.fixture
def make_row():
    return _row


@pytest.fixture
def snapshot_dir(tmp_path) -> Path:
    folder = tmp_path / "snapshots"
    folder.mkdir()
    return folder


@pytest.fixture
def write_snapshot(snapshot_dir):
    """
    Write a CSV under snapshot_dir and return its FileEntry.

    rows are dicts; columns defaults to the full required column set.
    """
    def _write(name: str, rows: list[dict], columns: list[str] | None = None) -> FileEntry:
        columns = columns or COLUMNS
        path = snapshot_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=columns, extrasaction="ignore")
            writer.writeheader()
            for row in rows:
                writer.writerow(row)
        return FileEntry(path=path.resolve(), relative_path=path.relative_to(snapshot_dir).as_posix())

    return _write


@pytest.fixture
def entry_for():
    """FileEntry for a name that does not need to exist on disk."""
    def _entry(name: str) -> FileEntry:
        return FileEntry(path=Path("/nonexistent") / name, relative_path=name)

    return _entry
