"""
Snapshot filename utilities.

Snapshot exports are named after the UTC instant they were taken:
"20250913-110416.csv" -> 2025-09-13 11:04:16 UTC. The extension is matched
case-insensitively ("20250913-110416.CSV" is valid).

Provides:
- parse_snapshot_filename (filename -> FileMeta)
- extract_file_meta (FileEntry -> FileMeta)
- find_most_recent_snapshot (live inventory source selection)
- Spanish display labels for days and months
"""
import logging
import re
from datetime import datetime, timezone
from typing import Iterable, Optional

from .models import FileEntry, FileMeta

logger = logging.getLogger(__name__)

SNAPSHOT_FILENAME_RE = re.compile(
    r"^(\d{4})(\d{2})(\d{2})-(\d{2})(\d{2})(\d{2})\.csv$", re.IGNORECASE
)

MONTHS_SHORT = (
    "ene", "feb", "mar", "abr", "may", "jun",
    "jul", "ago", "sept", "oct", "nov", "dic",
)
MONTHS_LONG = (
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
)


def _to_datetime(timestamp: int) -> datetime:
    return datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc)


def format_date_label(timestamp: int) -> str:
    """Short day label: 1757462400000 -> "10-sept-2025"."""
    dt = _to_datetime(timestamp)
    return f"{dt.day:02d}-{MONTHS_SHORT[dt.month - 1]}-{dt.year}"


def format_long_label(timestamp: int) -> str:
    """Long day label: "10 de septiembre de 2025"."""
    dt = _to_datetime(timestamp)
    return f"{dt.day:02d} de {MONTHS_LONG[dt.month - 1]} de {dt.year}"


def format_month_label(timestamp: int) -> str:
    """Month label: "septiembre de 2025"."""
    dt = _to_datetime(timestamp)
    return f"{MONTHS_LONG[dt.month - 1]} de {dt.year}"


def parse_snapshot_filename(name: str) -> Optional[FileMeta]:
    """
    Parse a snapshot filename into its UTC timestamp and labels.

    The whole name must be YYYYMMDD-HHMMSS.csv; calendar-invalid values
    (month 13, Feb 30, hour 24, ...) are treated as non-matching.

    Args:
        name: Bare filename, e.g. "20250910-235900.csv"

    Returns:
        FileMeta, or None if the name does not describe a valid instant
    """
    if not name:
        return None

    match = SNAPSHOT_FILENAME_RE.match(name)
    if not match:
        return None

    year, month, day, hour, minute, second = match.groups()
    try:
        dt = datetime(
            int(year), int(month), int(day),
            int(hour), int(minute), int(second),
            tzinfo=timezone.utc,
        )
    except ValueError:
        return None

    timestamp = int(dt.timestamp()) * 1000

    return FileMeta(
        raw_name=name,
        date_key=f"{year}-{month}-{day}",
        timestamp=timestamp,
        date_label=format_date_label(timestamp),
        long_label=format_long_label(timestamp),
    )


def extract_file_meta(entry: FileEntry) -> Optional[FileMeta]:
    """Parse the entry's filename, falling back to its relative path."""
    name = entry.name or entry.relative_path or ""
    return parse_snapshot_filename(name)


def find_most_recent_snapshot(
    entries: Iterable[FileEntry],
    strict: bool = False,
) -> Optional[FileEntry]:
    """
    Pick the snapshot the live inventory view should load.

    The newest entry by filename timestamp wins. When no entry has a valid
    snapshot name, the first entry is returned unless strict is set.

    Args:
        entries: CSV files of the selected folder
        strict: Require a valid YYYYMMDD-HHMMSS.csv name

    Returns:
        The chosen FileEntry, or None
    """
    entries = list(entries)
    if not entries:
        return None

    latest: Optional[FileEntry] = None
    latest_ts: Optional[int] = None
    for entry in entries:
        meta = extract_file_meta(entry)
        if meta is None:
            continue
        if latest_ts is None or meta.timestamp > latest_ts:
            latest = entry
            latest_ts = meta.timestamp

    if latest is not None:
        return latest

    if strict:
        return None

    logger.info(
        f"No snapshot-named file among {len(entries)} CSV(s); "
        f"using {entries[0].relative_path}"
    )
    return entries[0]
