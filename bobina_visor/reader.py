"""
CSV snapshot reading.

Lists snapshot files in a folder and decodes a single file into a Table
(header + positional rows). Filtering and aggregation live elsewhere;
this module only turns bytes into cells.
"""
import csv
import io
import logging
from pathlib import Path
from typing import Union

from .models import FileEntry, Table

logger = logging.getLogger(__name__)

# Tried in order; utf-8-sig also reads plain utf-8, latin-1 accepts any bytes
ENCODINGS = ("utf-8-sig", "cp1252", "latin-1")

SNIFF_DELIMITERS = ",;\t|"


class SnapshotReadError(ValueError):
    """A snapshot file exists but could not be decoded into a table."""


def is_csv_name(name: str) -> bool:
    return bool(name) and name.lower().endswith(".csv")


def list_csv_files(directory: Union[str, Path]) -> list[FileEntry]:
    """
    List every .csv file (any case) under a folder, recursively.

    Args:
        directory: Folder selected by the user

    Returns:
        FileEntry list sorted by relative path

    Raises:
        FileNotFoundError: If the folder does not exist
        NotADirectoryError: If the path is not a folder
    """
    root = Path(directory)
    if not root.exists():
        raise FileNotFoundError(f"Folder not found: {directory}")
    if not root.is_dir():
        raise NotADirectoryError(f"Not a folder: {directory}")

    entries = []
    for path in root.rglob("*"):
        if path.is_file() and is_csv_name(path.name):
            entries.append(
                FileEntry(
                    path=path.resolve(),
                    relative_path=path.relative_to(root).as_posix(),
                )
            )

    entries.sort(key=lambda e: e.relative_path)
    logger.debug(f"Found {len(entries)} CSV file(s) in {root}")
    return entries


def _decode(raw: bytes, filename: str) -> str:
    for enc in ENCODINGS:
        try:
            text = raw.decode(enc)
            logger.debug(f"{filename} decoded with encoding: {enc}")
            return text
        except UnicodeDecodeError:
            continue
    raise SnapshotReadError(f"Could not decode {filename} with any supported encoding")


def parse_csv_text(text: str) -> Table:
    """
    Parse CSV text with a header row into a Table.

    Empty cells become None; rows keep their positional shape.
    """
    sample = text[:4096]
    try:
        dialect = csv.Sniffer().sniff(sample, delimiters=SNIFF_DELIMITERS)
    except csv.Error:
        dialect = csv.excel

    reader = csv.reader(io.StringIO(text, newline=""), dialect=dialect)
    try:
        header = next(reader)
    except StopIteration:
        raise SnapshotReadError("CSV has no header row")

    columns = [col.strip() for col in header]
    rows = []
    for values in reader:
        if not any(v.strip() for v in values):
            continue
        rows.append([v if v != "" else None for v in values])

    return Table(columns=columns, rows=rows)


def read_snapshot(source: Union[str, Path, FileEntry]) -> Table:
    """
    Read one snapshot CSV into a Table.

    Args:
        source: Path or FileEntry of the CSV file

    Returns:
        Table with the file's header as columns

    Raises:
        FileNotFoundError: If the file does not exist
        SnapshotReadError: If the file is empty or cannot be decoded
    """
    path = source.path if isinstance(source, FileEntry) else Path(source)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    try:
        raw = path.read_bytes()
    except OSError as e:
        raise SnapshotReadError(f"Failed to read {path.name}: {e}") from e

    if not raw.strip():
        raise SnapshotReadError(f"File is empty: {path.name}")

    text = _decode(raw, path.name)
    try:
        table = parse_csv_text(text)
    except csv.Error as e:
        raise SnapshotReadError(f"Failed to parse CSV {path.name}: {e}") from e

    logger.debug(f"Read {len(table.rows)} row(s) from {path.name}")
    return table
