"""
Row normalization - decoded table rows to keyed records.

Decoders hand rows over either already keyed by column name or as
positional value lists. Everything downstream works on keyed records,
so this is the one place where the two shapes are reconciled.
"""

from collections.abc import Mapping
from typing import Iterable, Optional, Sequence

from .models import RawRecord, RowLike, Table


def row_to_record(row: Optional[RowLike], columns: Sequence[str]) -> RawRecord:
    """
    Turn a single row into a keyed record.

    A dict is returned as-is and any other mapping is copied into one.
    Anything else is zipped positionally against columns; values missing
    at the end of a short row become None.
    """
    if isinstance(row, dict):
        return row
    if isinstance(row, Mapping):
        return dict(row)

    values = list(row) if row is not None else []
    record = {}
    for index, column in enumerate(columns):
        record[column] = values[index] if index < len(values) else None
    return record


def rows_to_records(
    columns: Sequence[str],
    rows: Optional[Iterable[RowLike]],
) -> list[RawRecord]:
    """Normalize rows to keyed records, preserving order."""
    if not rows:
        return []
    columns = list(columns or [])
    return [row_to_record(row, columns) for row in rows]


def table_to_records(table: Optional[Table]) -> list[RawRecord]:
    """Normalize every row of a Table. None yields an empty list."""
    if table is None:
        return []
    return rows_to_records(table.columns, table.rows)
