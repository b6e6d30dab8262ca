"""
Row filters - which CSV rows count as plant inventory.

A row is valid inventory when it sits in the plant depot, is in stock, and
is not at an excluded location:

    LOCATION not in {ULOG, DPBQ}
    ESTADO   == STOCK
    DEPO     == PLANTA SFM

String cells are compared trimmed and upper-cased. Non-string cells
(None, numbers) compare as "" and therefore never match a literal.
"""
import logging
from typing import Any, Iterable, Optional, Sequence

from .config import (
    EXCLUDED_LOCATIONS,
    MSG_MISSING_COLUMNS,
    OUTPUT_COLUMNS,
    PLANT_DEPOT,
    REQUIRED_COLUMNS,
    STOCK_STATE,
)
from .models import RawRecord, RollStatus, Table
from .normalizer import table_to_records

logger = logging.getLogger(__name__)


def normalize_string(value: Any) -> str:
    """Trim and upper-case strings; anything else becomes ""."""
    return value.strip().upper() if isinstance(value, str) else ""


def roll_status(row: Optional[RawRecord]) -> Optional[RollStatus]:
    """Status of a row from its COMPLETA cell, or None if unrecognised."""
    value = normalize_string((row or {}).get("COMPLETA"))
    try:
        return RollStatus(value)
    except ValueError:
        return None


def matches_general_criteria(row: Optional[RawRecord]) -> bool:
    """True if the row is stock held at the plant outside excluded locations."""
    row = row or {}
    location = normalize_string(row.get("LOCATION"))
    estado = normalize_string(row.get("ESTADO"))
    depo = normalize_string(row.get("DEPO"))

    return (
        location not in EXCLUDED_LOCATIONS
        and estado == STOCK_STATE
        and depo == PLANT_DEPOT
    )


def is_available(row: Optional[RawRecord]) -> bool:
    """Valid inventory row whose roll is still unallocated (SALDO)."""
    return matches_general_criteria(row) and roll_status(row) == RollStatus.SALDO


def is_complete(row: Optional[RawRecord]) -> bool:
    """Valid inventory row whose roll is allocated (COMPLETA)."""
    return matches_general_criteria(row) and roll_status(row) == RollStatus.COMPLETA


def filter_rows_by_criteria(rows: Iterable[RawRecord]) -> list[RawRecord]:
    """Keep rows passing the general criteria, in input order."""
    return [row for row in rows if matches_general_criteria(row)]


def filter_available_rows(rows: Iterable[RawRecord]) -> list[RawRecord]:
    return [row for row in rows if is_available(row)]


def filter_complete_rows(rows: Iterable[RawRecord]) -> list[RawRecord]:
    return [row for row in rows if is_complete(row)]


def missing_columns(columns: Sequence[str]) -> list[str]:
    """Required columns absent from a header, in REQUIRED_COLUMNS order."""
    present = set(columns or [])
    return [c for c in REQUIRED_COLUMNS if c not in present]


def check_required_columns(columns: Sequence[str], source: str = "") -> list[str]:
    """
    Warn about required columns missing from a file's header.

    Missing columns are not fatal: affected cells read as None and simply
    never match a filter literal.

    Returns:
        Names of the missing columns
    """
    missing = missing_columns(columns)
    if missing:
        where = f" ({source})" if source else ""
        logger.warning(f"{MSG_MISSING_COLUMNS}{where} Missing: {missing}")
    return missing


def project_rows(
    rows: Iterable[RawRecord],
    columns: Sequence[str] = OUTPUT_COLUMNS,
) -> list[RawRecord]:
    """Restrict records to the given columns; absent cells become None."""
    return [{column: row.get(column) for column in columns} for row in rows]


def filter_snapshot(
    table: Table,
    available_only: bool = True,
    source: str = "",
) -> list[RawRecord]:
    """
    Apply the inventory filters to a decoded snapshot.

    Args:
        table: Decoded CSV content
        available_only: Keep only SALDO rolls and project to OUTPUT_COLUMNS
            (live inventory). When False, every generally valid row is
            returned untouched (history).
        source: File name used in log messages

    Returns:
        Filtered records, in file order
    """
    check_required_columns(table.columns, source)
    rows = filter_rows_by_criteria(table_to_records(table))
    if not available_only:
        return rows
    return project_rows(r for r in rows if roll_status(r) == RollStatus.SALDO)
