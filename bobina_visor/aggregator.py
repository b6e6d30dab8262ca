"""
Inventory Aggregator - roll counts per (paper code, width).

Every CSV row is one physical roll, so aggregation is a count:
rows sharing PAPER_CODE and WIDTH collapse into one InventoryItem whose
total_rolls is the number of rows. Duplicate ROLL_IDs are counted, not
deduplicated.
"""

import math
from functools import cmp_to_key
from typing import Any, Iterable, Optional

from .config import MISSING_PAPER_CODE_LABEL, PREFERRED_WIDTHS
from .filters import matches_general_criteria, roll_status
from .models import InventoryItem, PaperCodeGroup, RawRecord, RollStatus, StatusCounts


def _key_part(value: Any) -> str:
    return "" if value is None else str(value)


def inventory_key(paper_code: Any, width: Any) -> str:
    """Composite grouping key; None becomes "" in the key only."""
    return f"{_key_part(paper_code)}::{_key_part(width)}"


def aggregate_inventory(rows: Iterable[RawRecord]) -> list[InventoryItem]:
    """
    Count available (SALDO) rolls per paper code and width.

    Rows whose COMPLETA is not SALDO are skipped, so both available-only
    rows and generally filtered rows can be passed in.

    Args:
        rows: Filtered inventory records

    Returns:
        Unsorted InventoryItem list; original cell values are preserved
    """
    grouped: dict[str, InventoryItem] = {}

    for row in rows:
        if roll_status(row) != RollStatus.SALDO:
            continue

        paper_code = row.get("PAPER_CODE")
        width = row.get("WIDTH")
        key = inventory_key(paper_code, width)

        item = grouped.get(key)
        if item is None:
            item = InventoryItem(paper_code=paper_code, width=width)
            grouped[key] = item
        item.total_rolls += 1

    return list(grouped.values())


def _as_number(value: Any) -> Optional[float]:
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return None if math.isnan(value) else float(value)
    text = str(value).strip()
    if text == "":
        return 0.0
    if "_" in text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if math.isnan(number):
        return None
    # only the spelled-out form counts as infinite, not "inf"
    if math.isinf(number) and text.lstrip("+-") != "Infinity":
        return None
    return number


def compare_widths(a: Any, b: Any) -> int:
    """Numeric comparison, lexical when either side is not a number."""
    num_a = _as_number(a)
    num_b = _as_number(b)
    if num_a is None or num_b is None:
        str_a, str_b = _key_part(a), _key_part(b)
        return (str_a > str_b) - (str_a < str_b)
    return (num_a > num_b) - (num_a < num_b)


def _compare_items(a: InventoryItem, b: InventoryItem) -> int:
    code_a, code_b = _key_part(a.paper_code), _key_part(b.paper_code)
    if code_a != code_b:
        return (code_a > code_b) - (code_a < code_b)
    return compare_widths(a.width, b.width)


def sort_inventory(items: Iterable[InventoryItem]) -> list[InventoryItem]:
    """Sort by paper code, then width (numeric with lexical fallback)."""
    return sorted(items, key=cmp_to_key(_compare_items))


def is_preferred_width(width: Any) -> bool:
    return _key_part(width).strip() in PREFERRED_WIDTHS


def split_preferred_widths(
    items: Iterable[InventoryItem],
) -> tuple[list[InventoryItem], list[InventoryItem]]:
    """
    Partition items into preferred widths and the rest.

    Order inside each part follows the input order.
    """
    preferred = []
    others = []
    for item in items:
        if is_preferred_width(item.width):
            preferred.append(item)
        else:
            others.append(item)
    return preferred, others


def group_by_paper_code(items: Iterable[InventoryItem]) -> list[PaperCodeGroup]:
    """
    Group items by paper code for display.

    Groups are sorted by paper code; widths inside a group are sorted
    and additionally split into preferred / additional widths.
    """
    grouped: dict[str, list[InventoryItem]] = {}
    for item in items:
        key = _key_part(item.paper_code) or MISSING_PAPER_CODE_LABEL
        grouped.setdefault(key, []).append(item)

    groups = []
    for paper_code in sorted(grouped):
        widths = sorted(
            grouped[paper_code],
            key=cmp_to_key(lambda a, b: compare_widths(a.width, b.width)),
        )
        preferred, others = split_preferred_widths(widths)
        groups.append(
            PaperCodeGroup(
                paper_code=paper_code,
                widths=widths,
                preferred_widths=preferred,
                additional_widths=others,
            )
        )
    return groups


def search_inventory(items: Iterable[InventoryItem], term: str = "") -> list[InventoryItem]:
    """Case-insensitive substring match on paper code or width."""
    needle = (term or "").strip().lower()
    items = list(items)
    if not needle:
        return items
    return [
        item for item in items
        if needle in _key_part(item.paper_code).lower()
        or needle in _key_part(item.width).lower()
    ]


def total_rolls(items: Iterable[InventoryItem]) -> int:
    """Grand total of rolls over the given items."""
    return sum(item.total_rolls or 0 for item in items)


def count_status(rows: Iterable[RawRecord]) -> StatusCounts:
    """
    Count SALDO and COMPLETA rolls among generally valid rows.

    Rows failing the general criteria, or with any other status, are ignored.
    """
    counts = StatusCounts()
    for row in rows:
        if not matches_general_criteria(row):
            continue
        status = roll_status(row)
        if status == RollStatus.SALDO:
            counts.saldo += 1
        elif status == RollStatus.COMPLETA:
            counts.completa += 1
    return counts
