"""
Pydantic view models - what a presentation layer receives.
"""
from pydantic import BaseModel
from typing import Any, List, Optional

from .aggregator import group_by_paper_code, search_inventory, total_rolls
from .models import HistoryResult, InventoryResult


# ============== Inventory ==============

class InventoryItemOut(BaseModel):
    paper_code: Any = None
    width: Any = None
    total_rolls: int


class PaperCodeGroupOut(BaseModel):
    paper_code: str
    total_rolls: int
    preferred_widths: List[InventoryItemOut]
    additional_widths: List[InventoryItemOut]


class InventoryView(BaseModel):
    source: Optional[str] = None
    search: str = ""
    items: List[InventoryItemOut]
    groups: List[PaperCodeGroupOut]
    total: int
    missing_columns: List[str] = []


# ============== History ==============

class ChartPointOut(BaseModel):
    date_label: str
    full_date_label: str
    timestamp: int
    saldo: int
    completa: int


class DayDetailOut(BaseModel):
    label: str
    saldo: int
    completa: int


class MonthlySummaryOut(BaseModel):
    month_key: str
    month_label: str
    saldo_average: float
    completa_average: float
    day_count: int
    per_day_detail: List[DayDetailOut]


class HistoryView(BaseModel):
    points: List[ChartPointOut]
    months: List[MonthlySummaryOut]
    failed_days: List[str] = []


# ============== Whole viewer ==============

class ViewerView(BaseModel):
    directory: Optional[str] = None
    latest_file: Optional[str] = None
    inventory: Optional[InventoryView] = None
    history: Optional[HistoryView] = None
    error: Optional[str] = None
    inventory_error: Optional[str] = None
    history_error: Optional[str] = None


def _item_out(item) -> InventoryItemOut:
    return InventoryItemOut(paper_code=item.paper_code, width=item.width, total_rolls=item.total_rolls)


def build_inventory_view(result: InventoryResult, search: str = "") -> InventoryView:
    """Inventory view for the items matching search (all items if empty)."""
    items = search_inventory(result.items, search)
    groups = [
        PaperCodeGroupOut(
            paper_code=group.paper_code,
            total_rolls=group.total_rolls,
            preferred_widths=[_item_out(i) for i in group.preferred_widths],
            additional_widths=[_item_out(i) for i in group.additional_widths],
        )
        for group in group_by_paper_code(items)
    ]
    return InventoryView(
        source=result.source.relative_path if result.source else None,
        search=search or "",
        items=[_item_out(i) for i in items],
        groups=groups,
        total=total_rolls(items),
        missing_columns=result.missing_columns,
    )


def build_history_view(result: HistoryResult) -> HistoryView:
    points = [
        ChartPointOut(
            date_label=p.date_label,
            full_date_label=p.full_date_label,
            timestamp=p.timestamp,
            saldo=p.saldo,
            completa=p.completa,
        )
        for p in result.points
    ]
    months = [
        MonthlySummaryOut(
            month_key=m.month_key,
            month_label=m.label,
            saldo_average=m.avg_saldo,
            completa_average=m.avg_completa,
            day_count=m.day_count,
            per_day_detail=[
                DayDetailOut(label=d.label, saldo=d.saldo, completa=d.completa)
                for d in m.days
            ],
        )
        for m in result.months
    ]
    return HistoryView(points=points, months=months, failed_days=result.failed_days)


def build_viewer_view(state, search: str = "") -> ViewerView:
    """Serializable snapshot of a ViewerState."""
    return ViewerView(
        directory=str(state.directory) if state.directory else None,
        latest_file=state.latest.relative_path if state.latest else None,
        inventory=build_inventory_view(state.inventory, search) if state.inventory else None,
        history=build_history_view(state.history) if state.history else None,
        error=state.error,
        inventory_error=state.inventory_error,
        history_error=state.history_error,
    )
