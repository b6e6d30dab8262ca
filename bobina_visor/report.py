"""
Report Generator - Format inventory and history for human consumption.

Produces console output, CSV export and an XLSX workbook.
"""

import csv
import io
from io import BytesIO
from pathlib import Path
from typing import Optional, TextIO, Union

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from .config import MSG_NO_DATA
from .schemas import HistoryView, InventoryView

INVENTORY_COLUMNS = ["PAPER_CODE", "WIDTH", "TOTAL_ROLLS"]
HISTORY_COLUMNS = ["DATE", "FULL_DATE", "TIMESTAMP", "SALDO", "COMPLETA"]
MONTHLY_COLUMNS = ["MONTH", "DAYS", "AVG_SALDO", "AVG_COMPLETA"]


def format_number(value: float) -> str:
    """
    Spanish number format with at most one decimal.

    1234.5 -> "1.234,5", 12.0 -> "12"
    """
    text = f"{value:,.1f}"
    if text.endswith(".0"):
        text = text[:-2]
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def _cell(value) -> str:
    return "" if value is None else str(value)


def format_inventory_console(view: InventoryView, show_all_widths: bool = True) -> str:
    """
    Format the live inventory for console display.

    One block per paper code: preferred widths first, then the rest.

    Args:
        view: Inventory view to format
        show_all_widths: Include non-preferred widths (default True)

    Returns:
        Formatted string for console output
    """
    if not view.groups:
        return MSG_NO_DATA + "\n"

    lines = []
    if view.source:
        lines.append(f"Último archivo cargado: {view.source}")

    for group in view.groups:
        lines.append(f"\nPAPER CODE: {group.paper_code}  ({group.total_rolls} rolls)")
        lines.append("-" * 40)
        lines.append(f"{'WIDTH':<15} {'ROLLS':>10}")
        for item in group.preferred_widths:
            lines.append(f"{_cell(item.width):<15} {item.total_rolls:>10}")
        if show_all_widths and group.additional_widths:
            if group.preferred_widths:
                lines.append("  ...")
            for item in group.additional_widths:
                lines.append(f"{_cell(item.width):<15} {item.total_rolls:>10}")

    lines.append("\n" + "=" * 40)
    label = "bobina" if view.total == 1 else "bobinas"
    lines.append(f"TOTAL: {view.total} {label}")
    lines.append("=" * 40)

    return "\n".join(lines)


def format_history_console(view: HistoryView) -> str:
    """Format daily points and monthly averages for console display."""
    if not view.points:
        return MSG_NO_DATA + "\n"

    lines = ["\nHISTÓRICO", "=" * 50]
    lines.append(f"{'DATE':<16} {'SALDO':>10} {'COMPLETA':>10}")
    lines.append("-" * 50)
    for point in view.points:
        lines.append(f"{point.date_label:<16} {point.saldo:>10} {point.completa:>10}")

    lines.append("\nPROMEDIO MENSUAL")
    lines.append("-" * 50)
    for month in view.months:
        days = "día" if month.day_count == 1 else "días"
        lines.append(
            f"{month.month_label:<24} saldo {format_number(month.saldo_average):>8}  "
            f"completa {format_number(month.completa_average):>8}  ({month.day_count} {days})"
        )

    if view.failed_days:
        lines.append(f"\nDays counted as zero (unreadable file): {', '.join(view.failed_days)}")

    return "\n".join(lines)


def export_inventory_csv(view: InventoryView, output: TextIO | None = None) -> str:
    """
    Export inventory items to CSV format.

    Returns:
        CSV string (also writes to output if provided)
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(INVENTORY_COLUMNS)
    for item in view.items:
        writer.writerow([_cell(item.paper_code), _cell(item.width), item.total_rolls])

    csv_content = buffer.getvalue()
    if output:
        output.write(csv_content)
    return csv_content


def export_history_csv(view: HistoryView, output: TextIO | None = None) -> str:
    """Export daily history points to CSV format."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(HISTORY_COLUMNS)
    for p in view.points:
        writer.writerow([p.date_label, p.full_date_label, p.timestamp, p.saldo, p.completa])

    csv_content = buffer.getvalue()
    if output:
        output.write(csv_content)
    return csv_content


def _write_sheet(ws, headers: list[str], rows: list[list]):
    ws.append(headers)
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for row in rows:
        ws.append(row)
    for idx, header in enumerate(headers, start=1):
        width = max([len(str(header))] + [len(_cell(r[idx - 1])) for r in rows])
        ws.column_dimensions[get_column_letter(idx)].width = min(width + 2, 50)


def export_xlsx(
    inventory: Optional[InventoryView],
    history: Optional[HistoryView],
    output: Union[str, Path, None] = None,
) -> bytes:
    """
    Export inventory and history to an XLSX workbook.

    Sheets: "Inventario", "Historico", "Mensual" (only for views given).

    Returns:
        Workbook bytes (also saved to output if provided)
    """
    wb = Workbook()
    wb.remove(wb.active)

    if inventory is not None:
        ws = wb.create_sheet("Inventario")
        _write_sheet(
            ws,
            INVENTORY_COLUMNS,
            [[item.paper_code, item.width, item.total_rolls] for item in inventory.items],
        )

    if history is not None:
        ws = wb.create_sheet("Historico")
        _write_sheet(
            ws,
            HISTORY_COLUMNS,
            [[p.date_label, p.full_date_label, p.timestamp, p.saldo, p.completa] for p in history.points],
        )
        ws = wb.create_sheet("Mensual")
        _write_sheet(
            ws,
            MONTHLY_COLUMNS,
            [[m.month_label, m.day_count, m.saldo_average, m.completa_average] for m in history.months],
        )

    if not wb.sheetnames:
        wb.create_sheet("Inventario")

    buffer = BytesIO()
    wb.save(buffer)
    content = buffer.getvalue()

    if output:
        Path(output).write_bytes(content)

    return content
