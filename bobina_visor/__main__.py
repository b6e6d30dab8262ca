"""
CLI entry point for Bobina Visor.

Usage:
    python -m bobina_visor /path/to/snapshots
    python -m bobina_visor /path/to/snapshots --max-days 30 --search 2100
    python -m bobina_visor /path/to/snapshots --json
    python -m bobina_visor /path/to/snapshots --output-xlsx bobinas.xlsx
    python -m bobina_visor /path/to/snapshots --watch
"""

import argparse
import logging
import sys
from pathlib import Path

from .config import settings
from .report import (
    export_history_csv,
    export_inventory_csv,
    export_xlsx,
    format_history_console,
    format_inventory_console,
)
from .schemas import build_viewer_view
from .viewer import InventoryViewer, ViewerState
from .watcher import watch


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bobina_visor",
        description="Bobina Visor - Paper roll inventory and history from CSV snapshots",
    )

    parser.add_argument(
        "directory",
        nargs="?",
        default=settings.DATA_DIR,
        help="Folder with YYYYMMDD-HHMMSS.csv snapshots (default: $BOBINA_DATA_DIR or .)",
    )

    parser.add_argument(
        "--max-days",
        type=int,
        default=settings.MAX_DAYS,
        metavar="N",
        help=f"Days shown in the history, 0 for all (default: {settings.MAX_DAYS})",
    )

    parser.add_argument(
        "--search",
        default="",
        metavar="TERM",
        help="Only show inventory items whose PAPER_CODE or WIDTH contains TERM",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print both views as JSON instead of console reports",
    )

    parser.add_argument(
        "--output-csv",
        metavar="FILE",
        help="Write the inventory to a CSV file (history goes to FILE with _historico suffix)",
    )

    parser.add_argument(
        "--output-xlsx",
        metavar="FILE",
        help="Write inventory, history and monthly averages to an XLSX workbook",
    )

    parser.add_argument(
        "--strict-latest",
        action="store_true",
        help="Inventory only from a file named YYYYMMDD-HHMMSS.csv (no fallback to the first CSV)",
    )

    parser.add_argument(
        "--watch",
        action="store_true",
        help="Keep running and refresh the report when snapshots change",
    )

    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress console output (only write output files)",
    )

    return parser


def render(state: ViewerState, args) -> int:
    """Print and export one published state. Returns an exit code."""
    view = build_viewer_view(state, search=args.search)

    if view.error:
        print(f"Error: {view.error}", file=sys.stderr)
        return 1

    if args.json:
        print(view.model_dump_json(indent=2))
    elif not args.quiet:
        if view.inventory_error:
            print(f"Error: {view.inventory_error}", file=sys.stderr)
        elif view.inventory is not None:
            print(format_inventory_console(view.inventory))
        if view.history_error:
            print(f"Error: {view.history_error}", file=sys.stderr)
        elif view.history is not None:
            print(format_history_console(view.history))

    if args.output_csv:
        output_path = Path(args.output_csv)
        if view.inventory is not None:
            with open(output_path, "w", newline="") as f:
                export_inventory_csv(view.inventory, output=f)
        if view.history is not None:
            history_path = output_path.with_name(f"{output_path.stem}_historico{output_path.suffix}")
            with open(history_path, "w", newline="") as f:
                export_history_csv(view.history, output=f)
        if not args.quiet:
            print(f"\nCSV exported to: {output_path}")

    if args.output_xlsx:
        export_xlsx(view.inventory, view.history, output=args.output_xlsx)
        if not args.quiet:
            print(f"\nXLSX exported to: {args.output_xlsx}")

    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    directory = Path(args.directory)
    if not directory.is_dir():
        print(f"Error: Folder not found: {directory}", file=sys.stderr)
        return 1

    try:
        if args.watch:
            viewer = InventoryViewer(
                max_days=args.max_days,
                strict_latest=args.strict_latest,
                on_update=lambda state: render(state, args),
            )
            watch(viewer, directory)
            return 0

        viewer = InventoryViewer(max_days=args.max_days, strict_latest=args.strict_latest)
        state = viewer.load_directory(directory)
        return render(state, args)

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
