# Bobina Visor: paper roll inventory and history from CSV snapshots

from .models import (
    FileEntry,
    FileMeta,
    InventoryItem,
    DailyMetric,
    MonthlyStat,
    RollStatus,
    Table,
)
from .naming import parse_snapshot_filename, find_most_recent_snapshot
from .reader import list_csv_files, read_snapshot, SnapshotReadError
from .normalizer import table_to_records, rows_to_records
from .filters import (
    matches_general_criteria,
    filter_rows_by_criteria,
    filter_available_rows,
    filter_complete_rows,
    filter_snapshot,
)
from .aggregator import aggregate_inventory, sort_inventory, split_preferred_widths, count_status
from .history import select_latest_files_by_day, build_history, build_monthly_stats
from .viewer import InventoryViewer, ViewerState, Generation

__version__ = "1.0.0"

__all__ = [
    # Models
    "FileEntry",
    "FileMeta",
    "InventoryItem",
    "DailyMetric",
    "MonthlyStat",
    "RollStatus",
    "Table",
    # Naming
    "parse_snapshot_filename",
    "find_most_recent_snapshot",
    # Reader
    "list_csv_files",
    "read_snapshot",
    "SnapshotReadError",
    # Normalizer
    "table_to_records",
    "rows_to_records",
    # Filters
    "matches_general_criteria",
    "filter_rows_by_criteria",
    "filter_available_rows",
    "filter_complete_rows",
    "filter_snapshot",
    # Aggregator
    "aggregate_inventory",
    "sort_inventory",
    "split_preferred_widths",
    "count_status",
    # History
    "select_latest_files_by_day",
    "build_history",
    "build_monthly_stats",
    # Viewer
    "InventoryViewer",
    "ViewerState",
    "Generation",
]
