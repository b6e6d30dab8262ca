"""
Data models for Bobina Visor.

All structured data uses dataclasses for type hints, __eq__, and __repr__.
Raw CSV records stay plain dicts; everything derived from them is typed.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Union


# One CSV line keyed by column name
RawRecord = dict[str, Any]

# A decoded row is either already keyed or positional
RowLike = Union[Mapping[str, Any], Sequence[Any]]


class RollStatus(Enum):
    """
    Values of the COMPLETA column.

    Compared after trimming and upper-casing the cell value.
    """
    SALDO = "SALDO"          # Available / unallocated roll
    COMPLETA = "COMPLETA"    # Complete / allocated roll


@dataclass
class Table:
    """
    Decoded tabular content of one CSV file.

    rows may hold keyed mappings or positional sequences aligned to columns.
    """
    columns: list[str] = field(default_factory=list)
    rows: list[RowLike] = field(default_factory=list)


@dataclass(frozen=True)
class FileEntry:
    """A file found in the selected folder."""
    path: Path
    relative_path: str

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class FileMeta:
    """
    Metadata derived from a snapshot filename (YYYYMMDD-HHMMSS.csv).

    timestamp is UTC epoch milliseconds.
    """
    raw_name: str
    date_key: str        # "YYYY-MM-DD"
    timestamp: int
    date_label: str      # "10-sept-2025"
    long_label: str      # "10 de septiembre de 2025"

    @property
    def month_key(self) -> str:
        return self.date_key[:7]


@dataclass(frozen=True)
class SnapshotFile:
    """A FileEntry paired with the metadata parsed from its name."""
    entry: FileEntry
    meta: FileMeta


@dataclass
class InventoryItem:
    """Roll count for one (paper code, width) pair."""
    paper_code: Any
    width: Any
    total_rolls: int = 0


@dataclass
class PaperCodeGroup:
    """
    Inventory items of one paper code, widths sorted.

    preferred_widths and additional_widths partition widths, keeping order.
    """
    paper_code: str
    widths: list[InventoryItem] = field(default_factory=list)
    preferred_widths: list[InventoryItem] = field(default_factory=list)
    additional_widths: list[InventoryItem] = field(default_factory=list)

    @property
    def total_rolls(self) -> int:
        return sum(item.total_rolls for item in self.widths)


@dataclass
class StatusCounts:
    saldo: int = 0
    completa: int = 0


@dataclass
class DailyMetric:
    """Counts for one calendar day, taken from that day's latest snapshot."""
    meta: FileMeta
    saldo: int = 0
    completa: int = 0
    failed: bool = False  # True when the snapshot could not be read

    @property
    def date_key(self) -> str:
        return self.meta.date_key


@dataclass
class DayDetail:
    label: str
    saldo: int
    completa: int


@dataclass
class MonthlyStat:
    """Daily metrics of one year-month rolled up."""
    month_key: str       # "YYYY-MM"
    label: str           # "septiembre de 2025"
    saldo_sum: int = 0
    completa_sum: int = 0
    days: list[DayDetail] = field(default_factory=list)

    @property
    def day_count(self) -> int:
        return len(self.days)

    @property
    def avg_saldo(self) -> float:
        return self.saldo_sum / self.day_count if self.day_count else 0

    @property
    def avg_completa(self) -> float:
        return self.completa_sum / self.day_count if self.day_count else 0


@dataclass
class ChartPoint:
    """One point of the history chart."""
    date_label: str
    full_date_label: str
    timestamp: int
    date_key: str
    month_key: str
    saldo: int
    completa: int


@dataclass
class HistoryResult:
    """Output of a full history computation."""
    daily: list[DailyMetric] = field(default_factory=list)
    points: list[ChartPoint] = field(default_factory=list)
    months: list[MonthlyStat] = field(default_factory=list)

    @property
    def failed_days(self) -> list[str]:
        return [d.date_key for d in self.daily if d.failed]


@dataclass
class InventoryResult:
    """Output of the live inventory computation for one snapshot."""
    source: Optional[FileEntry]
    items: list[InventoryItem] = field(default_factory=list)
    missing_columns: list[str] = field(default_factory=list)
