"""
Historical Selector & Aggregator.

Turns a folder of snapshots into a daily time series:

1. Selection  - one snapshot per calendar day, the latest of that day,
                optionally limited to the N most recent days.
2. Metrics    - per selected snapshot, count SALDO and COMPLETA rolls
                among generally valid rows. Files are analysed in
                parallel; a file that cannot be read counts as 0/0.
3. Rollup     - daily metrics grouped by year-month with sums and means.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Callable, Iterable, Optional

from .aggregator import count_status
from .filters import filter_snapshot
from .models import (
    ChartPoint,
    DailyMetric,
    DayDetail,
    FileEntry,
    HistoryResult,
    MonthlyStat,
    SnapshotFile,
    StatusCounts,
    Table,
)
from .naming import extract_file_meta, format_month_label
from .reader import read_snapshot

logger = logging.getLogger(__name__)

SnapshotReader = Callable[[FileEntry], Table]


def select_latest_files_by_day(
    entries: Optional[Iterable[FileEntry]],
    max_days: int = 0,
) -> list[SnapshotFile]:
    """
    Keep the latest snapshot of each day.

    Entries without a valid snapshot name are dropped. On equal timestamps
    the entry seen last wins.

    Args:
        entries: Candidate CSV files
        max_days: Keep only the N most recent days (0 = all)

    Returns:
        One SnapshotFile per day, oldest first
    """
    if not entries:
        return []

    by_day: dict[str, SnapshotFile] = {}
    for entry in entries:
        meta = extract_file_meta(entry)
        if meta is None:
            continue
        existing = by_day.get(meta.date_key)
        if existing is None or meta.timestamp >= existing.meta.timestamp:
            by_day[meta.date_key] = SnapshotFile(entry=entry, meta=meta)

    newest_first = sorted(by_day.values(), key=lambda s: s.meta.timestamp, reverse=True)
    if max_days and max_days > 0:
        newest_first = newest_first[:max_days]

    return sorted(newest_first, key=lambda s: s.meta.timestamp)


def compute_daily_metrics(
    snapshot: SnapshotFile,
    read: SnapshotReader = read_snapshot,
) -> StatusCounts:
    """
    Count SALDO and COMPLETA rolls in one snapshot.

    Raises whatever the reader raises; callers isolate failures.
    """
    table = read(snapshot.entry)
    rows = filter_snapshot(table, available_only=False, source=snapshot.entry.relative_path)
    return count_status(rows)


def _daily_metric(snapshot: SnapshotFile, read: SnapshotReader) -> DailyMetric:
    try:
        counts = compute_daily_metrics(snapshot, read)
    except Exception as e:
        logger.error(f"Could not process {snapshot.meta.raw_name}: {e}")
        return DailyMetric(meta=snapshot.meta, failed=True)
    return DailyMetric(meta=snapshot.meta, saldo=counts.saldo, completa=counts.completa)


def collect_daily_metrics(
    snapshots: list[SnapshotFile],
    read: SnapshotReader = read_snapshot,
    max_workers: Optional[int] = None,
) -> list[DailyMetric]:
    """
    Analyse snapshots concurrently.

    Results are gathered once every file has settled and are returned in
    the order of snapshots, whatever order the workers finish in.
    """
    if not snapshots:
        return []

    workers = max(1, min(max_workers or len(snapshots), len(snapshots)))
    logger.debug(f"Analysing {len(snapshots)} snapshot(s) with {workers} worker(s)")

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(_daily_metric, s, read) for s in snapshots]
        wait(futures)

    return [f.result() for f in futures]


def build_chart_data(daily: Iterable[DailyMetric]) -> list[ChartPoint]:
    """One chart point per daily metric, same order."""
    return [
        ChartPoint(
            date_label=d.meta.date_label,
            full_date_label=d.meta.long_label,
            timestamp=d.meta.timestamp,
            date_key=d.meta.date_key,
            month_key=d.meta.month_key,
            saldo=d.saldo,
            completa=d.completa,
        )
        for d in daily
    ]


def _month_sort_key(month: MonthlyStat) -> tuple[int, int]:
    year, month_number = month.month_key.split("-")[:2]
    return int(year), int(month_number)


def build_monthly_stats(daily: Iterable[DailyMetric]) -> list[MonthlyStat]:
    """
    Roll daily metrics up by year-month.

    A month only appears if at least one day contributed, so day_count is
    never zero. Months are ordered by numeric (year, month).
    """
    months: dict[str, MonthlyStat] = {}

    for d in daily:
        month_key = d.meta.month_key
        month = months.get(month_key)
        if month is None:
            month = MonthlyStat(
                month_key=month_key,
                label=format_month_label(d.meta.timestamp),
            )
            months[month_key] = month

        month.saldo_sum += d.saldo
        month.completa_sum += d.completa
        month.days.append(DayDetail(label=d.meta.long_label, saldo=d.saldo, completa=d.completa))

    return sorted(months.values(), key=_month_sort_key)


def build_history(
    entries: Iterable[FileEntry],
    max_days: int = 0,
    read: SnapshotReader = read_snapshot,
    max_workers: Optional[int] = None,
) -> HistoryResult:
    """
    Full history computation for a set of CSV files.

    Args:
        entries: CSV files of the selected folder
        max_days: Keep only the N most recent days (0 = all)
        read: Snapshot reader (swap for tests)
        max_workers: Thread pool size

    Returns:
        HistoryResult with daily metrics, chart points and monthly stats
    """
    selected = select_latest_files_by_day(entries, max_days)
    daily = collect_daily_metrics(selected, read=read, max_workers=max_workers)

    failed = [d.date_key for d in daily if d.failed]
    if failed:
        logger.warning(f"{len(failed)} snapshot(s) failed and count as zero: {failed}")

    return HistoryResult(
        daily=daily,
        points=build_chart_data(daily),
        months=build_monthly_stats(daily),
    )
