"""
Viewer state - one full recomputation per folder selection.

Every time the selected folder (or its contents) changes, the viewer
rebuilds the live inventory and the history from scratch. Recomputations
may overlap (watch mode runs them in the background), so each one takes a
generation token and only publishes its result while that token is still
the newest. A slow, superseded run never overwrites a newer state.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Union

from .aggregator import aggregate_inventory, sort_inventory
from .config import MSG_FOLDER_ERROR, MSG_HISTORY_ERROR, MSG_INVENTORY_ERROR, MSG_NO_SNAPSHOT, settings
from .filters import filter_snapshot, missing_columns
from .history import SnapshotReader, build_history
from .models import FileEntry, HistoryResult, InventoryResult
from .naming import find_most_recent_snapshot
from .reader import list_csv_files, read_snapshot

logger = logging.getLogger(__name__)


class Generation:
    """
    Monotonic counter identifying the newest recomputation.

    Thread-safe; the only state shared between concurrent recomputations.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._current = 0

    def next(self) -> int:
        """Start a new generation and return its token."""
        with self._lock:
            self._current += 1
            return self._current

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._current

    @property
    def current(self) -> int:
        with self._lock:
            return self._current


@dataclass
class ViewerState:
    """Everything a presentation layer needs to render both views."""
    directory: Optional[Path] = None
    generation: int = 0
    entries: list[FileEntry] = field(default_factory=list)
    latest: Optional[FileEntry] = None
    inventory: Optional[InventoryResult] = None
    history: Optional[HistoryResult] = None
    error: Optional[str] = None             # listing failed, nothing to show
    inventory_error: Optional[str] = None
    history_error: Optional[str] = None


def compute_inventory(
    entry: FileEntry,
    read: SnapshotReader = read_snapshot,
) -> InventoryResult:
    """
    Live inventory for one snapshot: available rolls per paper code/width.

    Raises whatever the reader raises.
    """
    table = read(entry)
    missing = missing_columns(table.columns)
    rows = filter_snapshot(table, available_only=True, source=entry.relative_path)
    items = sort_inventory(aggregate_inventory(rows))
    logger.info(f"Inventory from {entry.relative_path}: {len(rows)} roll(s), {len(items)} item(s)")
    return InventoryResult(source=entry, items=items, missing_columns=missing)


class InventoryViewer:
    """
    Recomputes both views for a folder and keeps the newest result.

    Args:
        max_days: History window in days (0 = unlimited)
        max_workers: Thread pool size for history analysis
        read: Snapshot reader
        strict_latest: Live view requires a valid snapshot filename
        on_update: Called with each published state
    """

    def __init__(
        self,
        max_days: int = settings.MAX_DAYS,
        max_workers: Optional[int] = settings.MAX_WORKERS,
        read: SnapshotReader = read_snapshot,
        strict_latest: bool = False,
        on_update: Optional[Callable[[ViewerState], None]] = None,
    ):
        self.max_days = max_days
        self.max_workers = max_workers
        self.strict_latest = strict_latest
        self.on_update = on_update
        self._read = read
        self._generation = Generation()
        self._state_lock = threading.Lock()
        self._notify_lock = threading.Lock()
        self._state = ViewerState()
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def state(self) -> ViewerState:
        with self._state_lock:
            return self._state

    @property
    def generation(self) -> Generation:
        return self._generation

    def load_directory(self, directory: Union[str, Path]) -> ViewerState:
        """Recompute synchronously and return the published (newest) state."""
        token = self._generation.next()
        self._run(Path(directory), token)
        return self.state

    def refresh(self) -> ViewerState:
        """Recompute the current folder."""
        if self.state.directory is None:
            return self.state
        return self.load_directory(self.state.directory)

    def set_max_days(self, max_days: int) -> ViewerState:
        self.max_days = max_days
        return self.refresh()

    def submit(self, directory: Union[str, Path]) -> Future:
        """
        Recompute in the background.

        The token is taken now, so a later submit or load_directory
        supersedes this run even if it finishes first. The future resolves
        to True if the result was published.
        """
        token = self._generation.next()
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="bobina-viewer")
        return self._executor.submit(self._run, Path(directory), token)

    def shutdown(self):
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def _run(self, directory: Path, token: int) -> bool:
        state = self.compute(directory, token)
        return self.publish(token, state)

    def compute(self, directory: Path, token: int = 0) -> ViewerState:
        """Build a fresh state for a folder without publishing it."""
        state = ViewerState(directory=directory, generation=token)

        try:
            state.entries = list_csv_files(directory)
        except Exception as e:
            logger.error(f"Could not list CSV files in {directory}: {e}")
            state.error = MSG_FOLDER_ERROR
            return state

        state.latest = find_most_recent_snapshot(state.entries, strict=self.strict_latest)
        if state.latest is None:
            if state.entries:
                state.inventory_error = MSG_NO_SNAPSHOT
        else:
            try:
                state.inventory = compute_inventory(state.latest, self._read)
            except Exception as e:
                logger.error(f"Error loading inventory from {state.latest.relative_path}: {e}")
                state.inventory_error = MSG_INVENTORY_ERROR

        try:
            state.history = build_history(
                state.entries,
                max_days=self.max_days,
                read=self._read,
                max_workers=self.max_workers,
            )
        except Exception as e:
            logger.error(f"Error computing history: {e}")
            state.history_error = MSG_HISTORY_ERROR

        return state

    def publish(self, token: int, state: ViewerState) -> bool:
        """
        Make state visible if token is still the newest generation.

        Returns:
            True if published, False if the result was stale and dropped
        """
        with self._state_lock:
            if not self._generation.is_current(token):
                logger.info(f"Discarding stale result (generation {token})")
                return False
            self._state = state

        if self.on_update is not None:
            # A newer run may have published since the state lock was released
            with self._notify_lock:
                if not self._generation.is_current(token):
                    logger.info(f"Skipping stale update (generation {token})")
                    return True
                self.on_update(state)
        return True
