"""
Folder watcher - recompute the views when snapshot files change.

Each relevant filesystem event schedules a background recomputation on the
viewer. Bursts of events (a file being copied in chunks) are coalesced by
a short debounce. Overlapping runs are fine: the viewer only publishes
the newest generation.
"""
import logging
import threading
import time
from pathlib import Path
from typing import Optional, Union

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .config import settings
from .reader import is_csv_name
from .viewer import InventoryViewer

logger = logging.getLogger(__name__)


class SnapshotEventHandler(FileSystemEventHandler):
    """Handle file system events for CSV snapshots."""

    def __init__(self, viewer: InventoryViewer, directory: Path, debounce: float = settings.WATCH_DEBOUNCE):
        super().__init__()
        self.viewer = viewer
        self.directory = directory
        self.debounce = debounce
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    def _is_snapshot(self, path) -> bool:
        return is_csv_name(Path(str(path)).name)

    def schedule(self):
        """(Re)start the debounce timer; the last event in a burst wins."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.debounce, self._trigger)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _trigger(self):
        logger.info(f"Change detected in {self.directory}, recomputing")
        self.viewer.submit(self.directory)

    def on_created(self, event):
        if event.is_directory or not self._is_snapshot(event.src_path):
            return
        self.schedule()

    def on_modified(self, event):
        if event.is_directory or not self._is_snapshot(event.src_path):
            return
        self.schedule()

    def on_deleted(self, event):
        if event.is_directory or not self._is_snapshot(event.src_path):
            return
        self.schedule()

    def on_moved(self, event):
        if event.is_directory:
            return
        if self._is_snapshot(event.src_path) or self._is_snapshot(event.dest_path):
            self.schedule()


def watch(viewer: InventoryViewer, directory: Union[str, Path], debounce: float = settings.WATCH_DEBOUNCE):
    """
    Load the folder once, then keep recomputing on changes until Ctrl+C.
    """
    directory = Path(directory)
    logger.info("Bobina Visor watcher starting...")
    logger.info(f"  Watch directory: {directory}")

    viewer.submit(directory)

    handler = SnapshotEventHandler(viewer, directory, debounce=debounce)
    observer = Observer()
    observer.schedule(handler, str(directory), recursive=True)
    observer.start()

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Stopping watcher...")
    finally:
        handler.cancel()
        observer.stop()
        observer.join()
        viewer.shutdown()
