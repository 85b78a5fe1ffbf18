"""
File system watcher that keeps the index fresh after out-of-band edits
"""
import logging
import threading
from pathlib import Path
from typing import Callable, Optional, Set

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from standards.file_filter import FileFilterPolicy
from standards.vocabulary import MARKDOWN_EXTENSION

logger = logging.getLogger(__name__)


class DebounceTimer:
    """Manages debounce timing for file events"""

    def __init__(self, delay: float, callback: Callable):
        self.delay = delay
        self.callback = callback
        self.timer: Optional[threading.Timer] = None
        self.lock = threading.Lock()

    def trigger(self):
        """Trigger or reset the timer"""
        with self.lock:
            if self.timer:
                self.timer.cancel()
            self.timer = threading.Timer(self.delay, self._execute)
            self.timer.daemon = True
            self.timer.start()

    def _execute(self):
        """Execute callback after delay"""
        self.callback()

    def cancel(self):
        """Cancel pending timer"""
        with self.lock:
            if self.timer:
                self.timer.cancel()
                self.timer = None


class FileChangeCollector:
    """Collects and deduplicates changed relative paths"""

    def __init__(self):
        self.changed_paths: Set[str] = set()
        self.lock = threading.Lock()

    def add(self, path: str):
        """Add a changed path"""
        with self.lock:
            self.changed_paths.add(path)

    def get_and_clear(self) -> Set[str]:
        """Get all changes and clear collection"""
        with self.lock:
            paths = self.changed_paths.copy()
            self.changed_paths.clear()
            return paths

    def count(self) -> int:
        """Get count of pending changes"""
        with self.lock:
            return len(self.changed_paths)


class StandardEventHandler(FileSystemEventHandler):
    """Handles file system events for standard files

    Creations, modifications and deletions all mark the path for
    refresh; a move marks both ends.
    """

    def __init__(self, root: Path, collector: FileChangeCollector, timer: DebounceTimer,
                 filter_policy: FileFilterPolicy = None):
        super().__init__()
        self.root = root
        self.collector = collector
        self.timer = timer
        self.filter_policy = filter_policy or FileFilterPolicy()

    def on_created(self, event: FileSystemEvent):
        """Handle file creation"""
        if not event.is_directory:
            self._handle_change(event.src_path)

    def on_modified(self, event: FileSystemEvent):
        """Handle file modification"""
        if not event.is_directory:
            self._handle_change(event.src_path)

    def on_deleted(self, event: FileSystemEvent):
        """Handle file deletion"""
        if not event.is_directory:
            self._handle_change(event.src_path)

    def on_moved(self, event: FileSystemEvent):
        """Handle rename: old path drops out, new path comes in"""
        if not event.is_directory:
            self._handle_change(event.src_path)
            self._handle_change(event.dest_path)

    def _handle_change(self, file_path):
        """Process file change event"""
        relative = self._relative(Path(str(file_path)))
        if relative is None:
            return
        if relative.suffix.lower() != MARKDOWN_EXTENSION or self.filter_policy.should_exclude(relative):
            return
        self.collector.add(relative.as_posix())
        self.timer.trigger()

    def _relative(self, path: Path) -> Optional[Path]:
        try:
            return path.resolve().relative_to(self.root.resolve())
        except ValueError:
            return None


class IndexRefresher:
    """Applies collected changes to the index, one path at a time"""

    def __init__(self, index, collector: FileChangeCollector):
        self.index = index
        self.collector = collector

    def process_changes(self):
        """Refresh every collected path"""
        paths = self.collector.get_and_clear()
        if not paths:
            return

        logger.info("Refreshing %d changed standard(s)", len(paths))
        for path in sorted(paths):
            self.index.refresh(path)


class FileWatcherService:
    """Main file watcher service - routes changes to index refreshes"""

    def __init__(self, watch_path: Path, index, debounce_seconds: float):
        self.watch_path = watch_path
        self.collector = FileChangeCollector()
        self.refresher = IndexRefresher(index, self.collector)
        self.timer = DebounceTimer(debounce_seconds, self._on_debounce)
        self.handler = StandardEventHandler(watch_path, self.collector, self.timer)
        self.observer: Optional[Observer] = None

    def _on_debounce(self):
        """Called after debounce period"""
        try:
            self.refresher.process_changes()
        except Exception:
            logger.exception("Error refreshing index after file changes")

    def start(self):
        """Start watching for file changes"""
        if not self.watch_path.exists():
            logger.warning("Watch path does not exist: %s", self.watch_path)
            return

        self.observer = Observer()
        self.observer.schedule(self.handler, str(self.watch_path), recursive=True)
        self.observer.start()
        logger.info("File watcher started on %s", self.watch_path)

    def stop(self):
        """Stop watching for file changes"""
        if self.observer:
            self.timer.cancel()
            self.observer.stop()
            self.observer.join(timeout=5)
            self.observer = None
            logger.info("File watcher stopped")
