"""
Tests for file watcher functionality
"""
import time
import pytest
from pathlib import Path
from unittest.mock import Mock

from watcher import (
    DebounceTimer,
    FileChangeCollector,
    FileWatcherService,
    IndexRefresher,
    StandardEventHandler,
)
from tests.conftest import standard_text


class TestDebounceTimer:
    """Test debounce timer"""

    def test_timer_triggers_after_delay(self):
        """Test callback triggered after delay"""
        callback = Mock()
        timer = DebounceTimer(delay=0.1, callback=callback)

        timer.trigger()
        time.sleep(0.05)
        callback.assert_not_called()

        time.sleep(0.15)
        callback.assert_called_once()

    def test_timer_resets_on_trigger(self):
        """Test timer resets when triggered again"""
        callback = Mock()
        timer = DebounceTimer(delay=0.1, callback=callback)

        timer.trigger()
        time.sleep(0.05)
        timer.trigger()  # Reset
        time.sleep(0.08)
        callback.assert_not_called()

        time.sleep(0.1)
        callback.assert_called_once()

    def test_cancel_prevents_execution(self):
        """Test cancel stops callback"""
        callback = Mock()
        timer = DebounceTimer(delay=0.1, callback=callback)

        timer.trigger()
        timer.cancel()
        time.sleep(0.15)
        callback.assert_not_called()


class TestFileChangeCollector:
    """Test file change collector"""

    def test_deduplicates(self):
        collector = FileChangeCollector()
        collector.add("a.md")
        collector.add("a.md")
        collector.add("b.md")

        assert collector.count() == 2

    def test_get_and_clear(self):
        collector = FileChangeCollector()
        collector.add("a.md")

        assert collector.get_and_clear() == {"a.md"}
        assert collector.count() == 0


class TestStandardEventHandler:
    """Test event routing"""

    @pytest.fixture
    def handler(self, tmp_path):
        return StandardEventHandler(tmp_path, FileChangeCollector(), Mock())

    def event(self, path, is_directory=False, dest=None):
        event = Mock()
        event.src_path = str(path)
        event.dest_path = str(dest) if dest else None
        event.is_directory = is_directory
        return event

    def test_markdown_change_collected(self, handler, tmp_path):
        handler.on_modified(self.event(tmp_path / "a.md"))

        assert handler.collector.get_and_clear() == {"a.md"}
        handler.timer.trigger.assert_called_once()

    def test_nested_path_is_relative(self, handler, tmp_path):
        handler.on_created(self.event(tmp_path / "sub" / "a.md"))
        assert handler.collector.get_and_clear() == {"sub/a.md"}

    def test_non_markdown_ignored(self, handler, tmp_path):
        handler.on_created(self.event(tmp_path / "a.txt"))
        assert handler.collector.count() == 0

    def test_temp_files_ignored(self, handler, tmp_path):
        handler.on_created(self.event(tmp_path / ".a.md.x1y2.tmp"))
        handler.on_created(self.event(tmp_path / ".hidden.md"))
        assert handler.collector.count() == 0

    def test_directories_ignored(self, handler, tmp_path):
        handler.on_deleted(self.event(tmp_path / "dir.md", is_directory=True))
        assert handler.collector.count() == 0

    def test_outside_root_ignored(self, handler, tmp_path):
        handler.on_modified(self.event(tmp_path.parent / "elsewhere.md"))
        assert handler.collector.count() == 0

    def test_move_marks_both_ends(self, handler, tmp_path):
        handler.on_moved(self.event(tmp_path / "a.md", dest=tmp_path / "b.md"))
        assert handler.collector.get_and_clear() == {"a.md", "b.md"}


class TestIndexRefresher:

    def test_refreshes_each_path(self):
        index = Mock()
        collector = FileChangeCollector()
        collector.add("b.md")
        collector.add("a.md")

        IndexRefresher(index, collector).process_changes()

        assert [c.args[0] for c in index.refresh.call_args_list] == ["a.md", "b.md"]

    def test_nothing_pending(self):
        index = Mock()
        IndexRefresher(index, FileChangeCollector()).process_changes()
        index.refresh.assert_not_called()


class TestFileWatcherService:

    def test_missing_path_does_not_start(self, tmp_path):
        service = FileWatcherService(tmp_path / "missing", Mock(), 0.1)
        service.start()
        assert service.observer is None

    def test_debounced_refresh_updates_index(self, standards_dir, index, write_file):
        """Out-of-band edits reach the index after the debounce delay"""
        service = FileWatcherService(standards_dir, index, 0.1)
        service.start()
        try:
            write_file("a.md", standard_text())
            deadline = time.time() + 5
            while index.count() == 0 and time.time() < deadline:
                time.sleep(0.05)
        finally:
            service.stop()

        assert index.get_by_path("a.md") is not None
        assert service.observer is None
