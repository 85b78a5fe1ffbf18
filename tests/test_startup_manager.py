"""
Tests for StartupManager
"""
import pytest

from app_state import AppState
from config import SearchConfig
from startup.config_validator import ConfigValidationError
from startup.manager import StartupManager
from tests.conftest import standard_text


class TestInitialize:

    def test_builds_components_and_index(self, test_config, write_file):
        write_file("standard-backend-development-a-active.md", standard_text())
        state = AppState()

        StartupManager(state, test_config).initialize()

        assert state.is_ready()
        assert state.indexed_count() == 1
        assert state.get_tools() is not None
        assert state.get_coordinator().index is state.get_index()

    def test_search_settings_reach_searcher(self, test_config):
        test_config.search = SearchConfig(context_length=40, max_contexts=2)
        state = AppState()

        StartupManager(state, test_config).initialize()

        searcher = state.get_index().searcher
        assert searcher.extractor.context_length == 40
        assert searcher.max_contexts == 2

    def test_creates_missing_root(self, test_config, tmp_path):
        test_config.paths.standards_dir = tmp_path / "fresh"
        StartupManager(AppState(), test_config).initialize()
        assert (tmp_path / "fresh").is_dir()

    def test_invalid_config_aborts(self, test_config):
        test_config.search = SearchConfig(context_length=0)
        state = AppState()

        with pytest.raises(ConfigValidationError):
            StartupManager(state, test_config).initialize()
        assert not state.is_ready()

    def test_watcher_started_when_enabled(self, test_config):
        test_config.watcher.enabled = True
        state = AppState()
        manager = StartupManager(state, test_config)

        manager.initialize()
        try:
            assert state.runtime.watcher is not None
        finally:
            manager.shutdown()

        assert state.runtime.watcher is None
        assert not state.is_ready()


class TestAppState:

    def test_empty_state(self):
        state = AppState()
        assert state.indexed_count() == 0
        assert not state.is_ready()
        state.stop_watcher()
