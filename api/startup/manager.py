"""Startup manager - orchestrates application initialization.

Phases run in order: validate configuration, build components, load
the index, start the optional file watcher.
"""
import logging

from app_state import AppState
from operations.standards_tools import StandardsTools
from standards.document_store import DocumentStore
from standards.index import StandardsIndex
from standards.lifecycle import LifecycleCoordinator
from standards.search import ContextExtractor, StandardSearcher
from startup.config_validator import ConfigValidator
from watcher import FileWatcherService

logger = logging.getLogger(__name__)


class StartupManager:
    """Manages application startup and shutdown"""

    def __init__(self, app_state: AppState, config):
        self.state = app_state
        self.config = config

    def initialize(self):
        """Initialize all components"""
        logger.info("Initializing standards directory...")
        self._validate_config()
        self._init_components()
        logger.info("Loading standards index...")
        self._load_index()
        self._start_watcher()
        self.state.runtime.ready = True
        logger.info("Standards server ready: %d standards indexed", self.state.indexed_count())

    def shutdown(self):
        """Release runtime resources"""
        self.state.stop_watcher()
        self.state.runtime.ready = False

    # ============ Configuration Phase ============

    def _validate_config(self):
        """Validate configuration before startup"""
        ConfigValidator(self.config).validate()

    # ============ Component Phase ============

    def _init_components(self):
        """Build store, index, coordinator and tool handlers"""
        search = self.config.search
        store = DocumentStore(self.config.paths.standards_dir)
        store.ensure_root()

        searcher = StandardSearcher(
            extractor=ContextExtractor(search.context_length),
            max_contexts=search.max_contexts,
        )
        index = StandardsIndex(store, searcher)
        coordinator = LifecycleCoordinator(store, index)

        self.state.core.store = store
        self.state.core.index = index
        self.state.core.coordinator = coordinator
        self.state.core.tools = StandardsTools(index, coordinator)

    # ============ Indexing Phase ============

    def _load_index(self):
        """Build the index from every file on disk"""
        self.state.get_index().rebuild()

    def _start_watcher(self):
        """Start file watcher when enabled"""
        watcher_config = self.config.watcher
        if not watcher_config.enabled:
            return
        watcher = FileWatcherService(
            self.config.paths.standards_dir,
            self.state.get_index(),
            watcher_config.debounce_seconds,
        )
        watcher.start()
        self.state.runtime.watcher = watcher
