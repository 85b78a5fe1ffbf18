class CoreServices:
    """Core service dependencies

    Holds the storage and engine components every route needs:
    - store: DocumentStore over the standards directory
    - index: in-memory StandardsIndex built from the store
    - coordinator: LifecycleCoordinator for create/update
    - tools: StandardsTools facade used by MCP and REST routes
    """

    def __init__(self):
        self.store = None
        self.index = None
        self.coordinator = None
        self.tools = None


class RuntimeState:
    """Runtime state

    Holds mutable runtime state separate from service dependencies.
    """

    def __init__(self):
        self.watcher = None
        self.ready = False


class AppState:
    """Application state container

    Composes focused state objects; delegation methods hide the internal
    structure from route handlers (Law of Demeter).
    """

    def __init__(self):
        self.core = CoreServices()
        self.runtime = RuntimeState()

    # === Service Access Delegation (for route handlers) ===

    def get_store(self):
        """Get document store"""
        return self.core.store

    def get_index(self):
        """Get standards index"""
        return self.core.index

    def get_coordinator(self):
        """Get lifecycle coordinator"""
        return self.core.coordinator

    def get_tools(self):
        """Get standards tool handlers"""
        return self.core.tools

    # === State Access Delegation ===

    def is_ready(self) -> bool:
        return self.runtime.ready

    def indexed_count(self) -> int:
        """Number of standards currently indexed"""
        if self.core.index is None:
            return 0
        return self.core.index.count()

    def index_stats(self) -> dict:
        """Totals per type and status, empty before the index exists"""
        if self.core.index is None:
            return {'total': 0, 'by_type': {}, 'by_status': {}}
        return self.core.index.stats()

    # === Lifecycle Management Delegation ===

    def stop_watcher(self):
        """Stop file watcher service"""
        if self.runtime.watcher:
            self.runtime.watcher.stop()
            self.runtime.watcher = None
