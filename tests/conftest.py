"""
Pytest configuration and shared fixtures

Common fixtures used across multiple test files are defined here.
Per Kent Beck TDD: Good fixtures reduce test setup duplication.
"""
import sys
from datetime import date
from pathlib import Path

import pytest

# Add api directory to path for imports
api_path = Path(__file__).parent.parent / "api"
if not api_path.exists():
    # Running in a container where api contents are at /app directly
    api_path = Path(__file__).parent.parent
sys.path.insert(0, str(api_path))

from standards.document_store import DocumentStore  # noqa: E402
from standards.frontmatter_parser import FrontmatterParser  # noqa: E402
from standards.index import StandardsIndex  # noqa: E402
from standards.lifecycle import LifecycleCoordinator  # noqa: E402
from standards.validator import MetadataValidator  # noqa: E402

TODAY = date(2025, 3, 14)


def standard_text(type="standard", tier="backend", process="development", tags=("api",),
                  version="1.0.0", created="2025-01-02", updated="2025-01-02",
                  author="Platform Team", status="active", body="# Title\n\nBody text.",
                  extra=""):
    """Render a standard file the way it sits on disk"""
    tag_lines = "".join(f"  - {tag}\n" for tag in tags) if tags else ""
    tags_field = f"tags:\n{tag_lines}" if tags else "tags: []\n"
    return (
        "---\n"
        f"type: {type}\n"
        f"tier: {tier}\n"
        f"process: {process}\n"
        f"{tags_field}"
        f"version: {version}\n"
        f"created: {created}\n"
        f"updated: {updated}\n"
        f"author: {author}\n"
        f"status: {status}\n"
        f"{extra}"
        "---\n"
        "\n"
        f"{body}\n"
    )


# =============================================================================
# Engine Fixtures
# =============================================================================

@pytest.fixture
def validator():
    """Validator whose clock always reports TODAY"""
    return MetadataValidator(clock=lambda: TODAY)


@pytest.fixture
def standards_dir(tmp_path):
    """Create a temporary standards directory.

    Use this for tests that need a writable storage root.
    """
    root = tmp_path / "standards"
    root.mkdir(parents=True, exist_ok=True)
    return root


@pytest.fixture
def write_file(standards_dir):
    """Write raw text to a path under the storage root"""
    def _write(relative: str, text: str) -> Path:
        file_path = standards_dir / relative
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(text, encoding="utf-8")
        return file_path
    return _write


@pytest.fixture
def store(standards_dir, validator):
    return DocumentStore(standards_dir, parser=FrontmatterParser(validator))


@pytest.fixture
def index(store):
    index = StandardsIndex(store)
    index.rebuild()
    return index


@pytest.fixture
def coordinator(store, index, validator):
    return LifecycleCoordinator(store, index, validator=validator)


@pytest.fixture
def new_metadata():
    """Metadata as a create request supplies it"""
    return {
        "type": "standard",
        "tier": "backend",
        "process": "development",
        "tags": ["api"],
        "author": "A",
        "status": "active",
    }


# =============================================================================
# API Fixtures
# =============================================================================

@pytest.fixture
def test_config(standards_dir):
    """Config pointing at the temporary standards directory"""
    from config import Config, LoggingConfig, PathConfig, SearchConfig, ServerConfig, WatcherConfig
    return Config(
        paths=PathConfig(standards_dir=standards_dir),
        server=ServerConfig(),
        search=SearchConfig(),
        watcher=WatcherConfig(enabled=False),
        logging=LoggingConfig(),
    )


@pytest.fixture
def app_state(test_config, validator):
    """Fully initialized AppState over the temporary directory"""
    from app_state import AppState
    from startup.manager import StartupManager

    state = AppState()
    StartupManager(state, test_config).initialize()
    state.core.coordinator.validator = validator
    state.core.store.parser.validator = validator
    yield state
    state.stop_watcher()


@pytest.fixture
def api_client(app_state):
    """TestClient over all routers, sharing app_state"""
    from fastapi import FastAPI
    from fastapi.testclient import TestClient
    from routes.health import router as health_router
    from routes.mcp import router as mcp_router
    from routes.standards import router as standards_router

    app = FastAPI()
    app.include_router(health_router)
    app.include_router(mcp_router)
    app.include_router(standards_router)
    app.state.app_state = app_state
    return TestClient(app)
