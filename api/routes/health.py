"""Health and info routes."""
from fastapi import APIRouter, Request

from config import SERVER_NAME, SERVER_VERSION
from models import HealthResponse
from routes.deps import get_app_state

router = APIRouter()


@router.get("/", include_in_schema=False)
async def root():
    """Root endpoint with API information"""
    return {
        "message": "Engineering Standards API",
        "docs": "/docs",
        "health": "/health",
        "mcp": "/mcp"
    }


@router.get("/health", response_model=HealthResponse)
async def health(request: Request):
    """
    Health check endpoint

    Returns server identity and counts of indexed standards by type and status
    """
    app_state = get_app_state(request)
    store = app_state.get_store()
    stats = app_state.index_stats()

    return HealthResponse(
        status="ok" if app_state.is_ready() else "starting",
        server=SERVER_NAME,
        version=SERVER_VERSION,
        indexed_standards=stats['total'],
        standards_dir=str(store.root) if store else "",
        by_type=stats['by_type'],
        by_status=stats['by_status'],
    )
