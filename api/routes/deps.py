"""Route dependencies and helpers

Routes reach the engine through these accessors instead of walking
request.app.state themselves.
"""
from fastapi import Request

from app_state import AppState
from standards.index import StandardsIndex
from standards.lifecycle import LifecycleCoordinator


def get_app_state(request: Request) -> AppState:
    """Get AppState from request"""
    return request.app.state.app_state


def get_index(request: Request) -> StandardsIndex:
    """Index serving every read route"""
    return get_app_state(request).get_index()


def get_coordinator(request: Request) -> LifecycleCoordinator:
    """Coordinator serving create and update routes"""
    return get_app_state(request).get_coordinator()
