"""
FastAPI Dependencies - Dependency Injection for API Routers.

Provides `Annotated[Service, Depends(get_service)]` patterns for
clean dependency injection in FastAPI route handlers.

Usage:
    from core.dependencies import ContextDep, AdminSessionDep

    @router.get("/items")
    async def get_items(context: ContextDep, session: AdminSessionDep):
        context.log_event("Fetching items")
        ...
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from core.app_context import AppContext
from core.registry import PluginRegistry
from core.session import Session, get_session


def get_context(request: Request) -> AppContext:
    """FastAPI dependency for the application context."""
    return request.app.state.context


ContextDep = Annotated[AppContext, Depends(get_context)]


def get_registry(request: Request) -> PluginRegistry:
    """
    FastAPI dependency for the plugin registry.

    Raises:
        HTTPException 503: If the app was built without a registry.
    """
    registry = request.app.state.registry
    if registry is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Plugin registry not configured",
        )
    return registry


RegistryDep = Annotated[PluginRegistry, Depends(get_registry)]


SessionDep = Annotated[Session, Depends(get_session)]


def require_admin(session: SessionDep) -> Session:
    """
    FastAPI dependency: the request must carry an admin session.

    Raises:
        HTTPException 401: If no one is signed in
        HTTPException 403: If the user is not an administrator
    """
    if not session.is_valid():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Sign in required",
        )
    if not session.is_admin():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator role required",
        )
    return session


AdminSessionDep = Annotated[Session, Depends(require_admin)]
