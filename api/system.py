"""
System API.

Provides system status, logs, plugin management and the route table for
administrators.
"""

import time
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel

from core.dependencies import AdminSessionDep, ContextDep, RegistryDep
from core.registry import PluginRegistry
from core.routing import Route


router = APIRouter(prefix="/system", tags=["System"])


# Module-level start time for uptime calculation
_start_time: float = time.time()


# -----------------------------------------------------------------------------
# Schemas
# -----------------------------------------------------------------------------


class ServerStatus(BaseModel):
    """Server status information."""

    running: bool
    port: int
    uptime_seconds: float
    started_at: str


class SystemStatusResponse(BaseModel):
    """System status response."""

    server: ServerStatus
    plugins_loaded: list[str]
    plugins_enabled: list[str]


class LogsResponse(BaseModel):
    """Logs response."""

    logs: list[str]
    total: int


class PluginInfo(BaseModel):
    """Plugin information."""

    name: str
    enabled: bool
    status: str
    info: dict[str, Any] = {}
    details: dict[str, Any] = {}


class PluginsResponse(BaseModel):
    """Plugins response."""

    plugins: list[PluginInfo]
    total: int


class RoutesResponse(BaseModel):
    """Route table response."""

    routes: list[Route]
    total: int


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


@router.get("/status", response_model=SystemStatusResponse)
async def get_system_status(
    context: ContextDep,
    registry: RegistryDep,
    _: AdminSessionDep,
) -> SystemStatusResponse:
    """Server state and plugin overview."""
    running, port = context.get_server_status()
    return SystemStatusResponse(
        server=ServerStatus(
            running=running,
            port=port,
            uptime_seconds=round(time.time() - _start_time, 1),
            started_at=datetime.fromtimestamp(_start_time, tz=timezone.utc).isoformat(),
        ),
        plugins_loaded=registry.get_plugin_names(),
        plugins_enabled=[p.get_plugin_name() for p in registry.get_enabled_plugins()],
    )


@router.get("/logs", response_model=LogsResponse)
async def get_logs(
    context: ContextDep,
    _: AdminSessionDep,
    limit: int = Query(100, ge=1, le=500),
) -> LogsResponse:
    """Most recent event log entries."""
    logs = context.get_event_log()
    return LogsResponse(logs=logs[-limit:], total=len(logs))


def _plugin_info(registry: PluginRegistry, name: str) -> PluginInfo:
    plugin = registry.get_plugin(name)
    if plugin is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Plugin '{name}' not found",
        )

    plugin_status = plugin.get_status()
    return PluginInfo(
        name=name,
        enabled=registry.is_enabled(name),
        status=plugin_status.get("status", "unknown"),
        info=plugin.get_plugin_info(),
        details=plugin_status.get("details", {}),
    )


@router.get("/plugins", response_model=PluginsResponse)
async def get_plugins(registry: RegistryDep, _: AdminSessionDep) -> PluginsResponse:
    """All registered plugins."""
    plugins = [_plugin_info(registry, name) for name in registry.get_plugin_names()]
    return PluginsResponse(plugins=plugins, total=len(plugins))


@router.post("/plugins/{name}/enable", response_model=PluginInfo)
async def enable_plugin(name: str, registry: RegistryDep, _: AdminSessionDep) -> PluginInfo:
    """Enable a plugin (runs its activation)."""
    if registry.get_plugin(name) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Plugin '{name}' not found")

    if not registry.enable(name):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Plugin '{name}' could not be enabled",
        )
    return _plugin_info(registry, name)


@router.post("/plugins/{name}/disable", response_model=PluginInfo)
async def disable_plugin(name: str, registry: RegistryDep, _: AdminSessionDep) -> PluginInfo:
    """Disable a plugin (runs its deactivation). Disabling twice is harmless."""
    if registry.get_plugin(name) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Plugin '{name}' not found")

    registry.disable(name)
    return _plugin_info(registry, name)


@router.get("/routes", response_model=RoutesResponse)
async def get_routes(context: ContextDep, _: AdminSessionDep) -> RoutesResponse:
    """The route table."""
    routes = context.router.get_routes()
    return RoutesResponse(routes=routes, total=len(routes))
