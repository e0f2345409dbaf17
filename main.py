"""
Forum Page Host - Entry Point.

ASGI application for uvicorn execution.

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8000 --reload

Or run directly:
    python main.py
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI

from core.app_context import AppContext
from core.logging_config import setup_logging
from core.registry import PluginLoader, PluginRegistry
from core.server import create_base_app

# Plugin directory path
PLUGINS_DIR = "plugins"


# -----------------------------------------------------------------------------
# Application Factory
# -----------------------------------------------------------------------------


def create_app_context() -> AppContext:
    """Create and configure the AppContext."""
    return AppContext()


def create_registry(context: AppContext, plugins_path: Path | None = None) -> PluginRegistry:
    """Create the PluginRegistry, load plugins and enable the configured ones."""
    registry = PluginRegistry()
    registry.set_context(context)

    # Load plugins from /plugins directory
    plugins_path = plugins_path or Path(__file__).parent / PLUGINS_DIR
    loader = PluginLoader(registry)
    count = loader.load_from_directory(str(plugins_path))
    context.log_event(f"Loaded {count} plugin(s) from {PLUGINS_DIR}/", "LOADER")

    enabled = registry.enable_configured(context.config.get("plugins.enabled", ["*"]))
    context.log_event(f"Enabled {enabled} plugin(s)", "LOADER")

    return registry


def create_fastapi_app(context: AppContext, registry: PluginRegistry) -> FastAPI:
    """Create the FastAPI application with all routers configured."""
    from api.system import router as system_router

    return create_base_app(context, registry, routers=[system_router])


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Handles startup and shutdown events.
    """
    logger = logging.getLogger(__name__)
    context: AppContext = app.state.context
    registry: PluginRegistry = app.state.registry

    logger.info("Starting Forum Page Host...")
    context.set_server_status(True, context.config.get("server.port", 8000))
    context.log_event("Application started successfully", "SUCCESS")

    yield

    logger.info("Shutting down Forum Page Host...")
    context.set_server_status(False, context.config.get("server.port", 8000))
    # Plugins are unloaded without deactivation: routes stay registered
    # across restarts, the same as when the process is simply stopped.
    for plugin in registry.get_all_plugins():
        try:
            plugin.on_shutdown()
        except Exception as e:
            logger.error(f"Error during plugin '{plugin.get_plugin_name()}' shutdown: {e}")
    logger.info("Cleanup complete")


# -----------------------------------------------------------------------------
# Module-level Application Instance
# -----------------------------------------------------------------------------

# Create core components
_context = create_app_context()

# Setup logging first
setup_logging(_context.config.get("app.log_level", "INFO"))

_registry = create_registry(_context)

# Create FastAPI app with lifespan
_app = create_fastapi_app(_context, _registry)
_app.router.lifespan_context = lifespan

# Export for uvicorn
app = _app


# -----------------------------------------------------------------------------
# Direct Execution
# -----------------------------------------------------------------------------


def main() -> None:
    """Run the application directly with uvicorn."""
    host = _context.config.get("server.host", "127.0.0.1")
    port = _context.config.get("server.port", 8000)
    debug = _context.config.get("app.debug", False)

    uvicorn_config = {
        "host": host,
        "port": port,
        "reload": debug,
        "log_level": "warning",  # Suppress uvicorn info logs
        "access_log": False,     # Disable uvicorn access logs
    }

    # If reload is enabled, exclude logs and cache directories
    if debug:
        uvicorn_config["reload_excludes"] = [
            "logs/*",
            "**/__pycache__/*",
            "**/*.pyc",
            ".venv/*",
            "*.log",
        ]

    uvicorn.run("main:app", **uvicorn_config)


if __name__ == "__main__":
    main()
