"""
FastAPI Application Factory.

Creates and configures the FastAPI application with middleware, core
endpoints and the page dispatcher that serves plugin pages.
"""

from typing import Optional, Sequence, TYPE_CHECKING
import logging

from fastapi import APIRouter, FastAPI, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, RedirectResponse

from core.app_context import AppContext
from core.controller import PageController
from core.menu import MenuModule
from core.routing import RouteType
from core.session import get_session

if TYPE_CHECKING:
    from core.registry import PluginRegistry

_logger = logging.getLogger(__name__)


def create_base_app(
    context: AppContext,
    registry: "PluginRegistry | None" = None,
    routers: Optional[Sequence[APIRouter]] = None,
    title: str = "Forum Page Host",
    description: str = "Plugin pages and system API",
    version: str = "0.2.0",
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        context: Application context for logging and configuration.
        registry: Plugin registry serving page handlers.
        routers: Extra API routers, mounted before the page dispatcher.
        title: API title for OpenAPI documentation.
        description: API description for OpenAPI documentation.
        version: API version string.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(title=title, description=description, version=version)

    # Store references in app state for access in route handlers
    app.state.context = context
    app.state.registry = registry

    _configure_cors(app, context)

    # Add security headers middleware
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        # Prevent clickjacking
        response.headers["X-Frame-Options"] = "DENY"
        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"
        # Referrer policy
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    # Register core routes
    _register_core_routes(app)

    for router in routers or ():
        app.include_router(router, prefix="/api")

    # The catch-all page dispatcher must come last
    _register_page_dispatcher(app)

    return app


def _configure_cors(app: FastAPI, context: AppContext) -> None:
    """Allow BASE_URL, plus localhost in debug mode."""
    config = context.config
    base_url = config.get("server.base_url", "")
    is_debug = config.get("app.debug", False)

    allowed_origins: list[str] = []

    if base_url:
        allowed_origins.append(base_url)

    # In debug mode, also allow localhost for development
    if is_debug:
        allowed_origins.extend([
            "http://localhost:8000",
            "http://127.0.0.1:8000",
        ])

    if not allowed_origins:
        _logger.warning(
            "BASE_URL not configured and not in debug mode. "
            "CORS will reject all cross-origin requests."
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )


def _register_core_routes(app: FastAPI) -> None:
    """Register core API routes (health check)."""

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "Forum Page Host"}


def _register_page_dispatcher(app: FastAPI) -> None:
    """Register the catch-all route serving plugin pages."""

    @app.get("/{path:path}", response_class=HTMLResponse, include_in_schema=False)
    def dispatch_page(path: str, request: Request) -> Response:
        """
        Serve a themed page.

        1. Apply the route table (internal rewrite, redirect, 401, 404).
        2. Resolve the plugin handler for the internal path.
        3. Hand the handler a fresh controller and the remaining segments.
        """
        context: AppContext = request.app.state.context
        registry: "PluginRegistry | None" = request.app.state.registry

        if registry is None:
            _logger.error("PluginRegistry not configured")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Server configuration error",
            )

        request_path = path.strip("/")
        route = context.router.match_route(request_path)
        if route is not None:
            if route.type == RouteType.INTERNAL:
                request_path = route.destination.strip("/")
            elif route.type in (RouteType.TEMPORARY, RouteType.PERMANENT):
                return RedirectResponse(
                    url=_redirect_target(route.destination),
                    status_code=302 if route.type == RouteType.TEMPORARY else 301,
                )
            elif route.type == RouteType.NOT_AUTHORIZED:
                raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authorized")
            else:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found")

        resolved = registry.resolve_handler(request_path)
        if resolved is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found")

        handler, args = resolved
        controller = PageController(
            context,
            session=get_session(request),
            request=request,
            menu=MenuModule(),
            render_hooks=registry.get_render_hooks(),
        )
        return handler(controller, args)


def _redirect_target(destination: str) -> str:
    """Absolute URLs are kept, paths are made site-absolute."""
    if destination.startswith(("http://", "https://", "/")):
        return destination
    return "/" + destination

