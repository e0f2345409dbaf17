"""
Page Controller - per-request render collaborator handed to page handlers.

Handlers fill the controller (title, breadcrumbs, panel modules, data) and
finish with ``render(location)``. Before rendering, every enabled plugin's
``base_render_before`` hook runs so plugins can add menu links.
"""

from typing import Any, Callable, Dict, List, Optional, Union, TYPE_CHECKING
import logging

from fastapi.responses import HTMLResponse

from core.menu import MenuModule
from core.panel import PanelModule
from core.session import ANONYMOUS_SESSION, Session
from core.views import ViewLocation, render_master

if TYPE_CHECKING:
    from fastapi import Request
    from core.app_context import AppContext


logger = logging.getLogger(__name__)

DEFAULT_MASTER_VIEW = "default"

RenderHook = Callable[["PageController"], None]


class PageController:
    """
    Collects everything a themed page needs and renders it.

    Args:
        context: Application context (config, locale, views, panel catalog).
        session: The request session.
        request: The originating request, if any.
        menu: Navigation menu; None for pages without a menu.
        render_hooks: Callables run right before rendering.
    """

    def __init__(
        self,
        context: "AppContext",
        session: Session = ANONYMOUS_SESSION,
        request: Optional["Request"] = None,
        menu: Optional[MenuModule] = None,
        render_hooks: Optional[List[RenderHook]] = None,
    ) -> None:
        self.context = context
        self.session = session
        self.request = request
        self.menu = menu
        self.self_url: str = ""
        self.modules: List[PanelModule] = []
        self.css_files: List[str] = []
        self.js_files: List[str] = []
        self._data: Dict[str, Any] = {}
        self._master_view: Optional[str] = None
        self._render_hooks: List[RenderHook] = list(render_hooks or [])

    # =========================================================================
    # Page setup
    # =========================================================================

    def master_view(self, name: Optional[str] = None) -> str:
        """
        Get or set the master layout.

        Calling without a name selects the default forum layout if no
        layout was chosen yet.
        """
        if name is not None:
            self._master_view = name
        elif self._master_view is None:
            self._master_view = DEFAULT_MASTER_VIEW
        return self._master_view

    def title(self, text: Optional[str] = None) -> str:
        """Get or set the page title (stored as data ``title``)."""
        if text is not None:
            self.set_data("title", text)
        return self.data("title", "")

    def set_breadcrumbs(self, breadcrumbs: List[Dict[str, str]]) -> None:
        self.set_data("breadcrumbs", [dict(crumb) for crumb in breadcrumbs])

    def add_module(self, module: Union[str, PanelModule]) -> bool:
        """
        Add a panel module by name or instance.

        Returns:
            bool: False if the name is unknown.
        """
        if isinstance(module, str):
            instance = self.context.panel.create(module)
            if instance is None:
                return False
            module = instance

        if any(existing.name == module.name for existing in self.modules):
            return False

        self.modules.append(module)
        return True

    def add_css_file(self, filename: str, folder: str = "") -> None:
        self.css_files.append(f"{folder.strip('/')}/design/{filename}" if folder else filename)

    def add_js_file(self, filename: str, folder: str = "") -> None:
        self.js_files.append(f"{folder.strip('/')}/js/{filename}" if folder else filename)

    # =========================================================================
    # Data
    # =========================================================================

    def set_data(self, key: str, value: Any) -> None:
        self._data[key] = value

    def data(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def translate(self, key: str, default: Optional[str] = None) -> str:
        return self.context.translate(key, default)

    # =========================================================================
    # Rendering
    # =========================================================================

    def fetch_view_location(self, view: str, namespace: str) -> ViewLocation:
        """Resolve a view registered under ``namespace``."""
        return self.context.views.fetch_view_location(view, namespace)

    def render(self, location: ViewLocation, status_code: int = 200) -> HTMLResponse:
        """Run render hooks, render the view and wrap it in the layout."""
        for hook in self._render_hooks:
            hook(self)

        content = self.context.views.render(location, self)
        page = render_master(self, content)
        logger.debug(f"Rendered {location.path} with master '{self.master_view()}'")
        return HTMLResponse(content=page, status_code=status_code)
