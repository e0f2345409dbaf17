"""
Views - view resolution and the shared page layout.

A view is a plain function ``renderer(controller) -> str`` registered under
a logical name and a namespace (``plugins/<plugin name>``). The rendered
view is wrapped by a master layout: ``default`` for forum pages, ``admin``
for dashboard pages (no menu, no panel).
"""

from dataclasses import dataclass
from html import escape
from typing import Callable, Dict, Tuple, TYPE_CHECKING
import logging

if TYPE_CHECKING:
    from core.controller import PageController


logger = logging.getLogger(__name__)

ViewRenderer = Callable[["PageController"], str]


class ViewNotFoundError(LookupError):
    """Raised when a view is requested that no one registered."""

    def __init__(self, view: str, namespace: str) -> None:
        super().__init__(f"View '{view}' not found in '{namespace}'")
        self.view = view
        self.namespace = namespace


@dataclass(frozen=True)
class ViewLocation:
    """Resolved view: where it lives and how to render it."""

    view: str
    namespace: str
    renderer: ViewRenderer

    @property
    def path(self) -> str:
        return f"{self.namespace}/views/{self.view}"


class ViewRegistry:
    """Views registered by plugins, keyed by (namespace, view)."""

    def __init__(self) -> None:
        self._views: Dict[Tuple[str, str], ViewRenderer] = {}

    @staticmethod
    def _key(view: str, namespace: str) -> Tuple[str, str]:
        return (namespace.strip("/").lower(), view.lower())

    def register(self, view: str, namespace: str, renderer: ViewRenderer) -> None:
        self._views[self._key(view, namespace)] = renderer
        logger.debug(f"View registered: {namespace}/{view}")

    def unregister(self, view: str, namespace: str) -> None:
        self._views.pop(self._key(view, namespace), None)

    def fetch_view_location(self, view: str, namespace: str) -> ViewLocation:
        """
        Resolve a view.

        Raises:
            ViewNotFoundError: If nothing is registered under that name.
        """
        renderer = self._views.get(self._key(view, namespace))
        if renderer is None:
            raise ViewNotFoundError(view, namespace)
        return ViewLocation(view=view, namespace=namespace.strip("/"), renderer=renderer)

    def render(self, location: ViewLocation, controller: "PageController") -> str:
        """Render a resolved view to an HTML fragment."""
        return location.renderer(controller)

    def __contains__(self, key: Tuple[str, str]) -> bool:
        view, namespace = key
        return self._key(view, namespace) in self._views


def _render_breadcrumbs(controller: "PageController") -> str:
    crumbs = controller.data("breadcrumbs", [])
    if not crumbs:
        return ""
    home = f'<span class="CrumbLabel"><a href="/">{escape(controller.translate("Home"))}</a></span>'
    items = "".join(
        f' › <span class="CrumbLabel"><a href="/{escape(crumb["url"])}">{escape(crumb["name"])}</a></span>'
        for crumb in crumbs
    )
    return f'<div class="BreadcrumbsBox"><span class="Breadcrumbs">{home}{items}</span></div>'


def render_master(controller: "PageController", content: str) -> str:
    """Wrap ``content`` in the controller's master layout."""
    from core.panel import MeModule

    site_title = controller.context.config.get("app.title", "Community Forum")
    page_title = controller.data("title", "")
    full_title = f"{page_title} - {site_title}" if page_title else site_title

    head_assets = "".join(
        f'<link rel="stylesheet" href="/{escape(css)}">' for css in controller.css_files
    ) + "".join(
        f'<script src="/{escape(js)}"></script>' for js in controller.js_files
    )

    if controller.master_view() == "admin":
        return f"""<!DOCTYPE html>
<html lang="{escape(controller.context.locale.code)}">
<head>
    <meta charset="UTF-8">
    <title>{escape(full_title)}</title>{head_assets}
</head>
<body class="Dashboard">
    <div id="Content">{content}</div>
</body>
</html>
"""

    menu_html = controller.menu.to_html() if controller.menu is not None else ""
    panel_html = "".join(module.to_html(controller) for module in controller.modules)

    return f"""<!DOCTYPE html>
<html lang="{escape(controller.context.locale.code)}">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(full_title)}</title>{head_assets}
</head>
<body id="{escape(controller.self_url.replace('/', '_') or 'home')}">
    <div id="Head">
        <a class="Title" href="/">{escape(site_title)}</a>
        {menu_html}
        {MeModule().to_html(controller)}
    </div>
    <div id="Body">
        {_render_breadcrumbs(controller)}
        <div id="Panel">{panel_html}</div>
        <div id="Content" class="Column ContentColumn">{content}</div>
    </div>
</body>
</html>
"""
