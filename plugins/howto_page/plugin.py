"""
HowTo Page Plugin Entry Point.

Example of a custom page that looks like every other forum page: it uses
the shared layout, shows the standard panel modules, has a menu entry and
lives under a short, friendly URL instead of its internal path.

    /hello          -> "Hello <signed-in user or Anonymous>!"
    /hello/Robin    -> "Hello Robin!"
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, TYPE_CHECKING
import logging

from core.interface import IPagePlugin, PageHandler
from core.menu import MenuLink
from core.panel import IDENTITY_MODULE
from core.session import Session
from plugins.howto_page.config import HowToPageSettings, get_howto_page_settings
from plugins.howto_page.views import GREETING_VIEW, render_greeting_view

if TYPE_CHECKING:
    from fastapi import Response
    from core.app_context import AppContext
    from core.controller import PageController


logger = logging.getLogger(__name__)

Translate = Callable[[str], str]

PLUGIN_NAME = "howto_page"

PLUGIN_INFO: Dict[str, Any] = {
    "name": "HowTo: Page",
    "description": "Example for creating a custom page that looks like most other pages in the forum.",
    "version": "0.2",
    "mobile_friendly": True,
    "has_locale": False,
    "license": "MIT",
}

ANONYMOUS = "Anonymous"


def _untranslated(key: str) -> str:
    return key


@dataclass(frozen=True)
class GreetingContext:
    """Who the page greets, and whether the name came from the URL."""

    display_name: str
    has_explicit_argument: bool

    def as_data(self) -> Dict[str, Any]:
        return {"name": self.display_name, "has_arguments": self.has_explicit_argument}


@dataclass(frozen=True)
class GreetingPage:
    """Everything the page handler puts on the controller."""

    title: str
    breadcrumbs: List[Dict[str, str]]
    modules: List[str]
    greeting: GreetingContext


def resolve_greeting(
    args: Sequence[str],
    session: Session,
    translate: Translate = _untranslated,
) -> GreetingContext:
    """
    Pick the name to greet.

    The first URL argument wins (whitespace-only counts as missing), then
    the signed-in user's name, then the translated "Anonymous".
    """
    argument = args[0].strip() if args else ""
    if argument:
        return GreetingContext(display_name=argument, has_explicit_argument=True)

    if session.is_valid() and session.display_name.strip():
        name = session.display_name
    else:
        name = translate(ANONYMOUS)

    return GreetingContext(display_name=name, has_explicit_argument=False)


class HowToPagePlugin(IPagePlugin):
    """
    Greeting page plugin.

    Registers ``^<short route>(/.*)?$`` -> ``<long route>$1`` in the route
    table, serves the page under the long route and adds a menu link that
    is highlighted while the page is shown.
    """

    def __init__(self, settings: Optional[HowToPageSettings] = None) -> None:
        self._settings = settings or get_howto_page_settings()
        self._context: Optional["AppContext"] = None

    def get_plugin_name(self) -> str:
        return PLUGIN_NAME

    def get_plugin_info(self) -> Dict[str, Any]:
        return dict(PLUGIN_INFO)

    @property
    def settings(self) -> HowToPageSettings:
        return self._settings

    @property
    def view_namespace(self) -> str:
        return f"plugins/{PLUGIN_NAME}"

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def activate(self, context: "AppContext") -> None:
        """
        Map the short route to the page's internal path.

        The route is only added if the table has no match for the pattern
        yet, so enabling twice leaves a single mapping.
        """
        self._context = context
        router = context.router
        pattern = self._settings.route_pattern

        if router.match_route(pattern) is None:
            router.set_route(pattern, self._settings.route_destination, "Internal")
            context.log_event(
                f"Route '{self._settings.short_route}' -> '{self._settings.long_route}' registered",
                "PLUGIN",
            )

        context.views.register(GREETING_VIEW, self.view_namespace, render_greeting_view)

    def deactivate(self, context: "AppContext") -> None:
        """Delete the route. The page is unreachable afterwards."""
        context.router.delete_route(self._settings.route_pattern)
        context.views.unregister(GREETING_VIEW, self.view_namespace)
        self._context = None

    def get_page_handlers(self) -> Dict[str, PageHandler]:
        return {self._settings.long_route: self.render_page}

    def get_status(self) -> Dict[str, Any]:
        details = {
            "short_route": self._settings.short_route,
            "long_route": self._settings.long_route,
        }
        if self._context is None:
            return {"status": "inactive", "details": details}

        if self._context.router.get_route(self._settings.route_pattern) is None:
            return {"status": "warning", "details": {**details, "message": "route missing"}}
        return {"status": "active", "details": details}

    # =========================================================================
    # Menu
    # =========================================================================

    def render_menu_entry(self, current_path: str, translate: Optional[Translate] = None) -> MenuLink:
        """
        Menu link to the page, marked selected while the page is shown.
        """
        translate = translate or self._translate
        attributes = {"class": "Selected"} if current_path == self._settings.short_route else {}
        return MenuLink(
            group="",
            text=translate(self._settings.page_name),
            url=self._settings.short_route,
            attributes=attributes,
        )

    def base_render_before(self, controller: "PageController") -> None:
        # Only pages with a menu, and never the admin dashboard.
        if controller.menu is None or controller.master_view() == "admin":
            return

        link = self.render_menu_entry(controller.self_url, controller.translate)
        controller.menu.add_link(link.group, link.text, link.url, link.attributes)

    # =========================================================================
    # Page
    # =========================================================================

    def handle_request(
        self,
        args: Sequence[str],
        session: Session,
        translate: Optional[Translate] = None,
        standard_panel: Optional[Sequence[str]] = None,
    ) -> GreetingPage:
        """
        Build the page for ``args`` and ``session`` without touching a
        controller.

        The identity module is dropped from the panel because the shared
        layout already shows it.
        """
        translate = translate or self._translate
        if standard_panel is None:
            standard_panel = self._context.panel.get_standard_panel() if self._context else []

        page_name = translate(self._settings.page_name)
        return GreetingPage(
            title=page_name,
            breadcrumbs=[{"name": page_name, "url": self._settings.short_route}],
            modules=[name for name in standard_panel if name != IDENTITY_MODULE],
            greeting=resolve_greeting(args, session, translate),
        )

    def render_page(self, controller: "PageController", args: List[str]) -> "Response":
        """Page handler registered under the long route."""
        page = self.handle_request(
            args,
            controller.session,
            controller.translate,
            controller.context.panel.get_standard_panel(),
        )

        # Themed layout, and highlight our menu entry.
        controller.master_view()
        controller.self_url = self._settings.short_route

        for module in page.modules:
            controller.add_module(module)

        controller.title(page.title)
        controller.set_breadcrumbs(page.breadcrumbs)
        controller.set_data("short_route", self._settings.short_route)
        for key, value in page.greeting.as_data().items():
            controller.set_data(key, value)

        return controller.render(controller.fetch_view_location(GREETING_VIEW, self.view_namespace))

    def _translate(self, key: str) -> str:
        if self._context is None:
            return key
        return self._context.translate(key)
