"""
Panel Modules - sidebar widgets rendered next to the main content.

The shared layout always renders ``MeModule`` in the page header, so pages
that add the standard panel must leave it out to avoid a duplicate.
"""
from abc import ABC, abstractmethod
from html import escape
from typing import Dict, List, Optional, Type, TYPE_CHECKING
import logging

if TYPE_CHECKING:
    from core.controller import PageController


logger = logging.getLogger(__name__)

IDENTITY_MODULE = "MeModule"


class PanelModule(ABC):
    """Base class for sidebar widgets."""

    name: str = ""

    @abstractmethod
    def to_html(self, controller: "PageController") -> str:
        """Render the widget. Return "" to render nothing."""
        pass

    def _box(self, css_class: str, title: str, body: str) -> str:
        return (
            f'<div class="Box {css_class}"><h4>{escape(title)}</h4>{body}</div>'
        )


class MeModule(PanelModule):
    """Identity widget: who is signed in."""

    name = IDENTITY_MODULE

    def to_html(self, controller: "PageController") -> str:
        t = controller.translate
        if controller.session.is_valid():
            body = f'<span class="Username">{escape(controller.session.display_name)}</span>'
        else:
            body = f'<span class="Username">{escape(t("Guest"))}</span>'
        return f'<div class="MeBox">{body}</div>'


class GuestModule(PanelModule):
    """Sign-in prompt, only for anonymous visitors."""

    name = "GuestModule"

    def to_html(self, controller: "PageController") -> str:
        if controller.session.is_valid():
            return ""
        t = controller.translate
        return self._box(
            "GuestBox",
            t("Howdy, Stranger!"),
            f"<p>{escape(t('It looks like you are new here. Sign in or register to get involved.'))}</p>",
        )


class NewDiscussionModule(PanelModule):
    name = "NewDiscussionModule"

    def to_html(self, controller: "PageController") -> str:
        t = controller.translate
        return f'<div class="BoxButtons"><a class="Button Primary" href="/post/discussion">{escape(t("New Discussion"))}</a></div>'


class DiscussionFilterModule(PanelModule):
    name = "DiscussionFilterModule"

    def to_html(self, controller: "PageController") -> str:
        t = controller.translate
        links = [("discussions", t("Recent Discussions"))]
        if controller.session.is_valid():
            links.append(("discussions/mine", t("My Discussions")))
        items = "".join(f'<li><a href="/{url}">{escape(text)}</a></li>' for url, text in links)
        return self._box("BoxDiscussionFilter", t("Quick Links"), f'<ul class="PanelInfo">{items}</ul>')


class BookmarkedModule(PanelModule):
    """Bookmarks exist only for signed-in users."""

    name = "BookmarkedModule"

    def to_html(self, controller: "PageController") -> str:
        if not controller.session.is_valid():
            return ""
        t = controller.translate
        return self._box("BoxBookmarks", t("Bookmarked Discussions"), f"<p>{escape(t('Nothing bookmarked yet.'))}</p>")


class CategoriesModule(PanelModule):
    name = "CategoriesModule"

    def to_html(self, controller: "PageController") -> str:
        t = controller.translate
        return self._box(
            "BoxCategories",
            t("Categories"),
            f'<ul class="PanelInfo"><li><a href="/categories">{escape(t("All Categories"))}</a></li></ul>',
        )


class RecentActivityModule(PanelModule):
    name = "RecentActivityModule"

    def to_html(self, controller: "PageController") -> str:
        t = controller.translate
        return self._box("RecentActivity", t("Recent Activity"), f"<p>{escape(t('No activity yet.'))}</p>")


BUILTIN_PANEL_MODULES: List[Type[PanelModule]] = [
    MeModule,
    GuestModule,
    NewDiscussionModule,
    DiscussionFilterModule,
    BookmarkedModule,
    CategoriesModule,
    RecentActivityModule,
]


class PanelModuleCatalog:
    """
    Registry of panel module classes by name, plus the configured list of
    modules that make up a standard forum panel.
    """

    def __init__(self, standard_panel: Optional[List[str]] = None) -> None:
        self._classes: Dict[str, Type[PanelModule]] = {
            cls.name: cls for cls in BUILTIN_PANEL_MODULES
        }
        self._standard_panel: List[str] = list(standard_panel or [])

    def register(self, module_class: Type[PanelModule]) -> None:
        """Make a plugin-provided panel module available by name."""
        self._classes[module_class.name] = module_class

    def create(self, name: str) -> Optional[PanelModule]:
        """Instantiate the module called ``name``, or None if unknown."""
        module_class = self._classes.get(name)
        if module_class is None:
            logger.warning(f"Panel module '{name}' is not registered. Skipping.")
            return None
        return module_class()

    def get_standard_panel(self) -> List[str]:
        """Names of the modules on a standard forum page."""
        return list(self._standard_panel)

    def get_module_names(self) -> List[str]:
        return list(self._classes.keys())
