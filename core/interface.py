"""
IPagePlugin - Abstract Base Class for all page plugins.
Follows Interface Segregation Principle (ISP) and Open/Closed Principle (OCP).
"""
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Dict, List

if TYPE_CHECKING:
    from fastapi import Response
    from core.app_context import AppContext
    from core.controller import PageController


PageHandler = Callable[["PageController", List[str]], "Response"]


class IPagePlugin(ABC):
    """
    Abstract interface for pluggable pages.
    All plugins must implement this interface to be registered.

    The host never subclasses plugins into its controllers: it calls these
    methods and passes the context or controller explicitly.
    """

    @abstractmethod
    def get_plugin_name(self) -> str:
        """
        Returns the unique identifier for this plugin.
        Used for registry lookup and as the view namespace.

        Returns:
            str: The plugin's unique name (e.g., 'howto_page')
        """
        pass

    @abstractmethod
    def activate(self, context: "AppContext") -> None:
        """
        Called when the plugin is enabled.
        Register routes and views here. Must be safe to call repeatedly.

        Args:
            context: The application context containing shared services
        """
        pass

    def deactivate(self, context: "AppContext") -> None:
        """
        Called when the plugin is disabled.
        Remove whatever ``activate`` registered.
        """
        pass

    def get_plugin_info(self) -> dict:
        """
        Returns descriptive metadata shown in the plugin list.

        Returns:
            dict: At least {"name": ..., "version": ...}
        """
        return {
            "name": self.get_plugin_name(),
            "version": "0.0",
        }

    def get_page_handlers(self) -> Dict[str, PageHandler]:
        """
        Returns the page handlers this plugin serves.

        Keys are internal paths ("controller/method"); the dispatcher calls
        ``handler(controller, args)`` with the remaining URL segments.
        """
        return {}

    def base_render_before(self, controller: "PageController") -> None:
        """
        Hook run before any themed page is rendered.
        Override to add menu links or assets.
        """
        pass

    def on_shutdown(self) -> None:
        """
        Called when the plugin is being unloaded.
        Override for cleanup logic.
        """
        pass

    def get_status(self) -> dict:
        """
        Returns the current status of the plugin for monitoring.

        Returns:
            dict: Status info with structure:
                  {
                      "status": "active" | "warning" | "error",
                      "details": { "key": "value" }
                  }
        """
        return {
            "status": "active",
            "details": {}
        }
