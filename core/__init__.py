"""Core module - Plugin host components."""
from core.app_context import AppContext, ConfigLoader
from core.controller import PageController
from core.interface import IPagePlugin, PageHandler
from core.locale import Locale
from core.logging_config import setup_logging
from core.menu import MenuLink, MenuModule
from core.panel import PanelModule, PanelModuleCatalog
from core.registry import PluginLoader, PluginRegistry
from core.routing import Route, RouteTable, RouteType
from core.server import create_base_app
from core.session import Session, SessionUser, create_session_token, decode_session_token
from core.views import ViewLocation, ViewNotFoundError, ViewRegistry

__all__ = [
    "AppContext", "ConfigLoader",
    "PageController",
    "IPagePlugin", "PageHandler",
    "Locale",
    "setup_logging",
    "MenuLink", "MenuModule",
    "PanelModule", "PanelModuleCatalog",
    "PluginLoader", "PluginRegistry",
    "Route", "RouteTable", "RouteType",
    "create_base_app",
    "Session", "SessionUser", "create_session_token", "decode_session_token",
    "ViewLocation", "ViewNotFoundError", "ViewRegistry",
]
