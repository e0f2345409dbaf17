"""
AppContext - Dependency Injection Container.
Implements the Dependency Inversion Principle (DIP).

Plugins receive this context instead of reaching for global accessors:
the route table, locale, view registry and panel catalog all hang off it.
"""
from typing import Any, Dict, List, Optional, TYPE_CHECKING
from dataclasses import dataclass, field
from pathlib import Path
import os
import logging

from dotenv import load_dotenv

if TYPE_CHECKING:
    from core.locale import Locale
    from core.panel import PanelModuleCatalog
    from core.routing import RouteTable
    from core.views import ViewRegistry


DEFAULT_PANEL_MODULES = (
    "MeModule,GuestModule,NewDiscussionModule,DiscussionFilterModule,"
    "BookmarkedModule,CategoriesModule,RecentActivityModule"
)


def _split_list(raw: str) -> List[str]:
    """Split a comma separated env value, dropping blanks."""
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class ConfigLoader:
    """Configuration loader from environment variables."""

    _config: Dict[str, Any] = field(default_factory=dict)

    def load(self, env_path: Optional[str] = None) -> None:
        """Load configuration from .env file."""
        if env_path:
            load_dotenv(env_path)
        else:
            # Try to find .env in project root
            project_root = Path(__file__).parent.parent
            env_file = project_root / ".env"
            if env_file.exists():
                load_dotenv(env_file)

        self._config = {
            "server": {
                "host": os.getenv("SERVER_HOST", "127.0.0.1"),
                "port": int(os.getenv("SERVER_PORT", "8000")),
                "base_url": os.getenv("BASE_URL", "")
            },
            "app": {
                "debug": os.getenv("APP_DEBUG", "true").lower() == "true",
                "log_level": os.getenv("APP_LOG_LEVEL", "INFO"),
                "title": os.getenv("APP_TITLE", "Community Forum")
            },
            "locale": {
                "code": os.getenv("APP_LOCALE", "en"),
                "path": os.getenv("LOCALE_DIR", "locales")
            },
            "session": {
                "cookie_name": os.getenv("SESSION_COOKIE_NAME", "forum_session"),
                "secret_key": os.getenv("SESSION_SECRET_KEY", ""),
                "algorithm": os.getenv("SESSION_ALGORITHM", "HS256"),
                "expire_minutes": int(os.getenv("SESSION_EXPIRE_MINUTES", "1440"))
            },
            "routes": {
                "file": os.getenv("ROUTES_FILE", "")
            },
            "plugins": {
                "enabled": _split_list(os.getenv("ENABLED_PLUGINS", "*"))
            },
            "panel": {
                "modules": _split_list(os.getenv("PANEL_MODULES", DEFAULT_PANEL_MODULES))
            }
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot notation key."""
        keys = key.split('.')
        value = self._config
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def is_session_configured(self) -> bool:
        """Check if a session signing secret is set."""
        return bool(self.get("session.secret_key"))


class AppContext:
    """
    Application Context - Central Dependency Injection Container.
    """

    def __init__(self, config: Optional[ConfigLoader] = None) -> None:
        self._logger = logging.getLogger(__name__)
        if config is None:
            config = ConfigLoader()
            config.load()
        self._config_loader = config

        # Service instances (lazy initialization)
        self._router: Optional["RouteTable"] = None
        self._locale: Optional["Locale"] = None
        self._views: Optional["ViewRegistry"] = None
        self._panel: Optional["PanelModuleCatalog"] = None

        # Event log for the system API
        self._event_log: list[str] = []
        self._max_log_entries: int = 500

        # Runtime state
        self._server_running: bool = False
        self._server_port: int = self._config_loader.get("server.port", 8000)

    @property
    def config(self) -> ConfigLoader:
        """Access the configuration loader."""
        return self._config_loader

    @property
    def router(self) -> "RouteTable":
        """Lazy initialization of the route table."""
        if self._router is None:
            from core.routing import RouteTable, RouteTableError
            routes_file = self._config_loader.get("routes.file") or None
            try:
                self._router = RouteTable(routes_file)
            except RouteTableError as e:
                # Keep the broken file untouched and serve from memory.
                self._logger.error(f"Route table not loaded, using an in-memory table: {e}")
                self.log_event(f"Routes file unreadable: {e.path}", "ERROR")
                self._router = RouteTable()
        return self._router

    @property
    def locale(self) -> "Locale":
        """Lazy initialization of the active locale."""
        if self._locale is None:
            from core.locale import Locale
            self._locale = Locale.load(
                self._config_loader.get("locale.code", "en"),
                self._config_loader.get("locale.path", "locales"),
            )
        return self._locale

    @property
    def views(self) -> "ViewRegistry":
        """Lazy initialization of the view registry."""
        if self._views is None:
            from core.views import ViewRegistry
            self._views = ViewRegistry()
        return self._views

    @property
    def panel(self) -> "PanelModuleCatalog":
        """Lazy initialization of the panel module catalog."""
        if self._panel is None:
            from core.panel import PanelModuleCatalog
            self._panel = PanelModuleCatalog(self._config_loader.get("panel.modules", []))
        return self._panel

    def translate(self, key: str, default: Optional[str] = None) -> str:
        """Shortcut for ``context.locale.translate``."""
        return self.locale.translate(key, default)

    def log_event(self, message: str, level: str = "INFO") -> None:
        """Log an event to both logger and event log."""
        from datetime import datetime
        timestamp = datetime.now().strftime("%H:%M:%S")
        formatted = f"[{timestamp}] [{level}] {message}"

        self._event_log.append(formatted)
        if len(self._event_log) > self._max_log_entries:
            self._event_log = self._event_log[-self._max_log_entries:]

        self._logger.info(message)

    def get_event_log(self) -> list[str]:
        """Get the current event log."""
        return self._event_log.copy()

    def set_server_status(self, running: bool, port: int = 8000) -> None:
        """Update server status."""
        self._server_running = running
        self._server_port = port

    def get_server_status(self) -> tuple[bool, int]:
        """Get current server status."""
        return (self._server_running, self._server_port)
