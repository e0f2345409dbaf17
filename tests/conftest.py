"""
Pytest Configuration and Shared Fixtures.

Provides common test fixtures for host and plugin unit tests.
"""

from typing import Callable

import pytest
from fastapi.testclient import TestClient

from core.interface import IPagePlugin


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture
def mock_env_vars(monkeypatch, tmp_path):
    """Set up mock environment variables for testing."""
    env_vars = {
        "SERVER_HOST": "127.0.0.1",
        "SERVER_PORT": "8000",
        "BASE_URL": "https://test.example.com",
        "APP_DEBUG": "true",
        "APP_LOG_LEVEL": "DEBUG",
        "APP_TITLE": "Test Forum",
        "APP_LOCALE": "en",
        "LOCALE_DIR": str(tmp_path / "locales"),
        "SESSION_COOKIE_NAME": "forum_session",
        "SESSION_SECRET_KEY": "test-session-secret-12345",
        "SESSION_ALGORITHM": "HS256",
        "SESSION_EXPIRE_MINUTES": "60",
        "ROUTES_FILE": "",
        "ENABLED_PLUGINS": "*",
        "PANEL_MODULES": "MeModule,GuestModule,NewDiscussionModule,CategoriesModule",
    }

    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)

    for key in ("HOWTO_PAGE_SHORT_ROUTE", "HOWTO_PAGE_LONG_ROUTE", "HOWTO_PAGE_PAGE_NAME"):
        monkeypatch.delenv(key, raising=False)

    from plugins.howto_page.config import get_howto_page_settings
    get_howto_page_settings.cache_clear()

    yield env_vars

    get_howto_page_settings.cache_clear()


@pytest.fixture
def config_loader(mock_env_vars):
    """Create a ConfigLoader instance with mock environment."""
    from core.app_context import ConfigLoader

    loader = ConfigLoader()
    loader.load()
    return loader


@pytest.fixture
def app_context(config_loader):
    """Create an AppContext instance with mock environment."""
    from core.app_context import AppContext

    return AppContext(config_loader)


@pytest.fixture(autouse=True)
def reset_registry():
    """Reset the PluginRegistry singleton around each test."""
    from core.registry import PluginRegistry

    PluginRegistry.reset()
    yield
    PluginRegistry.reset()


@pytest.fixture
def registry(app_context):
    """A fresh registry bound to the test context."""
    from core.registry import PluginRegistry

    registry = PluginRegistry()
    registry.set_context(app_context)
    return registry


# =============================================================================
# Plugin Fixtures
# =============================================================================


class MockPlugin(IPagePlugin):
    """Mock plugin implementation for testing."""

    def __init__(self, name: str = "mock_plugin", handler_path: str | None = None):
        self._name = name
        self._handler_path = handler_path or f"mock/{name}"
        self.activations = 0
        self.deactivations = 0
        self.hook_calls = 0
        self._shutdown = False

    def get_plugin_name(self) -> str:
        return self._name

    def activate(self, context) -> None:
        self.activations += 1

    def deactivate(self, context) -> None:
        self.deactivations += 1

    def get_page_handlers(self) -> dict:
        return {self._handler_path: self.handle}

    def handle(self, controller, args):
        from fastapi.responses import PlainTextResponse
        return PlainTextResponse(f"{self._name}:{'/'.join(args)}")

    def base_render_before(self, controller) -> None:
        self.hook_calls += 1

    def on_shutdown(self) -> None:
        self._shutdown = True


@pytest.fixture
def mock_plugin():
    """Create a mock plugin instance."""
    return MockPlugin()


@pytest.fixture
def mock_plugin_factory() -> Callable[..., MockPlugin]:
    """Factory for creating mock plugins with custom names."""
    def _create(name: str, handler_path: str | None = None):
        return MockPlugin(name, handler_path)
    return _create


# =============================================================================
# Session Fixtures
# =============================================================================


@pytest.fixture
def session_token_factory(config_loader) -> Callable[..., str]:
    """Factory for signed session tokens."""
    from core.session import SessionUser, create_session_token

    def _create(name: str = "Bob", user_id: str = "1", roles: list[str] | None = None) -> str:
        return create_session_token(SessionUser(user_id=user_id, name=name, roles=roles or []), config_loader)

    return _create


@pytest.fixture
def admin_headers(session_token_factory) -> dict[str, str]:
    token = session_token_factory(name="Admin", user_id="99", roles=["admin"])
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def howto_plugin(mock_env_vars):
    from plugins.howto_page.plugin import HowToPagePlugin

    return HowToPagePlugin()


@pytest.fixture
def app(app_context, registry, howto_plugin):
    """Application with the greeting page plugin enabled."""
    from api.system import router as system_router
    from core.server import create_base_app

    registry.register(howto_plugin)
    registry.enable(howto_plugin.get_plugin_name())
    return create_base_app(app_context, registry, routers=[system_router])


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
