"""
Conftest for HowTo Page Plugin Tests.

Provides fixtures for unit testing the greeting page plugin without
starting the web application.
"""

import pytest

from core.session import Session, SessionUser


@pytest.fixture
def clean_plugin_env(monkeypatch, tmp_path):
    """Host and plugin environment with no HOWTO_PAGE_ overrides."""
    monkeypatch.setenv("APP_TITLE", "Test Forum")
    monkeypatch.setenv("APP_LOCALE", "en")
    monkeypatch.setenv("LOCALE_DIR", str(tmp_path / "locales"))
    monkeypatch.setenv("ROUTES_FILE", "")
    monkeypatch.setenv("PANEL_MODULES", "MeModule,GuestModule,CategoriesModule")
    for key in ("HOWTO_PAGE_SHORT_ROUTE", "HOWTO_PAGE_LONG_ROUTE", "HOWTO_PAGE_PAGE_NAME"):
        monkeypatch.delenv(key, raising=False)

    from plugins.howto_page.config import get_howto_page_settings
    get_howto_page_settings.cache_clear()
    yield
    get_howto_page_settings.cache_clear()


@pytest.fixture
def plugin_context(clean_plugin_env):
    """A fresh AppContext with an in-memory route table."""
    from core.app_context import AppContext, ConfigLoader

    loader = ConfigLoader()
    loader.load()
    return AppContext(loader)


@pytest.fixture
def settings(clean_plugin_env):
    from plugins.howto_page.config import HowToPageSettings

    return HowToPageSettings()


@pytest.fixture
def plugin(settings):
    from plugins.howto_page.plugin import HowToPagePlugin

    return HowToPagePlugin(settings)


@pytest.fixture
def active_plugin(plugin, plugin_context):
    plugin.activate(plugin_context)
    return plugin


@pytest.fixture
def anonymous():
    return Session()


@pytest.fixture
def bob():
    return Session(user=SessionUser(user_id="2", name="Bob"))


@pytest.fixture
def translate_de():
    """Translator with a German locale definition for "Anonymous"."""
    definitions = {"Anonymous": "Anonym", "Greetings": "Grüße"}
    return lambda key: definitions.get(key, key)
