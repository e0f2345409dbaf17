"""
Unit Tests for core.controller and core.views modules.
"""

import pytest

from core.controller import PageController
from core.menu import MenuModule
from core.session import Session, SessionUser
from core.views import ViewNotFoundError, ViewRegistry


def _hello_view(controller):
    return f"<p>hello {controller.data('name', '')}</p>"


@pytest.fixture
def controller(app_context):
    app_context.views.register("hello", "plugins/test", _hello_view)
    return PageController(app_context, menu=MenuModule())


class TestViewRegistry:

    def test_fetch_registered_view(self):
        views = ViewRegistry()
        views.register("hello", "plugins/test", _hello_view)

        location = views.fetch_view_location("Hello", "/plugins/test/")

        assert location.renderer is _hello_view
        assert location.path == "plugins/test/views/Hello"

    def test_missing_view_raises(self):
        with pytest.raises(ViewNotFoundError) as exc_info:
            ViewRegistry().fetch_view_location("nope", "plugins/test")

        assert exc_info.value.view == "nope"

    def test_render_calls_renderer(self, controller):
        location = controller.fetch_view_location("hello", "plugins/test")
        controller.set_data("name", "Robin")

        assert controller.context.views.render(location, controller) == "<p>hello Robin</p>"

    def test_unregister(self):
        views = ViewRegistry()
        views.register("hello", "plugins/test", _hello_view)
        views.unregister("hello", "plugins/test")

        assert ("hello", "plugins/test") not in views


class TestPageController:

    def test_master_view_defaults_when_requested(self, controller):
        assert controller._master_view is None
        assert controller.master_view() == "default"
        assert controller.master_view("admin") == "admin"
        assert controller.master_view() == "admin"

    def test_title_is_stored_as_data(self, controller):
        controller.title("Greetings")

        assert controller.title() == "Greetings"
        assert controller.data("title") == "Greetings"

    def test_breadcrumbs_are_copied(self, controller):
        crumbs = [{"name": "Greetings", "url": "hello"}]
        controller.set_breadcrumbs(crumbs)
        crumbs[0]["name"] = "changed"

        assert controller.data("breadcrumbs") == [{"name": "Greetings", "url": "hello"}]

    def test_add_module_by_name(self, controller):
        assert controller.add_module("CategoriesModule") is True
        assert [m.name for m in controller.modules] == ["CategoriesModule"]

    def test_add_module_unknown_or_duplicate(self, controller):
        controller.add_module("CategoriesModule")

        assert controller.add_module("CategoriesModule") is False
        assert controller.add_module("NoSuchModule") is False
        assert len(controller.modules) == 1

    def test_asset_paths(self, controller):
        controller.add_css_file("howto.css", "plugins/howto_page")
        controller.add_js_file("howto.js", "plugins/howto_page")

        assert controller.css_files == ["plugins/howto_page/design/howto.css"]
        assert controller.js_files == ["plugins/howto_page/js/howto.js"]

    def test_render_runs_hooks_before_view(self, controller):
        calls = []

        def hook(ctrl):
            calls.append(ctrl.self_url)
            ctrl.menu.add_link("", "Extra", "extra")

        controller._render_hooks = [hook]
        controller.self_url = "hello"
        controller.set_data("name", "Robin")

        response = controller.render(controller.fetch_view_location("hello", "plugins/test"))

        body = response.body.decode("utf-8")
        assert response.status_code == 200
        assert calls == ["hello"]
        assert "<p>hello Robin</p>" in body
        assert 'href="/extra"' in body

    def test_default_layout_has_menu_identity_and_breadcrumbs(self, app_context):
        app_context.views.register("hello", "plugins/test", _hello_view)
        session = Session(user=SessionUser(user_id="1", name="Bob"))
        controller = PageController(app_context, session=session, menu=MenuModule())
        controller.menu.add_link("", "Greetings", "hello")
        controller.title("Greetings")
        controller.set_breadcrumbs([{"name": "Greetings", "url": "hello"}])
        controller.add_module("CategoriesModule")

        body = controller.render(controller.fetch_view_location("hello", "plugins/test")).body.decode()

        assert "<title>Greetings - Test Forum</title>" in body
        assert 'class="Menu"' in body
        assert 'class="MeBox"' in body
        assert "Bob" in body
        assert 'class="BreadcrumbsBox"' in body
        assert "BoxCategories" in body

    def test_admin_layout_has_no_menu_or_panel(self, controller):
        controller.master_view("admin")
        controller.menu.add_link("", "Greetings", "hello")
        controller.add_module("CategoriesModule")

        body = controller.render(controller.fetch_view_location("hello", "plugins/test")).body.decode()

        assert 'class="Dashboard"' in body
        assert 'class="Menu"' not in body
        assert "BoxCategories" not in body
