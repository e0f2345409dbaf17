"""
Greeting page view.
"""

from html import escape
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.controller import PageController


GREETING_VIEW = "howtovanillapage"


def render_greeting_view(controller: "PageController") -> str:
    t = controller.translate
    name = escape(controller.data("name", ""))

    if controller.data("has_arguments", False):
        hint = t("The name was taken from the URL.")
    else:
        example = f"/{controller.data('short_route', '')}/Robin"
        hint = t("Add a name to the URL to greet someone else, e.g. {example}.").format(example=example)

    return f"""
<div class="HowToPage">
    <h1 class="H">{escape(controller.title())}</h1>
    <div class="Greeting">
        <p class="Hello">{escape(t("Hello"))} {name}!</p>
        <p class="Hint">{escape(hint)}</p>
    </div>
</div>
"""
