"""
HowTo Page Plugin Package.

A themed greeting page served under a short route.
"""

from plugins.howto_page.config import HowToPageSettings, get_howto_page_settings
from plugins.howto_page.plugin import (
    GreetingContext,
    GreetingPage,
    HowToPagePlugin,
    resolve_greeting,
)

__all__ = [
    "HowToPagePlugin",
    "HowToPageSettings",
    "get_howto_page_settings",
    "GreetingContext",
    "GreetingPage",
    "resolve_greeting",
]
