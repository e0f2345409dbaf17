"""
HowTo Page Plugin Configuration.

Manages environment variables specific to the greeting page plugin.
Uses prefix HOWTO_PAGE_ to avoid conflicts with other plugins.

Changing a route while the plugin is enabled has no effect on the route
table: disable the plugin (which deletes the current route), change the
values, then enable it again.
"""

from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class HowToPageSettings(BaseSettings):
    """
    Greeting page settings loaded from environment variables.

    All variables use the HOWTO_PAGE_ prefix for plugin isolation.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    short_route: Annotated[
        str,
        Field(
            description="Public path users see, e.g. /hello",
            validation_alias="HOWTO_PAGE_SHORT_ROUTE",
        ),
    ] = "hello"

    long_route: Annotated[
        str,
        Field(
            description="Internal path the page handler is registered under",
            validation_alias="HOWTO_PAGE_LONG_ROUTE",
        ),
    ] = "vanilla/howtovanillapage"

    page_name: Annotated[
        str,
        Field(
            description="Untranslated page name used for title, menu and breadcrumb",
            validation_alias="HOWTO_PAGE_PAGE_NAME",
        ),
    ] = "Greetings"

    @field_validator("short_route", "long_route")
    @classmethod
    def strip_slashes(cls, v: str) -> str:
        v = v.strip().strip("/")
        if not v:
            raise ValueError("route must not be empty")
        return v

    @property
    def route_pattern(self) -> str:
        """Route table pattern matching the short route and any sub-path."""
        return f"^{self.short_route}(/.*)?$"

    @property
    def route_destination(self) -> str:
        """Internal destination, forwarding the sub-path."""
        return f"{self.long_route}$1"


@lru_cache
def get_howto_page_settings() -> HowToPageSettings:
    """
    Get cached plugin settings.

    Uses LRU cache to ensure settings are loaded only once.

    Returns:
        HowToPageSettings: Plugin settings instance.
    """
    return HowToPageSettings()
