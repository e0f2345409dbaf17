"""
Menu Module - the navigation bar of themed pages.
"""

from dataclasses import dataclass, field
from html import escape
from typing import Dict, List, Optional


@dataclass(frozen=True)
class MenuLink:
    """A single navigation entry."""

    group: str
    text: str
    url: str
    attributes: Dict[str, str] = field(default_factory=dict)

    @property
    def is_selected(self) -> bool:
        return "Selected" in self.attributes.get("class", "").split()

    def to_html(self) -> str:
        attrs = "".join(
            f' {escape(name)}="{escape(value)}"' for name, value in self.attributes.items()
        )
        return f'<a href="/{escape(self.url)}"{attrs}>{escape(self.text)}</a>'


class MenuModule:
    """Collects links from the host and from plugin render hooks."""

    def __init__(self) -> None:
        self._links: List[MenuLink] = []

    def add_link(
        self,
        group: str,
        text: str,
        url: str,
        attributes: Optional[Dict[str, str]] = None,
    ) -> MenuLink:
        link = MenuLink(group=group, text=text, url=url, attributes=dict(attributes or {}))
        self._links.append(link)
        return link

    def get_links(self, group: Optional[str] = None) -> List[MenuLink]:
        if group is None:
            return list(self._links)
        return [link for link in self._links if link.group == group]

    def to_html(self) -> str:
        items = "".join(f"<li>{link.to_html()}</li>" for link in self._links)
        return f'<ul class="Menu">{items}</ul>'

    def __len__(self) -> int:
        return len(self._links)
