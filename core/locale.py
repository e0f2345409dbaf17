"""
Locale - translation lookup for plugin strings.

Definitions are loaded from ``<locale_dir>/<code>.json``, a flat object of
``"English key": "translation"`` pairs. Untranslated keys fall back to the
key itself, so English works without any locale file.
"""

from pathlib import Path
from typing import Dict, Mapping, Optional, Union
import json
import logging


logger = logging.getLogger(__name__)


class Locale:
    """Active locale for the application."""

    def __init__(self, code: str = "en", definitions: Optional[Mapping[str, str]] = None) -> None:
        self.code = code
        self._definitions: Dict[str, str] = dict(definitions or {})

    @classmethod
    def load(cls, code: str, directory: Union[str, Path]) -> "Locale":
        """
        Load the locale ``code`` from ``directory``.

        A missing file is not an error: the locale simply has no definitions.
        """
        path = Path(directory) / f"{code}.json"
        if not path.exists():
            logger.debug(f"No locale file at {path}, using untranslated keys")
            return cls(code)

        with open(path, "r", encoding="utf-8") as f:
            definitions = json.load(f)

        logger.info(f"Loaded {len(definitions)} translation(s) for locale '{code}'")
        return cls(code, definitions)

    def translate(self, key: str, default: Optional[str] = None) -> str:
        """Translation for ``key``, else ``default``, else the key."""
        if key in self._definitions:
            return self._definitions[key]
        return default if default is not None else key

    def set_translations(self, definitions: Mapping[str, str]) -> None:
        """Add or override definitions at runtime."""
        self._definitions.update(definitions)

    def __contains__(self, key: str) -> bool:
        return key in self._definitions
