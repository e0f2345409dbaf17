"""
Route Table - Host-managed friendly URL mappings.

Plugins map a public pattern (e.g. ``^hello(/.*)?$``) to an internal
destination (e.g. ``vanilla/howtovanillapage$1``). The dispatcher consults
the table before resolving a page handler.

Patterns may use the wildcards ``:alphanum`` and ``:num``. Destinations may
reference pattern groups as ``$1``, ``$2``...
"""

from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Union
import json
import logging
import os
import re
import tempfile
import threading

from pydantic import BaseModel, ValidationError


logger = logging.getLogger(__name__)

_WILDCARDS = {
    ":alphanum": "([0-9a-zA-Z-_]+)",
    ":num": "([0-9]+)",
}
_BACKREF_PATTERN = re.compile(r"\$(\d+)")


class RouteTableError(Exception):
    """Raised when the routes file cannot be read."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class RouteType(str, Enum):
    """
    How a matched route is served.

    - INTERNAL: the request is dispatched to the destination path, the
      browser URL does not change.
    - TEMPORARY / PERMANENT: 302 / 301 redirect to the destination.
    - NOT_AUTHORIZED / NOT_FOUND: the request is answered with 401 / 404.
    """

    INTERNAL = "Internal"
    TEMPORARY = "Temporary"
    PERMANENT = "Permanent"
    NOT_AUTHORIZED = "NotAuthorized"
    NOT_FOUND = "NotFound"

    def __str__(self) -> str:
        return self.value


class Route(BaseModel):
    """A single route table entry."""

    pattern: str
    destination: str
    type: RouteType = RouteType.INTERNAL


class RouteTable:
    """
    In-memory route table with optional JSON file persistence.

    Changes are serialized with a lock; activation and deactivation of
    plugins happen outside normal request traffic but may still race with
    the admin API.
    """

    def __init__(self, routes_file: Optional[Union[str, Path]] = None) -> None:
        self._routes: Dict[str, Route] = {}
        self._lock = threading.RLock()
        self._routes_file: Optional[Path] = Path(routes_file) if routes_file else None

        if self._routes_file is not None:
            self._load()

    # =========================================================================
    # Persistence
    # =========================================================================

    def _load(self) -> None:
        """Load routes from the JSON file, if it exists."""
        if self._routes_file is None or not self._routes_file.exists():
            return

        try:
            with open(self._routes_file, "r", encoding="utf-8") as f:
                raw_routes = json.load(f)
            routes = [Route.model_validate(raw) for raw in raw_routes]
        except json.JSONDecodeError as e:
            raise RouteTableError(self._routes_file, f"Invalid JSON in routes file: {e}")
        except (TypeError, ValidationError) as e:
            raise RouteTableError(self._routes_file, f"Invalid route entry: {e}")

        for route in routes:
            self._routes[route.pattern] = route

        logger.info(f"Loaded {len(self._routes)} route(s) from {self._routes_file}")

    def _save(self) -> None:
        """
        Write routes to the JSON file (no-op for in-memory tables).

        The file is replaced in one step, readers never see a partial write.
        """
        if self._routes_file is None:
            return

        self._routes_file.parent.mkdir(parents=True, exist_ok=True)
        payload = [route.model_dump(mode="json") for route in self._routes.values()]

        fd, tmp_path = tempfile.mkstemp(
            dir=self._routes_file.parent, prefix=f".{self._routes_file.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_path, self._routes_file)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    # =========================================================================
    # Mutation
    # =========================================================================

    def set_route(
        self,
        pattern: str,
        destination: str,
        route_type: Union[RouteType, str] = RouteType.INTERNAL,
    ) -> Route:
        """
        Insert or replace a route.

        Args:
            pattern: Regular expression matched against the request path.
            destination: Target path, may contain ``$N`` back-references.
            route_type: How a match is served.

        Returns:
            The stored route.
        """
        route = Route(pattern=pattern, destination=destination, type=RouteType(route_type))
        with self._lock:
            self._routes[pattern] = route
            self._save()
        logger.info(f"Route set: '{pattern}' -> '{destination}' ({route.type})")
        return route

    def delete_route(self, pattern: str) -> bool:
        """
        Remove a route. Removing a missing route is not an error.

        Returns:
            bool: True if a route was removed.
        """
        with self._lock:
            removed = self._routes.pop(pattern, None)
            if removed is not None:
                self._save()

        if removed is not None:
            logger.info(f"Route deleted: '{pattern}'")
        return removed is not None

    # =========================================================================
    # Lookup
    # =========================================================================

    def get_route(self, pattern: str) -> Optional[Route]:
        """Literal lookup by pattern."""
        return self._routes.get(pattern)

    def get_routes(self) -> List[Route]:
        """All routes in insertion order."""
        return list(self._routes.values())

    def match_route(self, request: str) -> Optional[Route]:
        """
        Find the route serving ``request``.

        A literal pattern match wins. Otherwise the first pattern whose
        expression matches the start of ``request`` (ignoring case) is used,
        and ``$N`` back-references in its destination are filled from the
        request.

        Returns:
            A route whose ``destination`` is the resolved path, or None.
        """
        literal = self.get_route(request)
        if literal is not None:
            return literal

        for route in self.get_routes():
            expression = route.pattern
            for wildcard, replacement in _WILDCARDS.items():
                expression = expression.replace(wildcard, replacement)

            try:
                match = re.match(expression, request, re.IGNORECASE)
            except re.error as e:
                logger.error(f"Invalid route pattern '{route.pattern}': {e}")
                continue

            if match is None:
                continue

            destination = route.destination
            if "$" in destination and "(" in expression:
                # The matched prefix is replaced, any unmatched tail is kept.
                destination = _BACKREF_PATTERN.sub(
                    lambda ref: self._group_or_empty(match, int(ref.group(1))),
                    destination,
                ) + request[match.end():]

            return Route(pattern=route.pattern, destination=destination, type=route.type)

        return None

    @staticmethod
    def _group_or_empty(match: "re.Match[str]", index: int) -> str:
        """Value of group ``index``, empty for unmatched or missing groups."""
        if index > (match.re.groups or 0):
            return ""
        return match.group(index) or ""
