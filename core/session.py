"""
Session Module.

Resolves the per-request session from a signed JWT carried in the session
cookie (or an ``Authorization: Bearer`` header). A missing, expired or
tampered token yields an anonymous session, never an error.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional, TYPE_CHECKING
import logging

import jwt
from fastapi import Request

if TYPE_CHECKING:
    from core.app_context import ConfigLoader


logger = logging.getLogger(__name__)

SESSION_TOKEN_TYPE = "session"
ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class SessionUser:
    """The signed-in user as seen by plugins."""

    user_id: str
    name: str
    roles: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Session:
    """Per-request session. Anonymous when ``user`` is None."""

    user: Optional[SessionUser] = None

    def is_valid(self) -> bool:
        """True if a user is signed in."""
        return self.user is not None

    def is_admin(self) -> bool:
        return self.user is not None and ADMIN_ROLE in self.user.roles

    @property
    def display_name(self) -> str:
        return self.user.name if self.user is not None else ""


ANONYMOUS_SESSION = Session()


def _get_session_config(config: "ConfigLoader") -> tuple[str, str, int]:
    return (
        config.get("session.secret_key", ""),
        config.get("session.algorithm", "HS256"),
        int(config.get("session.expire_minutes", 1440)),
    )


def create_session_token(user: SessionUser, config: "ConfigLoader") -> str:
    """
    Create a signed session token for ``user``.

    Raises:
        ValueError: If no session secret is configured.
    """
    secret, algorithm, expire_minutes = _get_session_config(config)
    if not secret:
        raise ValueError("SESSION_SECRET_KEY not configured")

    now = datetime.now(timezone.utc)
    payload = {
        "sub": user.user_id,
        "name": user.name,
        "roles": list(user.roles),
        "type": SESSION_TOKEN_TYPE,
        "iat": now,
        "exp": now + timedelta(minutes=expire_minutes),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_session_token(token: Optional[str], config: "ConfigLoader") -> Session:
    """Decode a session token, falling back to an anonymous session."""
    if not token:
        return ANONYMOUS_SESSION

    secret, algorithm, _ = _get_session_config(config)
    if not secret:
        logger.warning("Session token received but SESSION_SECRET_KEY is not configured")
        return ANONYMOUS_SESSION

    try:
        payload: dict[str, Any] = jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.ExpiredSignatureError:
        logger.info("Session token expired")
        return ANONYMOUS_SESSION
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid session token: {e}")
        return ANONYMOUS_SESSION

    if payload.get("type") != SESSION_TOKEN_TYPE or not payload.get("sub"):
        logger.warning("Session token has wrong type or no subject")
        return ANONYMOUS_SESSION

    roles = payload.get("roles") or []
    return Session(
        user=SessionUser(
            user_id=str(payload["sub"]),
            name=str(payload.get("name") or ""),
            roles=[str(role) for role in roles],
        )
    )


def get_session(request: Request) -> Session:
    """Resolve the session for ``request`` using the app's context."""
    context = request.app.state.context
    config = context.config

    token = request.cookies.get(config.get("session.cookie_name", "forum_session"))
    if not token:
        authorization = request.headers.get("authorization", "")
        if authorization.lower().startswith("bearer "):
            token = authorization[7:].strip()

    return decode_session_token(token, config)
