"""Request-level authentication gate.

Every action except the public allow-list must resolve its session token to an
active user before any business logic runs. The resolved identity travels as
an explicit ``AuthContext`` argument; nothing is stashed on global state.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from fastapi import Depends, Request
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import Unauthenticated
from app.db.session import get_db
from app.models import User, UserSession
from app.services.session_service import SessionManager

PUBLIC_ACTIONS: frozenset[str] = frozenset({"login", "logout", "check_auth"})


@dataclass(frozen=True)
class ClientInfo:
    """Network identity of the caller, copied into sessions and audit entries."""

    ip: str = ""
    agent: str = ""

    @classmethod
    def from_request(cls, request: Request) -> "ClientInfo":
        host = request.client.host if request.client else ""
        return cls(ip=host or "", agent=request.headers.get("user-agent", ""))


@dataclass(frozen=True)
class AuthContext:
    """Authenticated caller for one request."""

    user: User
    session: UserSession
    client: ClientInfo

    @property
    def user_id(self) -> int:
        return self.user.id


def get_session_manager(db: Session = Depends(get_db)) -> SessionManager:
    return SessionManager(db, ttl=timedelta(hours=settings.session_ttl_hours))


def extract_session_token(request: Request) -> str | None:
    """Read the token from ``Authorization: Bearer`` first, then the session cookie."""
    scheme, credentials = get_authorization_scheme_param(request.headers.get("authorization"))
    if scheme.lower() == "bearer" and credentials:
        return credentials
    return request.cookies.get(settings.session_cookie_name) or None


def authorize(request: Request, sessions: SessionManager) -> AuthContext:
    """Resolve the caller or raise ``Unauthenticated``."""
    resolved = sessions.resolve(extract_session_token(request))
    if resolved is None:
        raise Unauthenticated()
    user, session = resolved
    return AuthContext(user=user, session=session, client=ClientInfo.from_request(request))


def guard_action(action: str, request: Request, sessions: SessionManager) -> AuthContext | None:
    """Apply the gate for ``action``. Public actions pass through with no context."""
    if action in PUBLIC_ACTIONS:
        return None
    return authorize(request, sessions)
