"""Opaque session token lifecycle backed by the ``user_sessions`` table."""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable
from datetime import datetime, timedelta

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, joinedload

from app.core.logging_config import token_hint
from app.models import User, UserSession
from app.utils.time import as_utc, utcnow

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL: timedelta = timedelta(hours=24)
TOKEN_BYTES: int = 32


class SessionManager:
    """Issues, resolves and expires login sessions.

    One instance is built per request around that request's database session;
    ``clock`` is injectable so expiry can be tested at exact boundaries.
    """

    def __init__(
        self,
        db: Session,
        *,
        ttl: timedelta = DEFAULT_SESSION_TTL,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.db = db
        self.ttl = ttl
        self.clock = clock

    def create(self, user_id: int, client_ip: str = "", client_agent: str = "") -> str:
        """Persist a new session for ``user_id`` and return its token.

        Earlier sessions of the same user stay valid.
        """
        now = self.clock()
        token = secrets.token_hex(TOKEN_BYTES)
        self.db.add(
            UserSession(
                id=token,
                user_id=user_id,
                ip_address=client_ip[:64],
                user_agent=client_agent[:512],
                created_at=now,
                expires_at=now + self.ttl,
            )
        )
        self.db.commit()
        logger.info("[AUTH] Session %s issued for user_id=%s", token_hint(token), user_id)
        return token

    def resolve(self, session_id: str | None) -> tuple[User, UserSession] | None:
        """Return ``(user, session)`` while the session is unexpired and its user active."""
        if not session_id:
            return None
        session: UserSession | None = self.db.scalar(
            select(UserSession)
            .options(joinedload(UserSession.user))
            .where(UserSession.id == session_id)
            .limit(1)
        )
        if session is None:
            return None
        if not self.clock() < as_utc(session.expires_at):
            return None
        user = session.user
        if user is None or not user.is_active:
            return None
        return user, session

    def destroy(self, session_id: str | None) -> None:
        """Delete the session row. Unknown or already-deleted tokens are ignored."""
        if not session_id:
            return
        self.db.execute(
            delete(UserSession).where(UserSession.id == session_id).execution_options(synchronize_session=False)
        )
        self.db.commit()
        logger.info("[AUTH] Session %s destroyed", token_hint(session_id))

    def reap(self) -> int:
        """Delete every session whose expiry has passed. Returns the number removed."""
        result = self.db.execute(
            delete(UserSession)
            .where(UserSession.expires_at <= self.clock())
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        removed = int(result.rowcount or 0)
        if removed:
            logger.info("[AUTH] Reaped %s expired session(s)", removed)
        return removed
