"""Login, logout and session check actions."""

import logging

from app.api.v1.actions import ActionCall
from app.auth import extract_session_token
from app.core.config import settings
from app.core.errors import AuthFailure
from app.core.logging_config import token_hint
from app.core.security import verify_credentials
from app.models import User
from app.schemas.auth import AuthUserResponse, CheckAuthResponse, LoginRequest, LoginResponse

logger = logging.getLogger(__name__)


def _user_payload(user: User) -> AuthUserResponse:
    return AuthUserResponse(
        id=user.id,
        username=user.username,
        full_name=user.full_name,
        role=user.role,
        email=user.email,
    )


def login(call: ActionCall) -> LoginResponse:
    payload = call.parse(LoginRequest, "Username and password required")
    try:
        user = verify_credentials(call.db, payload.username, payload.password)
    except AuthFailure:
        logger.info("[AUTH] Failed login for username=%r from %s", payload.username, call.client.ip)
        raise

    token = call.sessions.create(user.id, call.client.ip, call.client.agent)
    call.sessions.reap()
    call.response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_ttl_hours * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    logger.info("[AUTH] Login user_id=%s session=%s", user.id, token_hint(token))
    return LoginResponse(user=_user_payload(user), token=token)


def logout(call: ActionCall) -> dict:
    call.sessions.destroy(extract_session_token(call.request))
    call.response.delete_cookie(settings.session_cookie_name)
    return {"success": True, "message": "Logged out successfully"}


def check_auth(call: ActionCall) -> CheckAuthResponse:
    resolved = call.sessions.resolve(extract_session_token(call.request))
    if resolved is None:
        return CheckAuthResponse(authenticated=False)
    user, _session = resolved
    return CheckAuthResponse(authenticated=True, user=_user_payload(user))
