"""Password hashing and credential verification."""

import logging

from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.errors import AuthFailure
from app.models.user import User

logger = logging.getLogger(__name__)

pwd_context: CryptContext = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# Verified against when the username is unknown so both failure paths cost one hash.
_DUMMY_HASH: str = pwd_context.hash("inventory-ledger-dummy-password")


def get_password_hash(password: str) -> str:
    """Hash a plaintext password."""
    if not password:
        raise ValueError("Password must not be empty")
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plaintext password against its hash."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # Unrecognised or corrupt hash in storage.
        return False


def verify_credentials(db: Session, username: str, password: str) -> User:
    """Return the active user owning ``username``/``password`` or raise ``AuthFailure``.

    The username match is exact and case-sensitive. Unknown users and wrong
    passwords raise the same error.
    """
    user: User | None = db.scalar(
        select(User).where(User.username == username, User.is_active.is_(True)).limit(1)
    )
    if user is None:
        verify_password(password, _DUMMY_HASH)
        raise AuthFailure()
    if not verify_password(password, user.password_hash):
        raise AuthFailure()
    return user
