"""User service operations."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.security import get_password_hash
from app.models import User


def get_user_by_username(db: Session, username: str) -> User | None:
    return db.scalar(select(User).where(User.username == username).limit(1))


def create_user(
    db: Session,
    username: str,
    password: str,
    full_name: str = "",
    email: str | None = None,
    role: str = "user",
) -> User:
    user = User(
        username=username,
        password_hash=get_password_hash(password),
        full_name=full_name,
        email=email,
        role=role.strip() or "user",
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def set_user_active(db: Session, user: User, is_active: bool) -> User:
    """Users are never deleted; deactivation makes all their sessions unresolvable."""
    user.is_active = is_active
    db.commit()
    db.refresh(user)
    return user
