"""Shared SQLAlchemy base declarative class and model imports."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for ORM models."""


# Import model modules so metadata is populated before create_all.
from app.models import asset as _asset  # noqa: E402,F401
from app.models import asset_status_history as _asset_status_history  # noqa: E402,F401
from app.models import audit_log as _audit_log  # noqa: E402,F401
from app.models import user as _user  # noqa: E402,F401
from app.models import user_session as _user_session  # noqa: E402,F401
