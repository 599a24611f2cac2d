"""Append-only audit trail model."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

AUDIT_ACTIONS = ("CREATE", "UPDATE", "DELETE", "UPDATE_STATUS")


class AuditLog(Base):
    """Stores an immutable trail of mutating actions with before/after snapshots."""

    __tablename__ = "audit_log"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    action: Mapped[str] = mapped_column(String(32), nullable=False)
    table_name: Mapped[str] = mapped_column(String(64), nullable=False)
    record_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    old_values: Mapped[dict | None] = mapped_column(JSON(none_as_null=True), nullable=True)
    new_values: Mapped[dict | None] = mapped_column(JSON(none_as_null=True), nullable=True)
    ip_address: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    user_agent: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc), index=True)

    user: Mapped["User | None"] = relationship()
