"""Inventory asset ORM model."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

ASSET_ACTIVE = "active"
ASSET_DELETED = "deleted"


class Asset(Base):
    """Physical inventory item tracked by serial number."""

    __tablename__ = "assets"

    id: Mapped[int] = mapped_column(primary_key=True)
    category: Mapped[str] = mapped_column(String(128), nullable=False)
    brand: Mapped[str] = mapped_column(String(128), nullable=False)
    serial: Mapped[str] = mapped_column(String(128), nullable=False, unique=True, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # Free-form at the storage level; the status history service validates values.
    condition_status: Mapped[str] = mapped_column(String(32), nullable=False, default="Good")
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=ASSET_ACTIVE, index=True)
    created_by: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    creator: Mapped["User | None"] = relationship()
