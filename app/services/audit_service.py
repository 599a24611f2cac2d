"""Audit log helpers."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from app.core.errors import NotFound, ValidationError
from app.models import Asset, AuditLog
from app.models.audit_log import AUDIT_ACTIONS

logger = logging.getLogger(__name__)

ASSET_SNAPSHOT_FIELDS: tuple[str, ...] = (
    "id",
    "category",
    "brand",
    "serial",
    "quantity",
    "location",
    "notes",
    "condition_status",
    "status",
    "created_by",
    "created_at",
    "updated_at",
)


def _json_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def snapshot_asset(asset: Asset) -> dict[str, Any]:
    """Return a JSON-safe copy of every persisted asset field."""
    return {field: _json_value(getattr(asset, field)) for field in ASSET_SNAPSHOT_FIELDS}


def record(
    db: Session,
    *,
    user_id: int | None,
    action: str,
    table_name: str,
    record_id: int | None,
    old_values: dict[str, Any] | None = None,
    new_values: dict[str, Any] | None = None,
    client_ip: str = "",
    client_agent: str = "",
) -> AuditLog:
    """Stage one audit entry on ``db``.

    Nothing is committed here: the caller commits the entry together with the
    mutation it documents. Empty snapshots are stored as null.
    """
    if action not in AUDIT_ACTIONS:
        logger.warning("[AUDIT] Rejected entry with unknown action %r for %s#%s", action, table_name, record_id)
        raise ValidationError(f"Unknown audit action: {action}")
    entry = AuditLog(
        user_id=user_id,
        action=action,
        table_name=table_name,
        record_id=record_id,
        old_values={key: _json_value(value) for key, value in old_values.items()} if old_values else None,
        new_values={key: _json_value(value) for key, value in new_values.items()} if new_values else None,
        ip_address=client_ip[:64],
        user_agent=client_agent[:512],
    )
    db.add(entry)
    logger.debug("[AUDIT] Staged %s on %s#%s by user_id=%s", action, table_name, record_id, user_id)
    return entry


def list_entries(db: Session, limit: int, offset: int = 0) -> list[AuditLog]:
    """Return audit entries newest first."""
    return list(
        db.scalars(
            select(AuditLog)
            .options(joinedload(AuditLog.user))
            .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
            .limit(max(limit, 0))
            .offset(max(offset, 0))
        ).all()
    )


def get_entry(db: Session, entry_id: int) -> AuditLog:
    entry = db.scalar(
        select(AuditLog).options(joinedload(AuditLog.user)).where(AuditLog.id == entry_id).limit(1)
    )
    if entry is None:
        raise NotFound("Audit entry not found")
    return entry
