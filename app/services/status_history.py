"""Asset condition-status transitions and their history ledger."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from app.core.errors import NotFound, ValidationError
from app.db.session import transaction
from app.models import Asset, AssetStatusHistory
from app.models.asset import ASSET_ACTIVE
from app.services import audit_service
from app.utils.time import utcnow

logger = logging.getLogger(__name__)

CONDITION_STATUSES: list[str] = ["Good", "Lost", "Damaged", "Decommissioned"]
INITIAL_STATUS: str = "Good"
INITIAL_REASON: str = "Initial creation"

# Every state may move to every state, itself included.
ALLOWED_TRANSITIONS: dict[str, set[str]] = {status: set(CONDITION_STATUSES) for status in CONDITION_STATUSES}


def can_transition(current: str | None, new: str) -> bool:
    """Return whether an asset can move from ``current`` to ``new``.

    Rows written before statuses were enumerated may hold any string; those
    can move to any known state.
    """
    if new not in CONDITION_STATUSES:
        return False
    if current not in ALLOWED_TRANSITIONS:
        return True
    return new in ALLOWED_TRANSITIONS[current]


def record_transition(
    db: Session,
    *,
    asset_id: int,
    old_status: str | None,
    new_status: str,
    user_id: int | None,
    reason: str,
) -> AssetStatusHistory:
    """Stage one history entry. Only the initial entry (``old_status`` null) may omit a reason."""
    if old_status is not None and not reason.strip():
        raise ValidationError("A reason is required to change status")
    entry = AssetStatusHistory(
        asset_id=asset_id,
        old_status=old_status,
        new_status=new_status,
        changed_by=user_id,
        change_reason=reason,
    )
    db.add(entry)
    return entry


def change_status(
    db: Session,
    *,
    asset_id: int,
    new_status: str,
    user_id: int,
    reason: str,
    client_ip: str = "",
    client_agent: str = "",
) -> Asset:
    """Move an asset to ``new_status``, writing the audit entry and history entry atomically."""
    new_status = (new_status or "").strip()
    reason = (reason or "").strip()
    if not new_status:
        raise ValidationError("New status is required")
    if not reason:
        raise ValidationError("A reason is required to change status")
    if new_status not in CONDITION_STATUSES:
        raise ValidationError(f"Unknown status '{new_status}'. Allowed: {', '.join(CONDITION_STATUSES)}")

    with transaction(db):
        asset: Asset | None = db.scalar(
            select(Asset).where(Asset.id == asset_id, Asset.status == ASSET_ACTIVE).limit(1)
        )
        if asset is None:
            raise NotFound("Asset not found")
        old_status = asset.condition_status
        if not can_transition(old_status, new_status):
            raise ValidationError(f"Cannot change status from '{old_status}' to '{new_status}'")

        asset.condition_status = new_status
        asset.updated_at = utcnow()
        audit_service.record(
            db,
            user_id=user_id,
            action="UPDATE_STATUS",
            table_name=Asset.__tablename__,
            record_id=asset.id,
            old_values={"condition_status": old_status},
            new_values={"condition_status": new_status},
            client_ip=client_ip,
            client_agent=client_agent,
        )
        record_transition(
            db,
            asset_id=asset.id,
            old_status=old_status,
            new_status=new_status,
            user_id=user_id,
            reason=reason,
        )

    logger.info("[ASSETS] asset_id=%s status %s -> %s by user_id=%s", asset_id, old_status, new_status, user_id)
    return asset


def history(db: Session, asset_id: int) -> list[AssetStatusHistory]:
    """Return the transitions of one asset, newest first. Deleted assets keep their history."""
    return list(
        db.scalars(
            select(AssetStatusHistory)
            .options(joinedload(AssetStatusHistory.user))
            .where(AssetStatusHistory.asset_id == asset_id)
            .order_by(AssetStatusHistory.created_at.desc(), AssetStatusHistory.id.desc())
        ).all()
    )
