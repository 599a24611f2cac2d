"""Asset repository with audited writes.

Each mutation stages the asset change and its ledger records on the same
session and commits them together through ``transaction``.
"""

from __future__ import annotations

import logging
import math

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, joinedload

from app.core.errors import Conflict, NotFound
from app.db.session import transaction
from app.models import Asset
from app.models.asset import ASSET_ACTIVE, ASSET_DELETED
from app.schemas.asset import AssetCreate, AssetUpdate
from app.services import audit_service, status_history
from app.utils.time import utcnow

logger = logging.getLogger(__name__)

SEARCH_FIELDS = (Asset.category, Asset.brand, Asset.serial, Asset.location, Asset.notes)
DUPLICATE_SERIAL_MESSAGE = "Serial already exists"


def _search_clause(search: str):
    pattern = f"%{search.strip().lower()}%"
    return or_(*(func.lower(column).like(pattern) for column in SEARCH_FIELDS))


def _serial_taken(db: Session, serial: str, exclude_id: int | None = None) -> bool:
    query = select(Asset.id).where(Asset.serial == serial)
    if exclude_id is not None:
        query = query.where(Asset.id != exclude_id)
    return db.scalar(query.limit(1)) is not None


def get_asset(db: Session, asset_id: int) -> Asset | None:
    """Return an active asset with its creator loaded, or ``None``."""
    return db.scalar(
        select(Asset)
        .options(joinedload(Asset.creator))
        .where(Asset.id == asset_id, Asset.status == ASSET_ACTIVE)
        .limit(1)
    )


def require_asset(db: Session, asset_id: int) -> Asset:
    asset = get_asset(db, asset_id)
    if asset is None:
        raise NotFound("Asset not found")
    return asset


def list_assets(db: Session, search: str = "", page: int = 1, limit: int = 10) -> list[Asset]:
    page = max(page, 1)
    limit = max(limit, 1)
    query = select(Asset).options(joinedload(Asset.creator)).where(Asset.status == ASSET_ACTIVE)
    if search.strip():
        query = query.where(_search_clause(search))
    query = query.order_by(Asset.id.asc()).limit(limit).offset((page - 1) * limit)
    return list(db.scalars(query).all())


def count_assets(db: Session, search: str = "") -> int:
    query = select(func.count(Asset.id)).where(Asset.status == ASSET_ACTIVE)
    if search.strip():
        query = query.where(_search_clause(search))
    return int(db.scalar(query) or 0)


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit > 0 else 0


def create_asset(
    db: Session,
    payload: AssetCreate,
    *,
    user_id: int,
    client_ip: str = "",
    client_agent: str = "",
) -> Asset:
    """Register an asset in the initial condition, with its CREATE audit and first history entry."""
    if _serial_taken(db, payload.serial):
        logger.info("[ASSETS] Rejected duplicate serial %s", payload.serial)
        raise Conflict(DUPLICATE_SERIAL_MESSAGE)

    with transaction(db, conflict_message=DUPLICATE_SERIAL_MESSAGE):
        now = utcnow()
        asset = Asset(
            category=payload.category,
            brand=payload.brand,
            serial=payload.serial,
            quantity=payload.quantity,
            location=payload.location,
            notes=payload.notes,
            condition_status=status_history.INITIAL_STATUS,
            status=ASSET_ACTIVE,
            created_by=user_id,
            created_at=now,
            updated_at=now,
        )
        db.add(asset)
        db.flush()
        audit_service.record(
            db,
            user_id=user_id,
            action="CREATE",
            table_name=Asset.__tablename__,
            record_id=asset.id,
            old_values=None,
            new_values={**payload.model_dump(), "condition_status": status_history.INITIAL_STATUS},
            client_ip=client_ip,
            client_agent=client_agent,
        )
        status_history.record_transition(
            db,
            asset_id=asset.id,
            old_status=None,
            new_status=status_history.INITIAL_STATUS,
            user_id=user_id,
            reason=status_history.INITIAL_REASON,
        )

    logger.info("[ASSETS] Created asset_id=%s serial=%s by user_id=%s", asset.id, asset.serial, user_id)
    return asset


def update_asset(
    db: Session,
    payload: AssetUpdate,
    *,
    user_id: int,
    client_ip: str = "",
    client_agent: str = "",
) -> Asset:
    """Overwrite the descriptive fields of an asset. Condition status is changed via ``change_status`` only."""
    asset = require_asset(db, payload.id)
    if _serial_taken(db, payload.serial, exclude_id=asset.id):
        logger.info("[ASSETS] Rejected serial %s already used by another asset", payload.serial)
        raise Conflict("Serial already exists on another asset")

    old_values = audit_service.snapshot_asset(asset)
    with transaction(db, conflict_message="Serial already exists on another asset"):
        asset.category = payload.category
        asset.brand = payload.brand
        asset.serial = payload.serial
        asset.quantity = payload.quantity
        asset.location = payload.location
        asset.notes = payload.notes
        asset.updated_at = utcnow()
        audit_service.record(
            db,
            user_id=user_id,
            action="UPDATE",
            table_name=Asset.__tablename__,
            record_id=asset.id,
            old_values=old_values,
            new_values=payload.model_dump(exclude={"id"}),
            client_ip=client_ip,
            client_agent=client_agent,
        )
    return asset


def delete_asset(
    db: Session,
    asset_id: int,
    *,
    user_id: int,
    client_ip: str = "",
    client_agent: str = "",
) -> None:
    """Retire an asset. The row is kept as ``deleted`` so its ledgers stay attached."""
    asset = require_asset(db, asset_id)
    old_values = audit_service.snapshot_asset(asset)
    with transaction(db):
        asset.status = ASSET_DELETED
        asset.updated_at = utcnow()
        audit_service.record(
            db,
            user_id=user_id,
            action="DELETE",
            table_name=Asset.__tablename__,
            record_id=asset.id,
            old_values=old_values,
            new_values=None,
            client_ip=client_ip,
            client_agent=client_agent,
        )
    logger.info("[ASSETS] Deleted asset_id=%s by user_id=%s", asset_id, user_id)


def get_stats(db: Session) -> dict:
    """Aggregate quantities over active assets."""
    active = Asset.status == ASSET_ACTIVE
    total_assets = db.scalar(select(func.coalesce(func.sum(Asset.quantity), 0)).where(active))
    total_categories = db.scalar(select(func.count(func.distinct(Asset.category))).where(active))
    total_locations = db.scalar(select(func.count(func.distinct(Asset.location))).where(active))

    category_total = func.sum(Asset.quantity).label("total")
    by_category = db.execute(
        select(Asset.category, category_total).where(active).group_by(Asset.category).order_by(category_total.desc())
    ).all()
    location_total = func.sum(Asset.quantity).label("total")
    by_location = db.execute(
        select(Asset.location, location_total).where(active).group_by(Asset.location).order_by(location_total.desc())
    ).all()

    return {
        "total_assets": int(total_assets or 0),
        "total_categories": int(total_categories or 0),
        "total_locations": int(total_locations or 0),
        "by_category": [{"category": row[0], "total": int(row[1] or 0)} for row in by_category],
        "by_location": [{"location": row[0], "total": int(row[1] or 0)} for row in by_location],
    }
