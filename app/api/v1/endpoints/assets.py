"""Asset, condition-status and statistics actions."""

from app.api.v1.actions import ActionCall
from app.core.config import settings
from app.core.errors import NotFound, ValidationError
from app.models import Asset, AssetStatusHistory
from app.schemas.asset import (
    AssetCreate,
    AssetPage,
    AssetRead,
    AssetUpdate,
    SQL_INT_MAX,
    StatsResponse,
    StatusChangeRequest,
    StatusHistoryRead,
)
from app.services import asset_service, status_history
from app.utils.time import as_utc


def serialize_asset(asset: Asset) -> AssetRead:
    return AssetRead(
        id=asset.id,
        category=asset.category,
        brand=asset.brand,
        serial=asset.serial,
        quantity=asset.quantity,
        location=asset.location,
        notes=asset.notes,
        condition_status=asset.condition_status,
        status=asset.status,
        created_by=asset.created_by,
        created_by_name=asset.creator.display_name if asset.creator is not None else None,
        created_at=as_utc(asset.created_at),
        updated_at=as_utc(asset.updated_at),
    )


def serialize_history_entry(entry: AssetStatusHistory) -> StatusHistoryRead:
    return StatusHistoryRead(
        id=entry.id,
        asset_id=entry.asset_id,
        old_status=entry.old_status,
        new_status=entry.new_status,
        changed_by=entry.changed_by,
        changed_by_name=entry.user.display_name if entry.user is not None else None,
        change_reason=entry.change_reason,
        created_at=as_utc(entry.created_at),
    )


def get_assets(call: ActionCall) -> AssetRead | AssetPage:
    """One asset when ``id`` is given, otherwise a searchable page."""
    if call.params.get("id"):
        asset = asset_service.get_asset(call.db, call.int_param("id"))
        if asset is None:
            raise NotFound("Asset not found")
        return serialize_asset(asset)

    search = call.params.get("search", "")
    page = max(call.int_param("page", 1), 1)
    limit = max(call.int_param("limit", settings.asset_page_default_limit), 1)
    if (page - 1) * limit > SQL_INT_MAX:
        raise ValidationError("page is out of range")
    assets = asset_service.list_assets(call.db, search, page, limit)
    total = asset_service.count_assets(call.db, search)
    return AssetPage(
        assets=[serialize_asset(asset) for asset in assets],
        total=total,
        page=page,
        limit=limit,
        totalPages=asset_service.total_pages(total, limit),
    )


def stats(call: ActionCall) -> StatsResponse:
    return StatsResponse.model_validate(asset_service.get_stats(call.db))


def create_asset(call: ActionCall) -> dict:
    auth = call.require_auth()
    payload = call.parse(AssetCreate, "Incomplete asset data")
    asset = asset_service.create_asset(
        call.db,
        payload,
        user_id=auth.user_id,
        client_ip=auth.client.ip,
        client_agent=auth.client.agent,
    )
    return {"success": True, "id": asset.id}


def update_asset(call: ActionCall) -> dict:
    auth = call.require_auth()
    payload = call.parse(AssetUpdate, "Incomplete asset data")
    asset_service.update_asset(
        call.db,
        payload,
        user_id=auth.user_id,
        client_ip=auth.client.ip,
        client_agent=auth.client.agent,
    )
    return {"success": True}


def delete_asset(call: ActionCall) -> dict:
    auth = call.require_auth()
    asset_id = call.int_param("id", required_message="Asset ID required")
    asset_service.delete_asset(
        call.db,
        asset_id,
        user_id=auth.user_id,
        client_ip=auth.client.ip,
        client_agent=auth.client.agent,
    )
    return {"success": True}


def change_status(call: ActionCall) -> dict:
    auth = call.require_auth()
    payload = call.parse(StatusChangeRequest, "Asset ID, new status, and reason required")
    status_history.change_status(
        call.db,
        asset_id=payload.asset_id,
        new_status=payload.new_status,
        user_id=auth.user_id,
        reason=payload.reason,
        client_ip=auth.client.ip,
        client_agent=auth.client.agent,
    )
    return {"success": True}


def asset_history(call: ActionCall) -> list[StatusHistoryRead]:
    asset_id = call.int_param("id", required_message="Asset ID required")
    return [serialize_history_entry(entry) for entry in status_history.history(call.db, asset_id)]
