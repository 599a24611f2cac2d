"""One-shot import of the legacy JSON inventory file."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import Conflict
from app.models import User
from app.schemas.asset import AssetCreate
from app.services.asset_service import create_asset
from app.services.user_service import get_user_by_username

logger = logging.getLogger(__name__)

LEGACY_FIELD_MAP: dict[str, str] = {
    "categoria": "category",
    "marca": "brand",
    "serial": "serial",
    "cantidad": "quantity",
    "ubicacion": "location",
    "observaciones": "notes",
}


def _legacy_actor(db: Session) -> User | None:
    actor = get_user_by_username(db, settings.admin_user)
    if actor is None:
        actor = db.scalar(select(User).where(User.role == "admin").order_by(User.id.asc()).limit(1))
    return actor


def import_legacy_json(db: Session, path: Path) -> int:
    """Import ``{"equipos": [...]}`` rows as audited assets and archive the file.

    Returns the number of assets created. Rows with a serial already present or
    with missing fields are skipped and logged.
    """
    if not path.is_file():
        return 0

    data = json.loads(path.read_text(encoding="utf-8"))
    rows = data.get("equipos") or []
    actor = _legacy_actor(db)
    if actor is None:
        logger.warning("[BOOTSTRAP] Legacy import postponed: no admin account to attribute assets to.")
        return 0

    created = 0
    for row in rows:
        fields = {target: row[source] for source, target in LEGACY_FIELD_MAP.items() if source in row}
        try:
            payload = AssetCreate.model_validate(fields)
        except PydanticValidationError as exc:
            logger.warning("[BOOTSTRAP] Skipping legacy row id=%s: %s", row.get("id"), exc.errors()[0]["msg"])
            continue
        try:
            create_asset(db, payload, user_id=actor.id, client_agent="legacy-json-import")
        except Conflict:
            logger.warning("[BOOTSTRAP] Skipping legacy row id=%s: serial %s exists", row.get("id"), payload.serial)
            continue
        created += 1

    backup = path.with_name(f"{path.name}.backup.{datetime.now().strftime('%Y-%m-%d-%H-%M-%S')}")
    path.rename(backup)
    logger.info("[BOOTSTRAP] Imported %s legacy asset(s); original archived as %s", created, backup.name)
    return created
