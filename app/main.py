"""FastAPI entrypoint for the inventory ledger service."""

from __future__ import annotations

import logging
from datetime import timedelta
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.v1.api import api_router
from app.core.config import settings
from app.core.errors import InventoryError
from app.core.logging_config import setup_logging
from app.db import session as db_session
from app.db.base import Base
from app.db.migrations import ensure_sqlite_schema
from app.db.seed import import_legacy_json
from app.services.account_service import ensure_default_admin
from app.services.session_service import SessionManager

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)
app.include_router(api_router, prefix="/api/v1")


@app.exception_handler(InventoryError)
async def inventory_error_handler(request: Request, exc: InventoryError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("[API] %s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.message})


@app.on_event("startup")
def startup() -> None:
    setup_logging(settings.log_level)
    Base.metadata.create_all(bind=db_session.engine)
    ensure_sqlite_schema(db_session.engine)
    with db_session.SessionLocal() as db:
        try:
            admin_present = ensure_default_admin(db)
            logger.info("[BOOTSTRAP] admin account present before startup: %s", "yes" if admin_present else "no")
            if settings.legacy_json_path:
                import_legacy_json(db, Path(settings.legacy_json_path))
            SessionManager(db, ttl=timedelta(hours=settings.session_ttl_hours)).reap()
        except Exception:
            logger.exception("[BOOTSTRAP] Seed/bootstrap failed; continuing startup.")


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
