"""First-run account provisioning."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.core.config import settings
from app.services.user_service import create_user, get_user_by_username

logger = logging.getLogger(__name__)


def ensure_default_admin(db: Session) -> bool:
    """Ensure the configured admin account exists and is active.

    Returns:
        bool: True when the account existed before this call.
    """
    username = settings.admin_user.strip()
    if not username:
        logger.info("[BOOTSTRAP] ADMIN_USER empty; skipping admin bootstrap")
        return False

    existing_admin = get_user_by_username(db, username)
    if existing_admin is not None:
        if not existing_admin.is_active:
            existing_admin.is_active = True
            db.commit()
            logger.info("[BOOTSTRAP] Admin exists but was inactive; account re-activated.")
        logger.info("[BOOTSTRAP] Admin exists")
        return True

    if not settings.admin_pass:
        logger.warning("[BOOTSTRAP] No users named %s and ADMIN_PASS not set; no admin created.", username)
        return False

    create_user(
        db,
        username=username,
        password=settings.admin_pass,
        full_name=settings.admin_full_name,
        role="admin",
    )
    logger.warning("[SECURITY] Admin account %s created from ADMIN_PASS. Rotate the password after first login.", username)
    return False
