"""Application models package."""

from app.models.asset import Asset
from app.models.asset_status_history import AssetStatusHistory
from app.models.audit_log import AuditLog
from app.models.user import User
from app.models.user_session import UserSession

__all__ = ["User", "UserSession", "Asset", "AuditLog", "AssetStatusHistory"]
