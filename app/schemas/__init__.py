"""Schema exports."""

from app.schemas.asset import (
    AssetCreate,
    AssetPage,
    AssetRead,
    AssetUpdate,
    StatsResponse,
    StatusChangeRequest,
    StatusHistoryRead,
)
from app.schemas.audit import AuditEntryRead
from app.schemas.auth import AuthUserResponse, CheckAuthResponse, LoginRequest, LoginResponse

__all__ = [
    "AssetCreate",
    "AssetPage",
    "AssetRead",
    "AssetUpdate",
    "StatsResponse",
    "StatusChangeRequest",
    "StatusHistoryRead",
    "AuditEntryRead",
    "AuthUserResponse",
    "CheckAuthResponse",
    "LoginRequest",
    "LoginResponse",
]
