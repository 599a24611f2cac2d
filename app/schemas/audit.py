"""Audit trail response schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class AuditEntryRead(BaseModel):
    """Audit entry joined with the actor's display name."""

    id: int
    user_id: int | None
    user_name: str | None = None
    action: str
    table_name: str
    record_id: int | None
    old_values: dict[str, Any] | None
    new_values: dict[str, Any] | None
    ip_address: str
    user_agent: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
