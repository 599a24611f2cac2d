"""Audit trail read actions."""

from app.api.v1.actions import ActionCall
from app.core.config import settings
from app.models import AuditLog
from app.schemas.audit import AuditEntryRead
from app.services import audit_service
from app.utils.time import as_utc


def serialize_audit_entry(entry: AuditLog) -> AuditEntryRead:
    return AuditEntryRead(
        id=entry.id,
        user_id=entry.user_id,
        user_name=entry.user.display_name if entry.user is not None else None,
        action=entry.action,
        table_name=entry.table_name,
        record_id=entry.record_id,
        old_values=entry.old_values,
        new_values=entry.new_values,
        ip_address=entry.ip_address,
        user_agent=entry.user_agent,
        created_at=as_utc(entry.created_at),
    )


def audit_log(call: ActionCall) -> list[AuditEntryRead]:
    limit = call.int_param("limit", settings.audit_log_default_limit)
    limit = min(max(limit, 1), settings.audit_log_max_limit)
    offset = max(call.int_param("offset", 0), 0)
    return [serialize_audit_entry(entry) for entry in audit_service.list_entries(call.db, limit, offset)]


def audit_detail(call: ActionCall) -> AuditEntryRead:
    entry_id = call.int_param("id", required_message="Audit entry ID required")
    return serialize_audit_entry(audit_service.get_entry(call.db, entry_id))
