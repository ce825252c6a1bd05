"""Structured audit events"""

from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ordercore.models.audit import AuditLog


def record_event(
    db: AsyncSession,
    store_id: Optional[UUID],
    event_type: str,
    severity: str = "info",
    metadata: Optional[Dict[str, Any]] = None,
    actor_id: Optional[UUID] = None,
    resource_type: Optional[str] = None,
    resource_id: Optional[UUID] = None,
) -> AuditLog:
    entry = AuditLog(
        store_id=store_id,
        actor_id=actor_id,
        actor_type="user" if actor_id else "system",
        event_type=event_type,
        severity=severity,
        resource_type=resource_type,
        resource_id=resource_id,
        data_json=metadata or {},
    )
    db.add(entry)
    return entry
