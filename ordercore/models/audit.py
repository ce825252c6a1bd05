"""Audit log model"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, JSON
from sqlalchemy.dialects.postgresql import UUID

from ordercore.database import Base


class AuditLog(Base):
    """Structured system events (order_created, ...)"""
    __tablename__ = "audit_logs"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    store_id = Column(UUID(as_uuid=True), ForeignKey("stores.id"))

    # Actor information
    actor_id = Column(UUID(as_uuid=True))  # User ID or null for system
    actor_type = Column(String(50))  # user, system

    # Event details
    event_type = Column(String(100), nullable=False)  # order_created, ...
    severity = Column(String(20), default="info")  # info, warning, error
    resource_type = Column(String(50))
    resource_id = Column(UUID(as_uuid=True))

    data_json = Column(JSON)

    created_at = Column(DateTime, default=datetime.utcnow)
