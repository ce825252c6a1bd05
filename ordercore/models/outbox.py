"""Outbox model for post-commit side effects"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, JSON, Integer, Text
from sqlalchemy.dialects.postgresql import UUID

from ordercore.database import Base

ORDER_CREATED = "order.created"


class OutboxEvent(Base):
    """Side effect staged in the same transaction as the order that caused it"""
    __tablename__ = "outbox_events"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    store_id = Column(UUID(as_uuid=True), ForeignKey("stores.id"), nullable=False)
    event_type = Column(String(100), nullable=False)
    payload_json = Column(JSON, nullable=False)  # {"order_id": "...", "actor_id": "..."}

    attempts = Column(Integer, nullable=False, default=0)
    last_error = Column(Text)
    processed_at = Column(DateTime)

    created_at = Column(DateTime, default=datetime.utcnow)
