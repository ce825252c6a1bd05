"""Inventory ledger model"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, Text
from sqlalchemy.dialects.postgresql import UUID

from ordercore.database import Base

ORDER_SALE = "ORDER_SALE"
RETURN = "RETURN"


class InventoryActivity(Base):
    """Append-only record of a stock mutation. Never updated or deleted."""
    __tablename__ = "inventory_activities"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    store_id = Column(UUID(as_uuid=True), ForeignKey("stores.id"), nullable=False)
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id"), nullable=False)
    variant_id = Column(UUID(as_uuid=True), ForeignKey("product_variants.id"))

    type = Column(String(30), nullable=False)  # ORDER_SALE, RETURN
    quantity = Column(Integer, nullable=False)  # Signed delta
    old_stock = Column(Integer, nullable=False)
    new_stock = Column(Integer, nullable=False)
    reason = Column(Text)
    changed_by = Column(UUID(as_uuid=True))

    created_at = Column(DateTime, default=datetime.utcnow)
