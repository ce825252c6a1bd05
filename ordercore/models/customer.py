"""Customer model"""

import uuid
import enum
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, JSON, Text, Enum, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID

from ordercore.database import Base


class CustomerTier(str, enum.Enum):
    REGULAR = "REGULAR"
    VIP = "VIP"
    WHOLESALE = "WHOLESALE"


class Customer(Base):
    """Store customers, one per canonical phone number"""
    __tablename__ = "customers"
    __table_args__ = (
        UniqueConstraint("store_id", "canonical_phone", name="uq_customers_store_canonical_phone"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    store_id = Column(UUID(as_uuid=True), ForeignKey("stores.id"), nullable=False)

    name = Column(String(255), nullable=False)
    phone = Column(String(30), nullable=False)  # As submitted
    canonical_phone = Column(String(20), nullable=False, index=True)
    email = Column(String(255))
    tier = Column(Enum(CustomerTier), default=CustomerTier.REGULAR)

    # Address: flattened string plus the structured form
    address = Column(Text)
    address_json = Column(JSON)

    added_by_admin = Column(Boolean, default=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
