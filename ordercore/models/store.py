"""Store-related models"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Integer, Float
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from ordercore.database import Base


class Store(Base):
    """A business that takes orders"""
    __tablename__ = "stores"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    slug = Column(String(100), unique=True)
    currency = Column(String(10), default="USD")
    is_active = Column(Boolean, default=True)

    # Location
    store_latitude = Column(Float)
    store_longitude = Column(Float)

    # Delivery
    delivery_fee_cents = Column(Integer, default=0)  # Flat default fee
    delivery_radius_km = Column(Float, default=10.0)

    # Order numbering
    order_number_format = Column(String(50), default="WO-{number}")
    order_sequence = Column(Integer, nullable=False, default=0)

    # Notifications
    order_notifications_enabled = Column(Boolean, default=True)
    whatsapp_number = Column(String(20))

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    delivery_zones = relationship(
        "DeliveryZone",
        back_populates="store",
        order_by=lambda: [DeliveryZone.position, DeliveryZone.created_at],
    )
    users = relationship("User", back_populates="store")


class DeliveryZone(Base):
    """Distance band with a flat delivery fee, matched in stored order"""
    __tablename__ = "delivery_zones"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    store_id = Column(UUID(as_uuid=True), ForeignKey("stores.id"), nullable=False)
    name = Column(String(100))
    max_distance_km = Column(Float, nullable=False)
    fee_cents = Column(Integer, nullable=False)
    is_active = Column(Boolean, default=True)
    position = Column(Integer, default=0)  # Authoring order; first match wins
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    store = relationship("Store", back_populates="delivery_zones")
