"""Order models"""

import uuid
import enum
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, JSON, Text, Integer, Float, Boolean, Enum, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from ordercore.database import Base


class OrderType(str, enum.Enum):
    DELIVERY = "DELIVERY"
    PICKUP = "PICKUP"
    DINE_IN = "DINE_IN"


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PREPARING = "PREPARING"
    READY = "READY"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class Order(Base):
    """Persisted order aggregate"""
    __tablename__ = "orders"
    __table_args__ = (
        UniqueConstraint("store_id", "order_number", name="uq_orders_store_order_number"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    store_id = Column(UUID(as_uuid=True), ForeignKey("stores.id"), nullable=False)
    order_number = Column(String(50), nullable=False)

    status = Column(Enum(OrderStatus), nullable=False, default=OrderStatus.PENDING)
    type = Column(Enum(OrderType), nullable=False)

    # Customer, with the name as it was at order time
    customer_id = Column(UUID(as_uuid=True), ForeignKey("customers.id"), nullable=False)
    customer_name = Column(String(255), nullable=False)

    # Pricing (cents)
    subtotal_cents = Column(Integer, nullable=False, default=0)
    delivery_fee_cents = Column(Integer, nullable=False, default=0)
    total_cents = Column(Integer, nullable=False, default=0)

    # Delivery
    delivery_address = Column(Text)
    delivery_address_json = Column(JSON)
    customer_latitude = Column(Float)
    customer_longitude = Column(Float)
    scheduled_time = Column(DateTime)

    notes = Column(Text)

    # Payment (pass-through)
    payment_method = Column(String(50))
    payment_status = Column(Enum(PaymentStatus), nullable=False, default=PaymentStatus.PENDING)

    # Attribution
    created_by = Column(UUID(as_uuid=True))
    created_by_admin = Column(Boolean, default=True)

    stock_reverted_at = Column(DateTime)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    customer = relationship("Customer")
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position",
    )


class OrderItem(Base):
    """Order line with its unit price captured at order time"""
    __tablename__ = "order_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id"), nullable=False)
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id"), nullable=False)
    variant_id = Column(UUID(as_uuid=True), ForeignKey("product_variants.id"))
    position = Column(Integer, nullable=False, default=0)

    quantity = Column(Integer, nullable=False)
    unit_price_cents = Column(Integer, nullable=False)  # Includes modifier deltas
    original_price_cents = Column(Integer)
    modifier_ids = Column(JSON, default=list)  # ["<uuid>", ...]

    # Relationships
    order = relationship("Order", back_populates="items")
    product = relationship("Product")
    variant = relationship("ProductVariant")
