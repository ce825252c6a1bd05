"""Catalog models"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, Text, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from ordercore.database import Base


class Product(Base):
    """Sellable products"""
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("track_inventory = false OR stock >= 0", name="ck_products_tracked_stock_non_negative"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    store_id = Column(UUID(as_uuid=True), ForeignKey("stores.id"), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    price_cents = Column(Integer, nullable=False)  # Price in cents to avoid float issues
    original_price_cents = Column(Integer)  # Pre-discount price, if discounted
    stock = Column(Integer, nullable=False, default=0)
    track_inventory = Column(Boolean, default=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    variants = relationship("ProductVariant", back_populates="product", cascade="all, delete-orphan")
    modifiers = relationship("ProductModifier", back_populates="product", cascade="all, delete-orphan")


class ProductVariant(Base):
    """Variant of a product with its own price and stock"""
    __tablename__ = "product_variants"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id"), nullable=False)
    name = Column(String(255), nullable=False)
    price_cents = Column(Integer, nullable=False)
    original_price_cents = Column(Integer)
    # Tracking is a product flag, so the >= 0 floor for variants is held by
    # the guarded decrement in services.inventory rather than a CHECK
    stock = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    product = relationship("Product", back_populates="variants")


class ProductModifier(Base):
    """Add-on with a price delta (extra cheese, large size)"""
    __tablename__ = "product_modifiers"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id"), nullable=False)
    name = Column(String(100), nullable=False)
    price_cents = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    product = relationship("Product", back_populates="modifiers")
