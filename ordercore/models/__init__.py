"""Database models"""

from ordercore.models.store import Store, DeliveryZone
from ordercore.models.user import User, UserRole
from ordercore.models.customer import Customer, CustomerTier
from ordercore.models.catalog import Product, ProductVariant, ProductModifier
from ordercore.models.order import Order, OrderItem, OrderStatus, OrderType, PaymentStatus
from ordercore.models.inventory import InventoryActivity
from ordercore.models.audit import AuditLog
from ordercore.models.outbox import OutboxEvent

__all__ = [
    "Store",
    "DeliveryZone",
    "User",
    "UserRole",
    "Customer",
    "CustomerTier",
    "Product",
    "ProductVariant",
    "ProductModifier",
    "Order",
    "OrderItem",
    "OrderStatus",
    "OrderType",
    "PaymentStatus",
    "InventoryActivity",
    "AuditLog",
    "OutboxEvent",
]
