"""Order schemas"""

from datetime import datetime
from typing import Optional, List
from uuid import UUID
from pydantic import BaseModel, Field

from ordercore.models.customer import CustomerTier
from ordercore.models.order import OrderStatus, OrderType, PaymentStatus


class AddressInput(BaseModel):
    """Delivery address as submitted; street may hold the whole address"""
    street: Optional[str] = None
    additional: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class LineItemCreate(BaseModel):
    """Requested order line"""
    product_id: UUID
    variant_id: Optional[UUID] = None
    quantity: int = Field(1, ge=1)
    modifiers: List[UUID] = []


class NewCustomerCreate(BaseModel):
    """Customer details for a first-time (or unidentified) customer"""
    name: str = ""
    phone: str = ""
    email: Optional[str] = None
    tier: Optional[CustomerTier] = None


class OrderCreate(BaseModel):
    """Create order request"""
    order_type: OrderType
    items: List[LineItemCreate] = []
    customer_id: Optional[UUID] = None
    new_customer: Optional[NewCustomerCreate] = None
    delivery_address: Optional[str] = None
    address: Optional[AddressInput] = None
    delivery_fee_cents: Optional[int] = Field(None, ge=0)
    scheduled_time: Optional[datetime] = None
    notes: Optional[str] = None
    payment_method: Optional[str] = None


class CustomerSnapshot(BaseModel):
    id: UUID
    name: str
    phone: str
    email: Optional[str]


class OrderSummary(BaseModel):
    """Returned on successful order creation"""
    id: UUID
    order_number: str
    status: OrderStatus
    type: OrderType
    subtotal_cents: int
    delivery_fee_cents: int
    total_cents: int
    customer: CustomerSnapshot
    created_at: datetime


class OrderItemResponse(BaseModel):
    """Order line in response"""
    product_id: UUID
    variant_id: Optional[UUID]
    quantity: int
    unit_price_cents: int
    original_price_cents: Optional[int]
    modifier_ids: List[UUID]

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    """Full order"""
    id: UUID
    store_id: UUID
    order_number: str
    status: OrderStatus
    type: OrderType
    customer_id: UUID
    customer_name: str
    subtotal_cents: int
    delivery_fee_cents: int
    total_cents: int
    delivery_address: Optional[str]
    customer_latitude: Optional[float]
    customer_longitude: Optional[float]
    scheduled_time: Optional[datetime]
    notes: Optional[str]
    payment_method: Optional[str]
    payment_status: PaymentStatus
    created_by: Optional[UUID]
    items: List[OrderItemResponse]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class OrderListCustomer(CustomerSnapshot):
    order_count: int
    is_first_order: bool


class OrderListItem(BaseModel):
    """Order row in a listing"""
    id: UUID
    order_number: str
    status: OrderStatus
    type: OrderType
    subtotal_cents: int
    delivery_fee_cents: int
    total_cents: int
    customer: OrderListCustomer
    item_count: int
    payment_status: PaymentStatus
    payment_method: Optional[str]
    created_at: datetime


class OrderListResponse(BaseModel):
    """Paginated order list"""
    items: List[OrderListItem]
    total: int
    page: int
    page_size: int


class RevertStockResponse(BaseModel):
    reverted_items: int
    total_items: int
