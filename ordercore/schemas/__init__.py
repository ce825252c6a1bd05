"""Pydantic schemas for request/response validation"""

from ordercore.schemas.auth import Token, UserResponse
from ordercore.schemas.order import (
    AddressInput,
    LineItemCreate,
    NewCustomerCreate,
    OrderCreate,
    CustomerSnapshot,
    OrderSummary,
    OrderResponse,
    OrderListResponse,
    RevertStockResponse,
)
from ordercore.schemas.delivery import DeliveryQuoteRequest, DeliveryQuoteResponse

__all__ = [
    "Token",
    "UserResponse",
    "AddressInput",
    "LineItemCreate",
    "NewCustomerCreate",
    "OrderCreate",
    "CustomerSnapshot",
    "OrderSummary",
    "OrderResponse",
    "OrderListResponse",
    "RevertStockResponse",
    "DeliveryQuoteRequest",
    "DeliveryQuoteResponse",
]
