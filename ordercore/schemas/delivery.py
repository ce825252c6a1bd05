"""Delivery fee schemas"""

from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field


class DeliveryQuoteRequest(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class DeliveryQuoteResponse(BaseModel):
    fee_cents: int
    distance_km: Optional[float]
    zone_id: Optional[UUID]
    zone_name: Optional[str]
