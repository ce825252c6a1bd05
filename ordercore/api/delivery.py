"""Delivery pricing API endpoints"""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ordercore.database import get_db
from ordercore.models.user import User
from ordercore.schemas.delivery import DeliveryQuoteRequest, DeliveryQuoteResponse
from ordercore.api.auth import get_current_active_user, verify_store_access
from ordercore.services.delivery import resolve_delivery_fee
from ordercore.services.orders import get_store

router = APIRouter()


@router.post("/quote", response_model=DeliveryQuoteResponse)
async def quote_delivery(
    store_id: UUID,
    quote_request: DeliveryQuoteRequest,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Price a delivery to the given point without creating an order"""
    await verify_store_access(store_id, current_user)

    store = await get_store(db, store_id)
    quote = resolve_delivery_fee(
        store,
        store.delivery_zones,
        quote_request.latitude,
        quote_request.longitude,
    )

    return DeliveryQuoteResponse(
        fee_cents=quote.fee_cents,
        distance_km=round(quote.distance_km, 3) if quote.distance_km is not None else None,
        zone_id=quote.zone.id if quote.zone else None,
        zone_name=quote.zone.name if quote.zone else None,
    )
