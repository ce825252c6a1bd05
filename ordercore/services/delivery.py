"""Delivery fee resolution from store and customer coordinates"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from ordercore.errors import ConflictError
from ordercore.models.store import Store, DeliveryZone

EARTH_RADIUS_KM = 6371


@dataclass
class DeliveryQuote:
    fee_cents: int
    distance_km: Optional[float] = None
    zone: Optional[DeliveryZone] = None


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in kilometres"""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def select_zone(zones: Sequence[DeliveryZone], distance_km: float) -> Optional[DeliveryZone]:
    """First active zone, in stored order, whose max distance covers the point.

    Not the nearest or the cheapest: store owners author zones in priority order.
    """
    for zone in zones:
        if zone.is_active and distance_km <= zone.max_distance_km:
            return zone
    return None


def resolve_delivery_fee(
    store: Store,
    zones: Sequence[DeliveryZone],
    latitude: Optional[float],
    longitude: Optional[float],
    explicit_fee_cents: Optional[int] = None,
) -> DeliveryQuote:
    """Price a delivery; raises ConflictError outside the delivery radius"""
    # Explicit fee, else the store's flat fee, else free
    fee = explicit_fee_cents or store.delivery_fee_cents or 0

    if latitude is None or longitude is None:
        return DeliveryQuote(fee_cents=fee)

    if store.store_latitude is None or store.store_longitude is None:
        return DeliveryQuote(fee_cents=fee)

    distance = haversine_km(store.store_latitude, store.store_longitude, latitude, longitude)

    zone = select_zone(zones, distance)
    if zone is not None:
        return DeliveryQuote(fee_cents=zone.fee_cents, distance_km=distance, zone=zone)

    if store.delivery_radius_km is not None and distance > store.delivery_radius_km:
        raise ConflictError(
            f"Delivery address is outside delivery radius ({store.delivery_radius_km:g}km)",
            {"distance_km": round(distance, 2)},
        )

    return DeliveryQuote(fee_cents=fee, distance_km=distance)
