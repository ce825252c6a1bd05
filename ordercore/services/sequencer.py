"""Human-readable order numbers"""

import random
import time
from typing import Optional
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from ordercore.config import settings
from ordercore.errors import NotFoundError
from ordercore.models.store import Store


def format_order_number(template: Optional[str], number: str) -> str:
    """Substitute into the store template, e.g. "WO-{number}" """
    return (template or settings.default_order_number_format).replace("{number}", number)


def timestamp_order_number(template: Optional[str], now_ms: Optional[int] = None) -> str:
    """Last 6 digits of the millisecond clock plus a 3 digit random suffix.

    Not guaranteed unique under concurrent load; the sequence strategy is.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    stamp = str(now_ms)[-6:]
    suffix = f"{random.randint(0, 999):03d}"
    return format_order_number(template, f"{stamp}{suffix}")


async def next_sequence(db: AsyncSession, store_id: UUID) -> int:
    """Atomically bump the store counter; holds the store row until commit"""
    result = await db.execute(
        update(Store)
        .where(Store.id == store_id)
        .values(order_sequence=Store.order_sequence + 1)
        .returning(Store.order_sequence)
        .execution_options(synchronize_session=False)
    )
    value = result.scalar_one_or_none()
    if value is None:
        raise NotFoundError("Store", {"store_id": str(store_id)})
    return value


async def generate_order_number(db: AsyncSession, store: Store) -> str:
    if settings.order_number_strategy == "timestamp":
        return timestamp_order_number(store.order_number_format)
    sequence = await next_sequence(db, store.id)
    return format_order_number(store.order_number_format, f"{sequence:06d}")
