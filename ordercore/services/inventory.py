"""Stock counters and their audit trail"""

from typing import Optional, Type, Union
from uuid import UUID

import structlog
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from ordercore.errors import ConflictError, NotFoundError
from ordercore.models.catalog import Product, ProductVariant
from ordercore.models.inventory import InventoryActivity, ORDER_SALE, RETURN

logger = structlog.get_logger()

StockModel = Union[Type[Product], Type[ProductVariant]]


async def _adjust_stock(
    db: AsyncSession,
    model: StockModel,
    row_id: UUID,
    delta: int,
    guarded: bool = True,
) -> Optional[int]:
    """Apply delta in one statement.

    Guarded decrements only land if stock stays >= 0; unguarded ones may
    take an untracked counter negative. Returns the new stock, or None
    when no row was updated.
    """
    stmt = update(model).where(model.id == row_id)
    if guarded and delta < 0:
        stmt = stmt.where(model.stock >= -delta)
    stmt = (
        stmt.values(stock=model.stock + delta)
        .returning(model.stock)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def record_sale(
    db: AsyncSession,
    store_id: UUID,
    product_id: UUID,
    variant_id: Optional[UUID],
    quantity: int,
    order_number: str,
    actor_id: Optional[UUID],
    guarded: bool = True,
) -> InventoryActivity:
    """Take quantity off the variant (or product) counter and log it.

    Pass guarded=False for products that do not track inventory: the
    counter still moves and the sale is still logged, but it may go below
    zero.
    """
    model = ProductVariant if variant_id else Product
    row_id = variant_id or product_id

    new_stock = await _adjust_stock(db, model, row_id, -quantity, guarded=guarded)
    if new_stock is None:
        if not guarded:
            raise NotFoundError(
                "Variant" if variant_id else "Product",
                {"product_id": str(product_id)},
            )
        logger.warning(
            "Stock decrement rejected",
            store_id=str(store_id),
            product_id=str(product_id),
            variant_id=str(variant_id) if variant_id else None,
            quantity=quantity,
            order_number=order_number,
        )
        raise ConflictError(
            "Insufficient stock",
            {"product_id": str(product_id), "requested": quantity},
        )

    activity = InventoryActivity(
        store_id=store_id,
        product_id=product_id,
        variant_id=variant_id,
        type=ORDER_SALE,
        quantity=-quantity,
        old_stock=new_stock + quantity,
        new_stock=new_stock,
        reason=f"Order sale - {order_number}",
        changed_by=actor_id,
    )
    db.add(activity)
    return activity


async def record_return(
    db: AsyncSession,
    store_id: UUID,
    product_id: UUID,
    variant_id: Optional[UUID],
    quantity: int,
    order_number: str,
    actor_id: Optional[UUID],
) -> Optional[InventoryActivity]:
    """Put quantity back on the counter it was sold from"""
    model = ProductVariant if variant_id else Product
    row_id = variant_id or product_id

    new_stock = await _adjust_stock(db, model, row_id, quantity)
    if new_stock is None:
        # Product or variant deleted since the sale
        return None

    activity = InventoryActivity(
        store_id=store_id,
        product_id=product_id,
        variant_id=variant_id,
        type=RETURN,
        quantity=quantity,
        old_stock=new_stock - quantity,
        new_stock=new_stock,
        reason=f"Order cancellation revert - Order #{order_number}",
        changed_by=actor_id,
    )
    db.add(activity)
    return activity
