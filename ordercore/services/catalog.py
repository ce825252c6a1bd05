"""Validate requested lines against the catalog and price them"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ordercore.errors import ConflictError, NotFoundError
from ordercore.models.catalog import Product, ProductVariant
from ordercore.schemas.order import LineItemCreate


@dataclass
class PricedLine:
    product: Product
    variant: Optional[ProductVariant]
    quantity: int
    unit_price_cents: int
    original_price_cents: Optional[int]
    modifier_ids: List[UUID]

    @property
    def tracks_inventory(self) -> bool:
        return bool(self.product.track_inventory)

    @property
    def line_total_cents(self) -> int:
        return self.unit_price_cents * self.quantity


@dataclass
class PricedOrder:
    lines: List[PricedLine] = field(default_factory=list)
    subtotal_cents: int = 0


async def get_active_product(db: AsyncSession, store_id: UUID, product_id: UUID) -> Optional[Product]:
    result = await db.execute(
        select(Product)
        .where(
            Product.id == product_id,
            Product.store_id == store_id,
            Product.is_active == True,
        )
        .options(selectinload(Product.variants), selectinload(Product.modifiers))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


def price_line(product: Product, item: LineItemCreate) -> PricedLine:
    """Check variant and stock for one line and compute its unit price"""
    variant = None
    if item.variant_id:
        variant = next((v for v in product.variants if v.id == item.variant_id), None)
        if variant is None:
            raise NotFoundError("Product variant", {"variant_id": str(item.variant_id)})

    source = variant or product

    if product.track_inventory and source.stock < item.quantity:
        raise ConflictError(
            f"Insufficient stock for {product.name}. "
            f"Available: {source.stock}, Requested: {item.quantity}",
            {"product_id": str(product.id), "available": source.stock, "requested": item.quantity},
        )

    # Unknown modifier ids are ignored
    deltas = {modifier.id: modifier.price_cents for modifier in product.modifiers}
    unit_price = source.price_cents + sum(deltas[m] for m in item.modifiers if m in deltas)

    return PricedLine(
        product=product,
        variant=variant,
        quantity=item.quantity,
        unit_price_cents=unit_price,
        original_price_cents=source.original_price_cents,
        modifier_ids=list(item.modifiers),
    )


async def price_line_items(db: AsyncSession, store_id: UUID, items: Sequence[LineItemCreate]) -> PricedOrder:
    priced = PricedOrder()

    for item in items:
        product = await get_active_product(db, store_id, item.product_id)
        if not product:
            raise NotFoundError("Product", {"product_id": str(item.product_id)})

        line = price_line(product, item)
        priced.lines.append(line)
        priced.subtotal_cents += line.line_total_cents

    return priced
