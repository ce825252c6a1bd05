"""Order intake: turn an OrderCreate into a persisted, priced order.

Customer resolution, pricing, persistence and stock mutation run in one
transaction. Any failure rolls all of it back, including stock already
taken for earlier lines. Side effects are only staged here (outbox) and
dispatched by the caller after commit.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ordercore.errors import ConflictError, InternalError, NotFoundError, OrderCoreError, ValidationError
from ordercore.models.customer import Customer
from ordercore.models.order import Order, OrderItem, OrderStatus, OrderType, PaymentStatus
from ordercore.models.store import Store
from ordercore.schemas.order import OrderCreate
from ordercore.services.address import normalize_address, flatten_address
from ordercore.services.catalog import price_line_items
from ordercore.services.customers import resolve_customer
from ordercore.services.delivery import resolve_delivery_fee
from ordercore.services.inventory import record_sale, record_return
from ordercore.services.sequencer import generate_order_number
from ordercore.services.side_effects import stage_order_created

logger = structlog.get_logger()


@dataclass
class CreatedOrder:
    order: Order
    customer: Customer
    event_ids: List[UUID] = field(default_factory=list)


def validate_order_request(request: OrderCreate) -> None:
    if not request.items:
        raise ValidationError("Order must contain at least one item")

    if request.order_type == OrderType.DELIVERY:
        has_street = request.address is not None and (request.address.street or "").strip()
        if not (request.delivery_address or "").strip() and not has_street:
            raise ValidationError("Delivery address is required for delivery orders")


async def get_store(db: AsyncSession, store_id: UUID) -> Store:
    result = await db.execute(
        select(Store)
        .where(Store.id == store_id, Store.is_active == True)
        .options(selectinload(Store.delivery_zones))
        .execution_options(populate_existing=True)
    )
    store = result.scalar_one_or_none()

    if not store:
        raise NotFoundError("Store", {"store_id": str(store_id)})

    return store


def _delivery_snapshot(request: OrderCreate) -> Tuple[Optional[str], Optional[dict]]:
    """Address text and structured form copied onto the order"""
    if request.order_type != OrderType.DELIVERY:
        return None, None

    address_json = None
    address_text = (request.delivery_address or "").strip() or None
    if request.address is not None and (request.address.street or "").strip():
        cleaned = normalize_address(request.address)
        address_json = cleaned.to_dict()
        address_text = address_text or flatten_address(cleaned)

    return address_text, address_json


async def _build_order(
    db: AsyncSession,
    store: Store,
    request: OrderCreate,
    actor_id: Optional[UUID],
) -> Tuple[Order, Customer]:
    resolved = await resolve_customer(
        db,
        store.id,
        request.customer_id,
        request.new_customer,
        request.address,
    )

    priced = await price_line_items(db, store.id, request.items)

    delivery_fee = 0
    latitude = longitude = None
    if request.order_type == OrderType.DELIVERY:
        if request.address is not None:
            latitude, longitude = request.address.latitude, request.address.longitude
        quote = resolve_delivery_fee(
            store,
            store.delivery_zones,
            latitude,
            longitude,
            request.delivery_fee_cents,
        )
        delivery_fee = quote.fee_cents

    order_number = await generate_order_number(db, store)
    address_text, address_json = _delivery_snapshot(request)

    order = Order(
        store_id=store.id,
        order_number=order_number,
        status=OrderStatus.PENDING,
        type=request.order_type,
        customer_id=resolved.customer.id,
        customer_name=resolved.snapshot_name,
        subtotal_cents=priced.subtotal_cents,
        delivery_fee_cents=delivery_fee,
        total_cents=priced.subtotal_cents + delivery_fee,
        delivery_address=address_text,
        delivery_address_json=address_json,
        customer_latitude=latitude,
        customer_longitude=longitude,
        scheduled_time=request.scheduled_time,
        notes=request.notes,
        payment_method=request.payment_method,
        payment_status=PaymentStatus.PENDING,
        created_by=actor_id,
        created_by_admin=True,
        items=[
            OrderItem(
                position=position,
                product_id=line.product.id,
                variant_id=line.variant.id if line.variant else None,
                quantity=line.quantity,
                unit_price_cents=line.unit_price_cents,
                original_price_cents=line.original_price_cents,
                modifier_ids=[str(m) for m in line.modifier_ids],
            )
            for position, line in enumerate(priced.lines)
        ],
    )
    db.add(order)
    await db.flush()

    # Every line moves its counter; only tracked ones are held at >= 0
    for line in priced.lines:
        await record_sale(
            db,
            store_id=store.id,
            product_id=line.product.id,
            variant_id=line.variant.id if line.variant else None,
            quantity=line.quantity,
            order_number=order_number,
            actor_id=actor_id,
            guarded=line.tracks_inventory,
        )

    return order, resolved.customer


async def create_order(
    db: AsyncSession,
    store_id: UUID,
    request: OrderCreate,
    actor_id: Optional[UUID] = None,
) -> CreatedOrder:
    """Create an order atomically; side effects are returned as outbox ids"""
    validate_order_request(request)

    try:
        store = await get_store(db, store_id)
        order, customer = await _build_order(db, store, request, actor_id)
        event = stage_order_created(db, order, actor_id)
        await db.flush()
        await db.commit()
    except OrderCoreError as e:
        await db.rollback()
        logger.info(
            "Order rejected",
            store_id=str(store_id),
            code=e.code,
            reason=e.message,
        )
        raise
    except Exception as e:
        await db.rollback()
        logger.error(
            "Error creating order",
            store_id=str(store_id),
            error_kind="admin/system order creation error",
            error=str(e),
            exc_info=True,
        )
        raise InternalError() from e

    logger.info(
        "Order created",
        store_id=str(store_id),
        order_id=str(order.id),
        order_number=order.order_number,
        total_cents=order.total_cents,
        item_count=len(order.items),
    )
    return CreatedOrder(order=order, customer=customer, event_ids=[event.id])


async def get_order(db: AsyncSession, store_id: UUID, order_id: UUID) -> Order:
    result = await db.execute(
        select(Order)
        .where(Order.id == order_id, Order.store_id == store_id)
        .options(
            selectinload(Order.items).selectinload(OrderItem.product),
            selectinload(Order.items).selectinload(OrderItem.variant),
        )
        .execution_options(populate_existing=True)
    )
    order = result.scalar_one_or_none()

    if not order:
        raise NotFoundError("Order", {"order_id": str(order_id)})

    return order


async def revert_order_stock(
    db: AsyncSession,
    store_id: UUID,
    order_id: UUID,
    actor_id: Optional[UUID] = None,
) -> Tuple[int, int]:
    """Put stock back for a cancelled order; returns (reverted, total) lines"""
    try:
        order = await get_order(db, store_id, order_id)

        if order.status != OrderStatus.CANCELLED:
            raise ConflictError("Can only revert stock for cancelled orders")
        if order.stock_reverted_at is not None:
            raise ConflictError("Stock for this order was already reverted")

        reverted = 0
        for item in order.items:
            if not item.product:
                continue
            activity = await record_return(
                db,
                store_id=store_id,
                product_id=item.product_id,
                variant_id=item.variant_id,
                quantity=item.quantity,
                order_number=order.order_number,
                actor_id=actor_id,
            )
            if activity is not None:
                reverted += 1

        order.stock_reverted_at = datetime.utcnow()
        await db.commit()
    except OrderCoreError:
        await db.rollback()
        raise
    except Exception as e:
        await db.rollback()
        logger.error(
            "Error reverting order stock",
            store_id=str(store_id),
            order_id=str(order_id),
            error=str(e),
            exc_info=True,
        )
        raise InternalError() from e

    logger.info(
        "Order stock reverted",
        store_id=str(store_id),
        order_number=order.order_number,
        reverted_items=reverted,
    )
    return reverted, len(order.items)
