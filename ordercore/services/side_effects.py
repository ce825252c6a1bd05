"""Post-commit side effects for orders (notification, audit log).

Events are staged as outbox rows inside the order transaction, so they exist
if and only if the order does. After commit they are handed to Celery. No
failure here ever reaches the order-creation caller.
"""

from datetime import datetime
from typing import Iterable, Optional
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ordercore.models.order import Order, OrderItem
from ordercore.models.outbox import OutboxEvent, ORDER_CREATED
from ordercore.models.store import Store
from ordercore.notifications import OrderNotifier
from ordercore.services.audit import record_event

logger = structlog.get_logger()


def stage_order_created(db: AsyncSession, order: Order, actor_id: Optional[UUID]) -> OutboxEvent:
    event = OutboxEvent(
        store_id=order.store_id,
        event_type=ORDER_CREATED,
        payload_json={
            "order_id": str(order.id),
            "order_number": order.order_number,
            "actor_id": str(actor_id) if actor_id else None,
        },
    )
    db.add(event)
    return event


class SideEffectDispatcher:
    """Hands committed outbox events to the Celery worker"""

    def dispatch(self, event_ids: Iterable[UUID]) -> None:
        from ordercore.jobs.tasks import process_outbox_event

        for event_id in event_ids:
            try:
                process_outbox_event.delay(str(event_id))
            except Exception as e:
                # Row stays unprocessed and can be re-queued
                logger.error(
                    "Failed to enqueue side effect",
                    event_id=str(event_id),
                    error_kind="admin/system order creation error",
                    error=str(e),
                )


def get_side_effect_dispatcher() -> SideEffectDispatcher:
    """FastAPI dependency"""
    return SideEffectDispatcher()


async def _load_order(db: AsyncSession, order_id: UUID) -> Optional[Order]:
    result = await db.execute(
        select(Order)
        .where(Order.id == order_id)
        .options(
            selectinload(Order.customer),
            selectinload(Order.items).selectinload(OrderItem.product),
            selectinload(Order.items).selectinload(OrderItem.variant),
        )
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def process_outbox_event(
    db: AsyncSession,
    event_id: UUID,
    notifier: Optional[OrderNotifier] = None,
) -> Optional[OutboxEvent]:
    """Run the effects of one event; each effect fails independently"""
    event = await db.get(OutboxEvent, event_id)
    if event is None or event.processed_at is not None:
        return event

    notifier = notifier or OrderNotifier()
    errors = []
    event.attempts = (event.attempts or 0) + 1

    payload = dict(event.payload_json)
    completed = set(payload.get("completed", []))
    order_id = UUID(payload["order_id"])
    actor_id = payload.get("actor_id")
    order = await _load_order(db, order_id)
    store = await db.get(Store, event.store_id)

    if order is None or store is None:
        event.last_error = "Order or store no longer exists"
        await db.commit()
        return event

    if "notification" not in completed:
        try:
            await notifier.send(order, store)
            completed.add("notification")
        except Exception as e:
            errors.append(f"notification: {e}")
            logger.error(
                "Failed to send order notification",
                store_id=str(store.id),
                order_number=order.order_number,
                error_kind="admin/system order creation error",
                error=str(e),
            )

    if "audit" not in completed:
        try:
            async with db.begin_nested():
                record_event(
                    db,
                    store_id=store.id,
                    event_type="order_created",
                    severity="info",
                    actor_id=UUID(actor_id) if actor_id else None,
                    resource_type="order",
                    resource_id=order.id,
                    metadata={
                        "order_number": order.order_number,
                        "type": order.type.value,
                        "total_cents": order.total_cents,
                        "item_count": len(order.items),
                        "customer_id": str(order.customer_id),
                    },
                )
            completed.add("audit")
        except Exception as e:
            errors.append(f"audit: {e}")
            logger.error(
                "Failed to record audit event",
                store_id=str(store.id),
                order_number=order.order_number,
                error_kind="admin/system order creation error",
                error=str(e),
            )

    # Reassign so the JSON column is flagged dirty
    event.payload_json = {**payload, "completed": sorted(completed)}
    event.last_error = "; ".join(errors) or None
    if not errors:
        event.processed_at = datetime.utcnow()
    await db.commit()
    return event
