"""Order intake API endpoints"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ordercore.database import get_db
from ordercore.models.order import OrderStatus, OrderType
from ordercore.models.user import User
from ordercore.schemas.order import (
    CustomerSnapshot,
    OrderCreate,
    OrderListCustomer,
    OrderListItem,
    OrderListResponse,
    OrderResponse,
    OrderSummary,
    RevertStockResponse,
)
from ordercore.api.auth import get_current_active_user, verify_store_access
from ordercore.services import orders as order_service
from ordercore.services.queries import (
    OrdersBySearchTerm,
    OrdersByStore,
    customer_order_counts,
    list_orders as run_order_query,
)
from ordercore.services.side_effects import SideEffectDispatcher, get_side_effect_dispatcher

router = APIRouter()


@router.post("", response_model=OrderSummary, status_code=201)
async def create_order(
    store_id: UUID,
    order_data: OrderCreate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_active_user),
    dispatcher: SideEffectDispatcher = Depends(get_side_effect_dispatcher),
    db: AsyncSession = Depends(get_db),
):
    """Create an order on behalf of a customer"""
    await verify_store_access(store_id, current_user)

    created = await order_service.create_order(
        db, store_id, order_data, actor_id=current_user.id
    )
    # Runs after the response is sent; the order is already committed
    background_tasks.add_task(dispatcher.dispatch, created.event_ids)

    order = created.order
    customer = created.customer
    return OrderSummary(
        id=order.id,
        order_number=order.order_number,
        status=order.status,
        type=order.type,
        subtotal_cents=order.subtotal_cents,
        delivery_fee_cents=order.delivery_fee_cents,
        total_cents=order.total_cents,
        customer=CustomerSnapshot(
            id=customer.id,
            name=customer.name,
            phone=customer.phone,
            email=customer.email,
        ),
        created_at=order.created_at,
    )


@router.get("", response_model=OrderListResponse)
async def list_orders(
    store_id: UUID,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    status: Optional[OrderStatus] = None,
    type: Optional[OrderType] = None,
    customer_id: Optional[UUID] = None,
    search: Optional[str] = None,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """List orders for a store with pagination"""
    await verify_store_access(store_id, current_user)

    if search and search.strip():
        criteria = OrdersBySearchTerm(store_id=store_id, term=search, status=status, type=type)
    else:
        criteria = OrdersByStore(store_id=store_id, status=status, type=type, customer_id=customer_id)

    orders, total = await run_order_query(db, criteria, page=page, page_size=page_size)
    counts = await customer_order_counts(
        db, store_id, list({order.customer_id for order in orders})
    )

    items = []
    for order in orders:
        order_count = counts.get(order.customer_id, 0)
        items.append(
            OrderListItem(
                id=order.id,
                order_number=order.order_number,
                status=order.status,
                type=order.type,
                subtotal_cents=order.subtotal_cents,
                delivery_fee_cents=order.delivery_fee_cents,
                total_cents=order.total_cents,
                customer=OrderListCustomer(
                    id=order.customer.id,
                    name=order.customer.name,
                    phone=order.customer.phone,
                    email=order.customer.email,
                    order_count=order_count,
                    is_first_order=order_count == 1,
                ),
                item_count=sum(item.quantity for item in order.items),
                payment_status=order.payment_status,
                payment_method=order.payment_method,
                created_at=order.created_at,
            )
        )

    return OrderListResponse(items=items, total=total, page=page, page_size=page_size)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    store_id: UUID,
    order_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Get order details"""
    await verify_store_access(store_id, current_user)
    return await order_service.get_order(db, store_id, order_id)


@router.post("/{order_id}/revert-stock", response_model=RevertStockResponse)
async def revert_order_stock(
    store_id: UUID,
    order_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Return stock taken by a cancelled order"""
    await verify_store_access(store_id, current_user)

    reverted, total = await order_service.revert_order_stock(
        db, store_id, order_id, actor_id=current_user.id
    )
    return RevertStockResponse(reverted_items=reverted, total_items=total)
