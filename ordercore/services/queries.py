"""Typed order lookups.

Each lookup shape is its own frozen dataclass, so a caller cannot build a
filter combination the listing does not support.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union
from uuid import UUID

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ordercore.models.customer import Customer
from ordercore.models.order import Order, OrderStatus, OrderType


@dataclass(frozen=True)
class OrderById:
    store_id: UUID
    order_id: UUID


@dataclass(frozen=True)
class OrdersByStore:
    store_id: UUID
    status: Optional[OrderStatus] = None
    type: Optional[OrderType] = None
    customer_id: Optional[UUID] = None


@dataclass(frozen=True)
class OrdersBySearchTerm:
    """Order number, customer name or customer phone contains the term"""
    store_id: UUID
    term: str
    status: Optional[OrderStatus] = None
    type: Optional[OrderType] = None


OrderQuery = Union[OrderById, OrdersByStore, OrdersBySearchTerm]


def _apply(query: Select, criteria: OrderQuery) -> Select:
    query = query.where(Order.store_id == criteria.store_id)

    if isinstance(criteria, OrderById):
        return query.where(Order.id == criteria.order_id)

    if isinstance(criteria, OrdersBySearchTerm):
        pattern = f"%{criteria.term.strip()}%"
        query = query.join(Customer, Customer.id == Order.customer_id).where(
            or_(
                Order.order_number.ilike(pattern),
                Customer.name.ilike(pattern),
                Customer.phone.contains(criteria.term.strip()),
            )
        )
    elif isinstance(criteria, OrdersByStore):
        if criteria.customer_id:
            query = query.where(Order.customer_id == criteria.customer_id)
    else:
        raise TypeError(f"Unsupported order query: {type(criteria).__name__}")

    if criteria.status:
        query = query.where(Order.status == criteria.status)
    if criteria.type:
        query = query.where(Order.type == criteria.type)

    return query


def build_order_query(criteria: OrderQuery) -> Select:
    return _apply(select(Order), criteria)


def build_count_query(criteria: OrderQuery) -> Select:
    return _apply(select(func.count(Order.id)), criteria)


async def list_orders(
    db: AsyncSession,
    criteria: OrderQuery,
    page: int = 1,
    page_size: int = 20,
) -> Tuple[List[Order], int]:
    total = (await db.execute(build_count_query(criteria))).scalar() or 0

    query = (
        build_order_query(criteria)
        .options(selectinload(Order.customer), selectinload(Order.items))
        .order_by(Order.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(query)
    return list(result.scalars().all()), total


async def customer_order_counts(db: AsyncSession, store_id: UUID, customer_ids: List[UUID]) -> Dict[UUID, int]:
    if not customer_ids:
        return {}

    result = await db.execute(
        select(Order.customer_id, func.count(Order.id))
        .where(Order.store_id == store_id, Order.customer_id.in_(customer_ids))
        .group_by(Order.customer_id)
    )
    return {customer_id: count for customer_id, count in result.all()}
