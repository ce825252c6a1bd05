"""Resolve the customer an order belongs to"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ordercore.errors import NotFoundError, ValidationError
from ordercore.models.customer import Customer, CustomerTier
from ordercore.schemas.order import AddressInput, NewCustomerCreate
from ordercore.services.address import normalize_address, flatten_address
from ordercore.services.phone import canonical_phone, mask_phone

logger = structlog.get_logger()


@dataclass
class ResolvedCustomer:
    customer: Customer
    snapshot_name: str  # Name to copy onto this order
    created: bool = False


async def _find_by_phone(db: AsyncSession, store_id: UUID, phone: str) -> Optional[Customer]:
    result = await db.execute(
        select(Customer).where(
            Customer.store_id == store_id,
            Customer.canonical_phone == phone,
        )
    )
    return result.scalar_one_or_none()


async def resolve_existing_customer(db: AsyncSession, store_id: UUID, customer_id: UUID) -> ResolvedCustomer:
    result = await db.execute(
        select(Customer).where(Customer.id == customer_id, Customer.store_id == store_id)
    )
    customer = result.scalar_one_or_none()

    if not customer:
        raise NotFoundError("Customer", {"customer_id": str(customer_id)})

    return ResolvedCustomer(customer=customer, snapshot_name=customer.name or "")


def _merge(customer: Customer, name: str, email: Optional[str]) -> None:
    """Most recent order wins for name and email; phone is never touched"""
    if customer.name != name:
        customer.name = name
    if email and customer.email != email:
        customer.email = email


async def resolve_new_customer(
    db: AsyncSession,
    store_id: UUID,
    data: NewCustomerCreate,
    address: Optional[AddressInput] = None,
) -> ResolvedCustomer:
    """Match by canonical phone, merging details; create the customer if unseen."""
    name = (data.name or "").strip()
    phone = (data.phone or "").strip()
    email = (data.email or "").strip() or None

    if not name or not phone:
        raise ValidationError("Customer name and phone are required")

    canonical = canonical_phone(phone)
    if canonical is None:
        raise ValidationError("Customer phone must contain at least 10 digits")

    existing = await _find_by_phone(db, store_id, canonical)
    if existing:
        _merge(existing, name, email)
        logger.info(
            "Matched existing customer by phone",
            store_id=str(store_id),
            customer_id=str(existing.id),
            phone=mask_phone(phone),
        )
        return ResolvedCustomer(customer=existing, snapshot_name=name)

    address_json = None
    address_line = None
    if address and (address.street or "").strip():
        cleaned = normalize_address(address)
        address_json = cleaned.to_dict()
        address_line = flatten_address(cleaned)

    customer = Customer(
        store_id=store_id,
        name=name,
        phone=phone,
        canonical_phone=canonical,
        email=email,
        tier=data.tier or CustomerTier.REGULAR,
        address=address_line,
        address_json=address_json,
        added_by_admin=True,
    )

    # A concurrent order may create the same phone first; the unique
    # constraint rejects ours and we adopt theirs.
    try:
        async with db.begin_nested():
            db.add(customer)
            await db.flush()
    except IntegrityError:
        existing = await _find_by_phone(db, store_id, canonical)
        if existing is None:
            raise
        _merge(existing, name, email)
        logger.info(
            "Adopted concurrently created customer",
            store_id=str(store_id),
            customer_id=str(existing.id),
            phone=mask_phone(phone),
        )
        return ResolvedCustomer(customer=existing, snapshot_name=name)

    logger.info(
        "Created customer",
        store_id=str(store_id),
        customer_id=str(customer.id),
        phone=mask_phone(phone),
    )
    return ResolvedCustomer(customer=customer, snapshot_name=name, created=True)


async def resolve_customer(
    db: AsyncSession,
    store_id: UUID,
    customer_id: Optional[UUID],
    new_customer: Optional[NewCustomerCreate],
    address: Optional[AddressInput] = None,
) -> ResolvedCustomer:
    if customer_id and new_customer:
        raise ValidationError("Provide either customer_id or new_customer, not both")
    if customer_id:
        return await resolve_existing_customer(db, store_id, customer_id)
    if new_customer:
        return await resolve_new_customer(db, store_id, new_customer, address)
    raise ValidationError("Customer information is required")
