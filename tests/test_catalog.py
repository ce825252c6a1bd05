"""Tests for line validation, pricing and the stock ledger"""

import pytest
from sqlalchemy import select
from uuid import uuid4

from ordercore.errors import ConflictError, NotFoundError
from ordercore.models.catalog import Product, ProductVariant
from ordercore.models.inventory import InventoryActivity, ORDER_SALE, RETURN
from ordercore.schemas.order import LineItemCreate
from ordercore.services.catalog import price_line_items
from ordercore.services.inventory import record_sale, record_return


async def test_subtotal_is_sum_of_lines(test_db, test_store, test_products):
    priced = await price_line_items(
        test_db,
        test_store.id,
        [
            LineItemCreate(product_id=test_products["pizza"].id, quantity=3),
            LineItemCreate(product_id=test_products["salad"].id, quantity=1),
        ],
    )

    assert [line.unit_price_cents for line in priced.lines] == [1000, 2500]
    assert priced.subtotal_cents == 5500
    assert priced.lines[0].original_price_cents == 1200
    assert not priced.lines[0].tracks_inventory


async def test_variant_price_and_modifier_deltas(test_db, test_store, test_products):
    unknown_modifier = uuid4()
    priced = await price_line_items(
        test_db,
        test_store.id,
        [
            LineItemCreate(
                product_id=test_products["burger"].id,
                variant_id=test_products["double"].id,
                quantity=2,
                modifiers=[test_products["cheese"].id, unknown_modifier],
            ),
        ],
    )

    line = priced.lines[0]
    assert line.variant.id == test_products["double"].id
    assert line.unit_price_cents == 1400 + 150
    assert line.modifier_ids == [test_products["cheese"].id, unknown_modifier]
    assert priced.subtotal_cents == 3100


async def test_unknown_product(test_db, test_store, test_products):
    with pytest.raises(NotFoundError) as exc_info:
        await price_line_items(test_db, test_store.id, [LineItemCreate(product_id=uuid4())])

    assert exc_info.value.message == "Product not found"


async def test_inactive_product_is_not_found(test_db, test_store, test_products):
    with pytest.raises(NotFoundError):
        await price_line_items(
            test_db, test_store.id, [LineItemCreate(product_id=test_products["retired"].id)]
        )


async def test_product_from_other_store_is_not_found(test_db, bare_store, test_products):
    with pytest.raises(NotFoundError):
        await price_line_items(
            test_db, bare_store.id, [LineItemCreate(product_id=test_products["pizza"].id)]
        )


async def test_unknown_variant(test_db, test_store, test_products):
    with pytest.raises(NotFoundError) as exc_info:
        await price_line_items(
            test_db,
            test_store.id,
            [LineItemCreate(product_id=test_products["burger"].id, variant_id=uuid4())],
        )

    assert exc_info.value.message == "Product variant not found"


async def test_insufficient_stock_on_tracked_product(test_db, test_store, test_products):
    with pytest.raises(ConflictError) as exc_info:
        await price_line_items(
            test_db,
            test_store.id,
            [LineItemCreate(product_id=test_products["burger"].id, quantity=4)],
        )

    assert exc_info.value.message == "Insufficient stock for Burger. Available: 3, Requested: 4"


async def test_insufficient_stock_uses_variant_counter(test_db, test_store, test_products):
    with pytest.raises(ConflictError):
        await price_line_items(
            test_db,
            test_store.id,
            [
                LineItemCreate(
                    product_id=test_products["burger"].id,
                    variant_id=test_products["double"].id,
                    quantity=3,
                )
            ],
        )


async def test_untracked_product_ignores_stock(test_db, test_store, test_products):
    priced = await price_line_items(
        test_db,
        test_store.id,
        [LineItemCreate(product_id=test_products["pizza"].id, quantity=50)],
    )

    assert priced.subtotal_cents == 50000


async def test_record_sale_decrements_and_logs(test_db, test_store, test_products):
    burger_id = test_products["burger"].id

    activity = await record_sale(
        test_db,
        store_id=test_store.id,
        product_id=burger_id,
        variant_id=None,
        quantity=2,
        order_number="WO-000007",
        actor_id=None,
    )
    await test_db.commit()

    stock = (await test_db.execute(select(Product.stock).where(Product.id == burger_id))).scalar()
    assert stock == 1
    assert activity.type == ORDER_SALE
    assert activity.quantity == -2
    assert (activity.old_stock, activity.new_stock) == (3, 1)
    assert activity.reason == "Order sale - WO-000007"


async def test_record_sale_on_variant_leaves_product_stock(test_db, test_store, test_products):
    burger_id = test_products["burger"].id
    double_id = test_products["double"].id

    await record_sale(
        test_db,
        store_id=test_store.id,
        product_id=burger_id,
        variant_id=double_id,
        quantity=2,
        order_number="WO-000008",
        actor_id=None,
    )
    await test_db.commit()

    variant_stock = (
        await test_db.execute(select(ProductVariant.stock).where(ProductVariant.id == double_id))
    ).scalar()
    product_stock = (
        await test_db.execute(select(Product.stock).where(Product.id == burger_id))
    ).scalar()
    assert variant_stock == 0
    assert product_stock == 3


async def test_record_sale_never_goes_negative(test_db, test_store, test_products):
    burger_id = test_products["burger"].id

    with pytest.raises(ConflictError):
        await record_sale(
            test_db,
            store_id=test_store.id,
            product_id=burger_id,
            variant_id=None,
            quantity=4,
            order_number="WO-000009",
            actor_id=None,
        )
    await test_db.rollback()

    stock = (await test_db.execute(select(Product.stock).where(Product.id == burger_id))).scalar()
    activities = (await test_db.execute(select(InventoryActivity))).scalars().all()
    assert stock == 3
    assert activities == []


async def test_unguarded_sale_may_go_negative(test_db, test_store, test_products):
    pizza_id = test_products["pizza"].id

    activity = await record_sale(
        test_db,
        store_id=test_store.id,
        product_id=pizza_id,
        variant_id=None,
        quantity=4,
        order_number="WO-000012",
        actor_id=None,
        guarded=False,
    )
    await test_db.commit()

    stock = (await test_db.execute(select(Product.stock).where(Product.id == pizza_id))).scalar()
    assert stock == -4
    assert activity.type == ORDER_SALE
    assert (activity.old_stock, activity.new_stock) == (0, -4)


async def test_unguarded_sale_for_missing_row(test_db, test_store):
    with pytest.raises(NotFoundError):
        await record_sale(
            test_db,
            store_id=test_store.id,
            product_id=uuid4(),
            variant_id=None,
            quantity=1,
            order_number="WO-000013",
            actor_id=None,
            guarded=False,
        )


async def test_record_return_restores_stock(test_db, test_store, test_products):
    burger_id = test_products["burger"].id

    activity = await record_return(
        test_db,
        store_id=test_store.id,
        product_id=burger_id,
        variant_id=None,
        quantity=2,
        order_number="WO-000010",
        actor_id=None,
    )
    await test_db.commit()

    stock = (await test_db.execute(select(Product.stock).where(Product.id == burger_id))).scalar()
    assert stock == 5
    assert activity.type == RETURN
    assert (activity.old_stock, activity.new_stock) == (3, 5)
    assert activity.reason == "Order cancellation revert - Order #WO-000010"


async def test_record_return_for_missing_row(test_db, test_store):
    activity = await record_return(
        test_db,
        store_id=test_store.id,
        product_id=uuid4(),
        variant_id=None,
        quantity=1,
        order_number="WO-000011",
        actor_id=None,
    )

    assert activity is None
