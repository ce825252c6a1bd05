"""Tests for post-commit side effects: notification, audit log, dispatch"""

import threading
from types import SimpleNamespace

from sqlalchemy import select

from ordercore.jobs import tasks
from ordercore.models.audit import AuditLog
from ordercore.models.order import OrderType
from ordercore.models.store import Store
from ordercore.notifications import OrderNotifier, format_order_message
from ordercore.schemas.order import AddressInput, LineItemCreate, NewCustomerCreate, OrderCreate
from ordercore.services import orders as order_service
from ordercore.services.side_effects import SideEffectDispatcher, process_outbox_event


async def place_order(db, store, products, **overrides):
    values = dict(
        order_type=OrderType.DELIVERY,
        items=[
            LineItemCreate(product_id=products["pizza"].id, quantity=3),
            LineItemCreate(
                product_id=products["burger"].id,
                variant_id=products["double"].id,
                modifiers=[products["bacon"].id],
            ),
        ],
        new_customer=NewCustomerCreate(name="Jane", phone="555-000-1111"),
        address=AddressInput(street="1 Main St, Springfield"),
        notes="Ring twice",
    )
    values.update(overrides)
    return await order_service.create_order(db, store.id, OrderCreate(**values))


async def audit_rows(db):
    return (await db.execute(select(AuditLog))).scalars().all()


async def test_event_sends_notification_and_audit(test_db, test_store, test_products, twilio_client):
    created = await place_order(test_db, test_store, test_products)

    event = await process_outbox_event(
        test_db, created.event_ids[0], notifier=OrderNotifier(client=twilio_client)
    )

    assert event.processed_at is not None
    assert event.attempts == 1
    assert event.last_error is None
    assert event.payload_json["completed"] == ["audit", "notification"]

    assert len(twilio_client.messages.sent) == 1
    sent = twilio_client.messages.sent[0]
    assert sent["to"] == "whatsapp:+15550001234"
    assert f"*New order {created.order.order_number}*" in sent["body"]

    logs = await audit_rows(test_db)
    assert len(logs) == 1
    assert logs[0].event_type == "order_created"
    assert logs[0].severity == "info"
    assert logs[0].store_id == test_store.id
    assert logs[0].data_json["order_number"] == created.order.order_number
    assert logs[0].data_json["total_cents"] == created.order.total_cents


async def test_notification_failure_keeps_audit_and_order(
    test_db, test_store, test_products, twilio_client, failing_twilio_client
):
    created = await place_order(test_db, test_store, test_products)
    event_id = created.event_ids[0]

    event = await process_outbox_event(
        test_db, event_id, notifier=OrderNotifier(client=failing_twilio_client)
    )

    assert event.processed_at is None
    assert "Twilio unavailable" in event.last_error
    assert event.payload_json["completed"] == ["audit"]
    assert len(await audit_rows(test_db)) == 1

    order = await order_service.get_order(test_db, test_store.id, created.order.id)
    assert order.order_number == created.order.order_number

    # A retry only sends what is still missing
    event = await process_outbox_event(test_db, event_id, notifier=OrderNotifier(client=twilio_client))

    assert event.processed_at is not None
    assert event.attempts == 2
    assert len(twilio_client.messages.sent) == 1
    assert len(await audit_rows(test_db)) == 1


async def test_processed_event_is_not_repeated(test_db, test_store, test_products, twilio_client):
    created = await place_order(test_db, test_store, test_products)
    notifier = OrderNotifier(client=twilio_client)

    await process_outbox_event(test_db, created.event_ids[0], notifier=notifier)
    event = await process_outbox_event(test_db, created.event_ids[0], notifier=notifier)

    assert event.attempts == 1
    assert len(twilio_client.messages.sent) == 1


async def test_notifications_disabled(test_db, test_store, test_products, twilio_client):
    store = await test_db.get(Store, test_store.id)
    store.order_notifications_enabled = False
    await test_db.commit()

    created = await place_order(test_db, test_store, test_products)

    event = await process_outbox_event(
        test_db, created.event_ids[0], notifier=OrderNotifier(client=twilio_client)
    )

    assert event.processed_at is not None
    assert twilio_client.messages.sent == []
    assert len(await audit_rows(test_db)) == 1


async def test_order_message_format(test_db, test_store, test_products):
    created = await place_order(test_db, test_store, test_products, delivery_fee_cents=None)
    order = await order_service.get_order(test_db, test_store.id, created.order.id)
    await test_db.refresh(order, ["customer"])

    message = format_order_message(order, test_store)

    assert message.startswith(f"*New order {order.order_number}*")
    assert "Type: Delivery" in message
    assert "3x Margherita Pizza - $30.00" in message
    assert "1x Burger (Double) - $16.00" in message
    assert "Subtotal: $46.00" in message
    assert "Delivery: $3.00" in message
    assert "*Total: $49.00*" in message
    assert "Customer: Jane" in message
    assert "Phone: 555-000-1111" in message
    assert "Address: 1 Main St, Springfield" in message
    assert "Notes: Ring twice" in message


def test_dispatch_failure_is_swallowed(monkeypatch):
    class BrokenTask:
        def delay(self, event_id):
            raise ConnectionError("broker down")

    monkeypatch.setattr(tasks, "process_outbox_event", BrokenTask())

    SideEffectDispatcher().dispatch(["a", "b"])


def test_dispatch_enqueues_each_event(monkeypatch):
    queued = []

    class RecordingTask:
        def delay(self, event_id):
            queued.append(event_id)

    monkeypatch.setattr(tasks, "process_outbox_event", RecordingTask())

    SideEffectDispatcher().dispatch(["a", "b"])

    assert queued == ["a", "b"]


async def test_twilio_call_runs_off_the_event_loop(test_db, test_store, test_products):
    created = await place_order(test_db, test_store, test_products)
    order = await order_service.get_order(test_db, test_store.id, created.order.id)
    await test_db.refresh(order, ["customer"])
    loop_thread = threading.get_ident()
    calls = []

    class RecordingMessages:
        def create(self, body, from_, to):
            calls.append(threading.get_ident())
            return SimpleNamespace(sid="SM0001")

    sid = await OrderNotifier(client=SimpleNamespace(messages=RecordingMessages())).send(order, test_store)

    assert sid == "SM0001"
    assert len(calls) == 1
    assert calls[0] != loop_thread
