"""Order notifications to the store over WhatsApp (Twilio)"""

import asyncio
from typing import Optional

import structlog
from twilio.rest import Client as TwilioClient

from ordercore.config import settings
from ordercore.models.order import Order, OrderType
from ordercore.models.store import Store

logger = structlog.get_logger()

TYPE_LABELS = {
    OrderType.DELIVERY: "Delivery",
    OrderType.PICKUP: "Pickup",
    OrderType.DINE_IN: "Dine-in",
}


def _money(cents: int, currency: Optional[str]) -> str:
    symbols = {"USD": "$", "EUR": "€", "GBP": "£", "ALL": "L"}
    symbol = symbols.get(currency or "USD", currency or "")
    return f"{symbol}{cents / 100:.2f}"


def format_order_message(order: Order, store: Store) -> str:
    """WhatsApp body: order number, lines, totals, customer, address"""
    currency = store.currency
    message = f"*New order {order.order_number}*\n\n"
    message += f"Type: {TYPE_LABELS.get(order.type, order.type)}\n\n"

    for item in order.items:
        name = item.product.name if item.product else str(item.product_id)
        if item.variant:
            name += f" ({item.variant.name})"
        message += f"{item.quantity}x {name} - {_money(item.unit_price_cents * item.quantity, currency)}\n"

    message += f"\nSubtotal: {_money(order.subtotal_cents, currency)}\n"
    if order.delivery_fee_cents:
        message += f"Delivery: {_money(order.delivery_fee_cents, currency)}\n"
    message += f"*Total: {_money(order.total_cents, currency)}*\n\n"

    message += f"Customer: {order.customer_name}\n"
    if order.customer:
        message += f"Phone: {order.customer.phone}\n"
    if order.delivery_address:
        message += f"Address: {order.delivery_address}\n"
    if order.scheduled_time:
        message += f"Time: {order.scheduled_time.strftime('%a %m/%d %I:%M %p')}\n"
    if order.notes:
        message += f"Notes: {order.notes}\n"

    return message


class OrderNotifier:
    """Sends order notifications to the store's configured channel"""

    def __init__(self, client=None):
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = TwilioClient(settings.twilio_account_sid, settings.twilio_auth_token)
        return self._client

    async def send(self, order: Order, store: Store) -> Optional[str]:
        """Returns the message SID, or None when notifications are off.

        The Twilio client is blocking, so the HTTP call runs in a thread.
        """
        if not store.order_notifications_enabled or not store.whatsapp_number:
            logger.info("Order notifications disabled", store_id=str(store.id))
            return None

        message = await asyncio.to_thread(
            self.client.messages.create,
            body=format_order_message(order, store),
            from_=f"whatsapp:{settings.twilio_whatsapp_number}",
            to=f"whatsapp:{store.whatsapp_number}",
        )
        logger.info(
            "Order notification sent",
            store_id=str(store.id),
            order_number=order.order_number,
            message_sid=message.sid,
        )
        return message.sid
