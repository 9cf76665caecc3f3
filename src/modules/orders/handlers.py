"""Event handlers for Orders domain events.

Each handler writes one structured log line; they are the hook where
notification or analytics integrations subscribe in a deployment.
"""

from __future__ import annotations

import structlog

from modules.orders.events import (
    FulfillmentCreated,
    ItemsReturned,
    OrderArchived,
    OrderCancelled,
    OrderCreated,
    PaymentCaptured,
)
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderCreatedHandler(IEventHandler[OrderCreated]):
    def handle(self, event: OrderCreated) -> None:
        logger.info("order.event.created", order_id=str(event.aggregate_id))


class OrderCancelledHandler(IEventHandler[OrderCancelled]):
    def handle(self, event: OrderCancelled) -> None:
        logger.info("order.event.cancelled", order_id=str(event.aggregate_id))


class OrderArchivedHandler(IEventHandler[OrderArchived]):
    def handle(self, event: OrderArchived) -> None:
        logger.info("order.event.archived", order_id=str(event.aggregate_id))


class PaymentCapturedHandler(IEventHandler[PaymentCaptured]):
    def handle(self, event: PaymentCaptured) -> None:
        logger.info("order.event.payment_captured", order_id=str(event.aggregate_id))


class FulfillmentCreatedHandler(IEventHandler[FulfillmentCreated]):
    def handle(self, event: FulfillmentCreated) -> None:
        logger.info("order.event.fulfilled", order_id=str(event.aggregate_id))


class ItemsReturnedHandler(IEventHandler[ItemsReturned]):
    def handle(self, event: ItemsReturned) -> None:
        logger.info(
            "order.event.items_returned",
            order_id=str(event.aggregate_id),
            refund_amount=event.refund_amount,
            fulfillment_status=event.fulfillment_status,
        )


order_created_handler = OrderCreatedHandler()
order_cancelled_handler = OrderCancelledHandler()
order_archived_handler = OrderArchivedHandler()
payment_captured_handler = PaymentCapturedHandler()
fulfillment_created_handler = FulfillmentCreatedHandler()
items_returned_handler = ItemsReturnedHandler()
