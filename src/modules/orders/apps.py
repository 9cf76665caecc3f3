from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.orders"
    label = "orders"

    def ready(self) -> None:
        from modules.orders.events import (
            FulfillmentCreated,
            ItemsReturned,
            OrderArchived,
            OrderCancelled,
            OrderCreated,
            PaymentCaptured,
        )
        from modules.orders.handlers import (
            fulfillment_created_handler,
            items_returned_handler,
            order_archived_handler,
            order_cancelled_handler,
            order_created_handler,
            payment_captured_handler,
        )
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(OrderCreated, order_created_handler)
        event_bus.subscribe(OrderCancelled, order_cancelled_handler)
        event_bus.subscribe(OrderArchived, order_archived_handler)
        event_bus.subscribe(PaymentCaptured, payment_captured_handler)
        event_bus.subscribe(FulfillmentCreated, fulfillment_created_handler)
        event_bus.subscribe(ItemsReturned, items_returned_handler)
