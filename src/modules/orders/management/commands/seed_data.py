from __future__ import annotations

from typing import Any, Dict, List

from django.conf import settings
from django.core.management.base import BaseCommand

from modules.orders.providers.fake import (
    FakeFulfillmentProvider,
    FakePaymentProvider,
    StaticShippingProfileResolver,
)
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService


def _address(first_name: str, city: str) -> Dict[str, Any]:
    return {
        "first_name": first_name,
        "last_name": "Doe",
        "address_1": "24 Harbour Street",
        "city": city,
        "country_code": "US",
        "province": "CA",
        "postal_code": "93011",
    }


def _items(prefix: str) -> List[Dict[str, Any]]:
    return [
        {
            "id": f"{prefix}-line-1",
            "title": "Canvas sneaker",
            "description": "Low-top, size 42",
            "thumbnail": "https://cdn.example.com/sneaker.png",
            "content": {
                "unit_price": 4900,
                "variant": {"id": "variant-sneaker-42"},
                "product": {"id": "product-sneaker"},
                "quantity": 1,
            },
            "quantity": 2,
        },
        {
            "id": f"{prefix}-line-2",
            "title": "Cotton socks",
            "description": "Pack of three",
            "content": {
                "unit_price": 900,
                "variant": {"id": "variant-socks-m"},
                "product": {"id": "product-socks"},
                "quantity": 3,
            },
            "quantity": 1,
        },
    ]


class Command(BaseCommand):
    help = "Seed the database with orders in every lifecycle state."

    def add_arguments(self, parser) -> None:
        parser.add_argument(
            "--count",
            type=int,
            default=settings.ORDERS_SEED_COUNT,
            help="Orders to create per lifecycle state.",
        )

    def handle(self, *args, **options):
        count = options["count"]
        self.stdout.write("Seeding orders...")

        service = OrderService(
            order_repository=OrderDjangoRepository(),
            payment_provider=FakePaymentProvider(),
            fulfillment_provider=FakeFulfillmentProvider(),
            shipping_profile_resolver=StaticShippingProfileResolver(),
        )

        created = 0
        for index in range(count):
            for state in ("pending", "paid", "fulfilled", "returned", "archived"):
                self._seed_order(service, f"{state}-{index}", state)
                created += 1
            cancelled = self._new_order(service, f"cancelled-{index}")
            service.cancel_order(cancelled.id)
            created += 1

        self.stdout.write(self.style.SUCCESS(f"Seed completed: orders={created}"))

    def _new_order(self, service: OrderService, key: str):
        return service.create_order(
            {
                "email": f"{key}@example.com",
                "billing_address": _address("Ana", "Los Angeles"),
                "shipping_address": _address("Ana", "Los Angeles"),
                "items": _items(key),
                "payment_method": {
                    "provider_id": "fake",
                    "profile_id": f"profile-{key}",
                },
            }
        )

    def _seed_order(self, service: OrderService, key: str, state: str) -> None:
        order = self._new_order(service, key)
        if state == "pending":
            return

        service.capture_payment(order.id)
        if state == "paid":
            return

        service.create_fulfillment(order.id)
        if state == "fulfilled":
            return

        if state == "returned":
            line = order.items[0]
            service.return_items(
                order.id,
                [
                    {
                        "id": line.id,
                        "title": line.title,
                        "description": line.description,
                        "thumbnail": line.thumbnail,
                        "content": line.content.model_dump(),
                        "quantity": 1,
                    }
                ],
            )
            return

        service.archive_order(order.id)
