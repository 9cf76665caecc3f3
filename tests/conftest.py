from typing import Any, Dict

import pytest

from modules.orders.constants import FulfillmentStatus, PaymentStatus
from modules.orders.providers.fake import (
    FakeFulfillmentProvider,
    FakePaymentProvider,
    StaticShippingProfileResolver,
)
from modules.orders.repositories.memory_repository import InMemoryOrderRepository
from modules.orders.services import OrderService
from shared.infrastructure.bus import InMemoryEventBus


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


# ---------------------------------------------------------------------------
# Payload builders
# ---------------------------------------------------------------------------


def make_address(**overrides: Any) -> Dict[str, Any]:
    address = {
        "first_name": "Jane",
        "last_name": "Doe",
        "address_1": "1 Main Street",
        "city": "Springfield",
        "country_code": "US",
        "province": "IL",
        "postal_code": "62701",
    }
    address.update(overrides)
    return address


def make_item(item_id: str = "line-1", **overrides: Any) -> Dict[str, Any]:
    item = {
        "id": item_id,
        "title": "Canvas sneaker",
        "description": "Low-top",
        "thumbnail": None,
        "content": {
            "unit_price": 1000,
            "variant": {"id": f"variant-{item_id}"},
            "product": {"id": "product-sneaker"},
            "quantity": 1,
        },
        "quantity": 2,
    }
    item.update(overrides)
    return item


def make_return_item(item_id: str = "line-1", **overrides: Any) -> Dict[str, Any]:
    item = make_item(item_id)
    item["quantity"] = 1
    item.update(overrides)
    return item


PAYMENT_METHOD = {"provider_id": "fake", "profile_id": "prof-1"}


def make_order_fields(**overrides: Any) -> Dict[str, Any]:
    fields = {
        "email": "jane@example.com",
        "billing_address": make_address(),
        "shipping_address": make_address(),
        "items": [make_item("line-1"), make_item("line-2", quantity=1)],
        "payment_method": PAYMENT_METHOD,
    }
    fields.update(overrides)
    return fields


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


@pytest.fixture()
def repository():
    return InMemoryOrderRepository()


@pytest.fixture()
def payment_provider():
    return FakePaymentProvider()


@pytest.fixture()
def fulfillment_provider():
    return FakeFulfillmentProvider()


@pytest.fixture()
def shipping_resolver():
    return StaticShippingProfileResolver()


@pytest.fixture()
def bus():
    return InMemoryEventBus()


@pytest.fixture()
def service(repository, payment_provider, fulfillment_provider, shipping_resolver, bus):
    return OrderService(
        order_repository=repository,
        payment_provider=payment_provider,
        fulfillment_provider=fulfillment_provider,
        shipping_profile_resolver=shipping_resolver,
        event_bus=bus,
    )


# ---------------------------------------------------------------------------
# Orders in each lifecycle state
# ---------------------------------------------------------------------------


@pytest.fixture()
def pending_order(repository):
    return repository.create(make_order_fields())


@pytest.fixture()
def paid_order(repository):
    return repository.create(make_order_fields(payment_status=PaymentStatus.CAPTURED))


@pytest.fixture()
def fulfilled_order(repository):
    return repository.create(
        make_order_fields(
            payment_status=PaymentStatus.CAPTURED,
            fulfillment_status=FulfillmentStatus.FULFILLED,
        )
    )


@pytest.fixture()
def unpaid_fulfilled_order(repository):
    return repository.create(
        make_order_fields(fulfillment_status=FulfillmentStatus.FULFILLED)
    )
