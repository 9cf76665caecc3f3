"""Configurable fake providers for development and testing.

No external calls are made.  Each fake records its calls and can be
switched to fail at runtime, which makes the seed command and the
test suite deterministic.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List
from uuid import uuid4

from modules.orders.exceptions import FulfillmentError, PaymentError
from modules.orders.providers.interfaces import (
    IFulfillmentProvider,
    IPaymentProvider,
    IShippingProfileResolver,
)

if TYPE_CHECKING:
    from modules.orders.dtos import OrderDocument, PaymentMethodDTO


class FakePaymentProvider(IPaymentProvider):
    """Payment provider that succeeds unless configured otherwise."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Card declined"
        self.calls: List[Dict[str, Any]] = []

    def configure(
        self, should_succeed: bool, failure_reason: str = "Card declined"
    ) -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def capture(self, payment_method: PaymentMethodDTO) -> None:
        self.calls.append(
            {"method": "capture", "provider_id": payment_method.provider_id}
        )
        if not self.should_succeed:
            raise PaymentError(self.failure_reason)

    def refund(self, payment_method: PaymentMethodDTO, amount: int) -> None:
        self.calls.append(
            {
                "method": "refund",
                "provider_id": payment_method.provider_id,
                "amount": amount,
            }
        )
        if not self.should_succeed:
            raise PaymentError(self.failure_reason)


class StaticShippingProfileResolver(IShippingProfileResolver):
    """Resolves every order to the same profile."""

    def __init__(self, profile: Dict[str, Any] | None = None) -> None:
        self.profile = profile or {"id": "default", "name": "Standard"}

    def resolve(self, order: OrderDocument) -> Dict[str, Any]:
        return dict(self.profile)


class FakeFulfillmentProvider(IFulfillmentProvider):
    """Fulfillment provider that hands out fake tracking numbers."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Carrier unavailable"
        self.shipments: List[Dict[str, Any]] = []

    def configure(
        self, should_succeed: bool, failure_reason: str = "Carrier unavailable"
    ) -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_fulfillment(
        self, order: OrderDocument, shipping_profile: Dict[str, Any]
    ) -> Dict[str, Any]:
        if not self.should_succeed:
            raise FulfillmentError(self.failure_reason)

        shipment = {
            "shipment_id": f"ship-{uuid4().hex[:8]}",
            "order_id": str(order.id),
            "tracking_number": f"FAKE-{uuid4().hex[:12].upper()}",
            "shipping_profile": shipping_profile.get("id"),
            "item_ids": [item.id for item in order.items],
        }
        self.shipments.append(shipment)
        return shipment
