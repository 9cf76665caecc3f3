"""Provider interfaces consumed by the Order service.

Payment, fulfillment and shipping-profile concerns live outside the
order core.  The Service Layer depends exclusively on these contracts
(DIP); concrete gateways are injected at construction time.

Implementations signal failures by raising ``PaymentError`` or
``FulfillmentError`` from ``modules.orders.exceptions``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:
    from modules.orders.dtos import OrderDocument, PaymentMethodDTO


class IPaymentProvider(ABC):
    """Capture and refund funds for an order's payment method."""

    @abstractmethod
    def capture(self, payment_method: PaymentMethodDTO) -> None:
        """Settle the authorised payment.

        Raises:
            PaymentError: the provider rejected the capture.
        """

    @abstractmethod
    def refund(self, payment_method: PaymentMethodDTO, amount: int) -> None:
        """Refund *amount* (minor units) to the payment method.

        Raises:
            PaymentError: the provider rejected the refund.
        """


class IShippingProfileResolver(ABC):
    @abstractmethod
    def resolve(self, order: OrderDocument) -> Dict[str, Any]:
        """Return the shipping profile that applies to *order*."""


class IFulfillmentProvider(ABC):
    @abstractmethod
    def create_fulfillment(
        self, order: OrderDocument, shipping_profile: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Generate a shipment for *order* and return its description.

        Raises:
            FulfillmentError: the provider could not create the shipment.
        """
