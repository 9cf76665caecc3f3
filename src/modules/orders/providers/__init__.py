"""Order provider contracts."""

from modules.orders.providers.interfaces import (
    IFulfillmentProvider,
    IPaymentProvider,
    IShippingProfileResolver,
)

__all__ = ["IFulfillmentProvider", "IPaymentProvider", "IShippingProfileResolver"]
