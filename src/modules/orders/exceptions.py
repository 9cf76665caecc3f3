"""Order domain exceptions.

Raised by the Service Layer (and by provider implementations) when a
business rule is violated.  Three families matter to callers:

- ``OrderNotFound``: the referenced order does not exist.
- ``OrderValidationError``: the input is malformed.
- ``OrderConflict``: the operation is not allowed in the current
  lifecycle state.

``PaymentError`` and ``FulfillmentError`` are reported by the injected
providers and propagate untouched through the service.
"""

from __future__ import annotations


class OrderError(Exception):
    """Base class for every order lifecycle error."""


class OrderNotFound(OrderError):
    """The requested order does not exist."""


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class OrderValidationError(OrderError):
    """Malformed input or a value rejected by the storage schema."""


class InvalidAddress(OrderValidationError):
    """A billing or shipping address is missing a required field."""


class MetadataUpdateNotAllowed(OrderValidationError):
    """``metadata`` was sent through the general update path."""


class InvalidReturn(OrderValidationError):
    """A return request disagrees with the stored line items."""


# ---------------------------------------------------------------------------
# Lifecycle conflicts
# ---------------------------------------------------------------------------


class OrderConflict(OrderError):
    """The operation is not permitted given the order's current state."""


class ProcessedOrderLocked(OrderConflict):
    """Addresses, items or payment method changed on a processed order."""


class InvalidOrderStatus(OrderConflict):
    """An invalid status transition was attempted."""


class OrderNotCancellable(OrderConflict):
    """The order is fulfilled, paid or already in a terminal state."""


class PaymentAlreadyCaptured(OrderConflict):
    """Payment for the order has already been captured."""


class OrderAlreadyFulfilled(OrderConflict):
    """A fulfillment already exists for the order."""


class OrderNotReturnable(OrderConflict):
    """The order is unpaid, unfulfilled or already fully returned."""


class OrderNotArchivable(OrderConflict):
    """The order has no payment or fulfillment activity yet."""


# ---------------------------------------------------------------------------
# Provider failures
# ---------------------------------------------------------------------------


class PaymentError(OrderError):
    """The payment provider failed to capture or refund."""


class FulfillmentError(OrderError):
    """The fulfillment provider failed to create a shipment."""
