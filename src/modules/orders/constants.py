"""Order domain constants.

Defines the three status enums of an order document, the valid
transitions of the top-level status machine, and the field whitelist
used by the general update path.
"""

from enum import Enum

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    COMPLETED = "completed", "Completed"
    ARCHIVED = "archived", "Archived"
    CANCELLED = "cancelled", "Cancelled"


class FulfillmentStatus(models.TextChoices):
    NOT_FULFILLED = "not_fulfilled", "Not fulfilled"
    FULFILLED = "fulfilled", "Fulfilled"
    PARTIALLY_FULFILLED = "partially_fulfilled", "Partially fulfilled"
    RETURNED = "returned", "Returned"
    SHIPPED = "shipped", "Shipped"
    CANCELED = "canceled", "Canceled"


class PaymentStatus(models.TextChoices):
    AWAITING = "awaiting", "Awaiting"
    CAPTURED = "captured", "Captured"
    REFUNDED = "refunded", "Refunded"
    CANCELED = "canceled", "Canceled"


VALID_TRANSITIONS: dict[str, set[str]] = {
    OrderStatus.PENDING: {
        OrderStatus.COMPLETED,
        OrderStatus.CANCELLED,
        OrderStatus.ARCHIVED,
    },
    OrderStatus.COMPLETED: {OrderStatus.CANCELLED, OrderStatus.ARCHIVED},
    OrderStatus.ARCHIVED: set(),
    OrderStatus.CANCELLED: set(),
}

TERMINAL_STATES: set[str] = {OrderStatus.ARCHIVED, OrderStatus.CANCELLED}

# Reachable only through cancel_order / archive_order.
DEDICATED_STATUSES: set[str] = {OrderStatus.CANCELLED, OrderStatus.ARCHIVED}

PROCESSED_FULFILLMENT_STATES: set[str] = {
    FulfillmentStatus.FULFILLED,
    FulfillmentStatus.PARTIALLY_FULFILLED,
    FulfillmentStatus.RETURNED,
    FulfillmentStatus.SHIPPED,
}

PROCESSED_PAYMENT_STATES: set[str] = {
    PaymentStatus.CAPTURED,
    PaymentStatus.REFUNDED,
}

RETURNABLE_FULFILLMENT_STATES: set[str] = {
    FulfillmentStatus.FULFILLED,
    FulfillmentStatus.PARTIALLY_FULFILLED,
    FulfillmentStatus.SHIPPED,
}


class UpdateCategory(str, Enum):
    """Kind of payload carried by an updatable order field."""

    SCALAR = "scalar"
    ADDRESS = "address"
    ITEMS = "items"
    PAYMENT_METHOD = "payment_method"


UPDATABLE_FIELDS: dict[str, UpdateCategory] = {
    "email": UpdateCategory.SCALAR,
    "status": UpdateCategory.SCALAR,
    "billing_address": UpdateCategory.ADDRESS,
    "shipping_address": UpdateCategory.ADDRESS,
    "items": UpdateCategory.ITEMS,
    "payment_method": UpdateCategory.PAYMENT_METHOD,
}

# Categories frozen once the order has been processed.
LOCKED_CATEGORIES: set[UpdateCategory] = {
    UpdateCategory.ADDRESS,
    UpdateCategory.ITEMS,
    UpdateCategory.PAYMENT_METHOD,
}

ADDRESS_REQUIRED_FIELDS: tuple[str, ...] = (
    "first_name",
    "last_name",
    "address_1",
    "city",
    "country_code",
    "province",
    "postal_code",
)

# Fields a caller may supply when creating an order document.
CREATABLE_FIELDS: frozenset[str] = frozenset(
    {
        "email",
        "status",
        "fulfillment_status",
        "payment_status",
        "billing_address",
        "shipping_address",
        "items",
        "payment_method",
        "metadata",
    }
)

LIST_FILTER_FIELDS: frozenset[str] = frozenset(
    {"status", "fulfillment_status", "payment_status", "email"}
)
