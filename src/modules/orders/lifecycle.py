"""Pure lifecycle predicates shared by every service guard.

Nothing here touches storage or providers; each function inspects an
``OrderDocument`` (or plain status values) and answers one question.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from modules.orders.constants import (
    PROCESSED_FULFILLMENT_STATES,
    PROCESSED_PAYMENT_STATES,
    RETURNABLE_FULFILLMENT_STATES,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    FulfillmentStatus,
    PaymentStatus,
)

if TYPE_CHECKING:
    from modules.orders.dtos import LineItemDTO, OrderDocument


def is_processed(order: OrderDocument) -> bool:
    """Return ``True`` once any payment or fulfillment activity is recorded."""
    return (
        order.payment_status in PROCESSED_PAYMENT_STATES
        or order.fulfillment_status in PROCESSED_FULFILLMENT_STATES
    )


def is_fulfilled(order: OrderDocument) -> bool:
    return order.fulfillment_status in PROCESSED_FULFILLMENT_STATES


def has_fulfillment_activity(order: OrderDocument) -> bool:
    """Return ``True`` unless the order is still ``not_fulfilled``.

    Unlike ``is_fulfilled`` this also counts a ``canceled`` fulfillment.
    """
    return order.fulfillment_status != FulfillmentStatus.NOT_FULFILLED


def is_payment_captured(order: OrderDocument) -> bool:
    return order.payment_status == PaymentStatus.CAPTURED


def is_returnable(order: OrderDocument) -> bool:
    """Fulfilled (fully or partially) and not yet completely returned."""
    return order.fulfillment_status in RETURNABLE_FULFILLMENT_STATES


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATES


def can_transition_to(current: str, new_status: str) -> bool:
    """Check whether moving from *current* to *new_status* is valid."""
    return new_status in VALID_TRANSITIONS.get(current, set())


def derive_fulfillment_status(items: Iterable[LineItemDTO]) -> FulfillmentStatus:
    """Aggregate fulfillment status after a return.

    ``returned`` only when every line is fully returned, otherwise
    ``partially_fulfilled``.
    """
    if all(item.is_fully_returned for item in items):
        return FulfillmentStatus.RETURNED
    return FulfillmentStatus.PARTIALLY_FULFILLED
