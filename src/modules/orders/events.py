"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Raised when an order is created."""


@dataclass(frozen=True)
class OrderUpdated(DomainEvent):
    """Raised after a general update; ``fields`` names what changed."""

    fields: Tuple[str, ...] = ()


@dataclass(frozen=True)
class OrderCancelled(DomainEvent):
    """Raised when an order is cancelled."""


@dataclass(frozen=True)
class OrderArchived(DomainEvent):
    """Raised when a processed order is archived."""


@dataclass(frozen=True)
class PaymentCaptured(DomainEvent):
    """Raised once the payment provider has captured the funds."""


@dataclass(frozen=True)
class FulfillmentCreated(DomainEvent):
    """Raised once the fulfillment provider has created a shipment."""


@dataclass(frozen=True)
class ItemsReturned(DomainEvent):
    """Raised when a return has been merged into the order."""

    refund_amount: int = 0
    fulfillment_status: str = ""
