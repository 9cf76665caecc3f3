"""Order model: one row per order document.

Business rules implemented at the storage layer:
- ``email`` is required and must be a well-formed address.
- Addresses, line items and the payment method are JSON documents
  checked against the pydantic DTO schemas (``modules.orders.validators``)
  whenever ``full_clean()`` runs.
- Status columns only accept their enum values.
- Orders are never deleted; ``archived`` and ``cancelled`` are terminal
  states kept for audit.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import FulfillmentStatus, OrderStatus, PaymentStatus
from modules.orders.validators import (
    validate_address,
    validate_line_items,
    validate_metadata,
    validate_payment_method,
)


class Order(BaseModel):
    """Order aggregate root stored document-style.

    ``items`` holds the full line item list (including
    ``returned_quantity`` per line) and is always rewritten as a whole;
    the other JSON columns are independent so that updates touching
    disjoint fields never overwrite each other.
    """

    email: models.EmailField = models.EmailField(max_length=254)
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    fulfillment_status: models.CharField = models.CharField(
        max_length=20,
        choices=FulfillmentStatus.choices,
        default=FulfillmentStatus.NOT_FULFILLED,
    )
    payment_status: models.CharField = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.AWAITING,
    )
    billing_address: models.JSONField = models.JSONField(
        null=True,
        blank=True,
        default=None,
        validators=[validate_address],
    )
    shipping_address: models.JSONField = models.JSONField(
        null=True,
        blank=True,
        default=None,
        validators=[validate_address],
    )
    items: models.JSONField = models.JSONField(
        default=list,
        blank=True,
        validators=[validate_line_items],
    )
    payment_method: models.JSONField = models.JSONField(
        null=True,
        blank=True,
        default=None,
        validators=[validate_payment_method],
    )
    metadata: models.JSONField = models.JSONField(
        default=dict,
        blank=True,
        validators=[validate_metadata],
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(
                fields=["fulfillment_status"], name="orders_fulfillment_idx"
            ),
            models.Index(fields=["payment_status"], name="orders_payment_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return (
            f"{self.id} ({self.status}/{self.fulfillment_status}/"
            f"{self.payment_status})"
        )
