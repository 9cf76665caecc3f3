"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.  Each order
is one row whose JSON columns hold the nested document parts.

Writes never replace the whole row: ``update_one`` issues a single
``UPDATE ... SET`` restricted to the supplied columns, so concurrent
updates on disjoint fields do not clobber each other.  Two updates on
the same field are last-write-wins; there is no row locking.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from modules.orders.constants import CREATABLE_FIELDS, LIST_FILTER_FIELDS
from modules.orders.dtos import OrderDocument
from modules.orders.exceptions import OrderNotFound, OrderValidationError
from modules.orders.models import Order
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def find_one(self, id: str) -> Optional[OrderDocument]:
        """Retrieve an order document.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            order = Order.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None
        if order is None:
            return None
        return OrderDocument.from_entity(order)

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[OrderDocument]:
        """List orders, newest first, with optional equality filters."""
        queryset = Order.objects.all()
        if filters:
            _check_filters(filters)
            queryset = queryset.filter(**filters)
        return [OrderDocument.from_entity(order) for order in queryset]

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, fields: Dict[str, Any]) -> OrderDocument:
        """Insert a new order after a full schema check."""
        unknown = set(fields) - CREATABLE_FIELDS
        if unknown:
            raise OrderValidationError(
                f"Unknown order fields: {', '.join(sorted(unknown))}."
            )

        order = Order(**fields)
        try:
            order.full_clean()
        except ValidationError as exc:
            raise OrderValidationError(_format_errors(exc)) from exc
        order.save()

        logger.info("order.document_created", order_id=str(order.id))
        return OrderDocument.from_entity(order)

    # ------------------------------------------------------------------
    # Partial update
    # ------------------------------------------------------------------

    @transaction.atomic
    def update_one(
        self, id: str, fields: Dict[str, Any], validate: bool = True
    ) -> None:
        """Set *fields* on one order.

        With ``validate`` the supplied values go through the model field
        validators (only those columns; the rest are excluded) before
        the ``UPDATE`` is issued.
        """
        if validate:
            order = Order.objects.filter(id=id).first()
            if order is None:
                raise OrderNotFound(f"Order {id} not found.")
            for field, value in fields.items():
                setattr(order, field, value)
            exclude = [f.name for f in Order._meta.fields if f.name not in fields]
            try:
                order.full_clean(exclude=exclude, validate_unique=False)
            except ValidationError as exc:
                raise OrderValidationError(_format_errors(exc)) from exc

        updated = Order.objects.filter(id=id).update(
            **fields, updated_at=timezone.now()
        )
        if not updated:
            raise OrderNotFound(f"Order {id} not found.")

        logger.info("order.document_updated", order_id=str(id), fields=sorted(fields))


def _check_filters(filters: Dict[str, Any]) -> None:
    unknown = set(filters) - LIST_FILTER_FIELDS
    if unknown:
        raise OrderValidationError(
            f"Unsupported order filters: {', '.join(sorted(unknown))}."
        )


def _format_errors(exc: ValidationError) -> str:
    if hasattr(exc, "message_dict"):
        parts = [
            f"{field}: {'; '.join(messages)}"
            for field, messages in exc.message_dict.items()
        ]
        return "Invalid order data: " + " | ".join(parts)
    return "Invalid order data: " + "; ".join(exc.messages)
