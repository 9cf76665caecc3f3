"""Order service layer (Use Cases).

Orchestrates the order lifecycle: creation, general updates, metadata,
cancellation, payment capture, fulfillment, partial returns and
archival.  Every operation reads the current document, runs all of its
checks, and only then issues one set-only partial write.  A failed
check or a failed provider call leaves storage untouched.

Business rules enforced:
- ``metadata`` is never written through ``update_order``.
- Billing / shipping addresses must satisfy the required-field schema.
- Addresses, items and payment method are frozen once the order is
  processed (see ``lifecycle.is_processed``).
- Status moves along ``VALID_TRANSITIONS``; ``cancelled`` and
  ``archived`` only through their dedicated operations.
- Returned quantities accumulate and never exceed the ordered quantity.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Union
from uuid import UUID

import structlog
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from modules.orders import totals
from modules.orders.constants import (
    DEDICATED_STATUSES,
    PROCESSED_PAYMENT_STATES,
    UPDATABLE_FIELDS,
    FulfillmentStatus,
    OrderStatus,
    PaymentStatus,
    UpdateCategory,
)
from modules.orders.dtos import FieldUpdate, LineItemDTO, ReturnItemDTO, ScalarUpdate
from modules.orders.events import (
    FulfillmentCreated,
    ItemsReturned,
    OrderArchived,
    OrderCancelled,
    OrderCreated,
    OrderUpdated,
    PaymentCaptured,
)
from modules.orders.exceptions import (
    FulfillmentError,
    InvalidAddress,
    InvalidOrderStatus,
    InvalidReturn,
    MetadataUpdateNotAllowed,
    OrderAlreadyFulfilled,
    OrderNotArchivable,
    OrderNotCancellable,
    OrderNotFound,
    OrderNotReturnable,
    OrderValidationError,
    PaymentAlreadyCaptured,
    PaymentError,
    ProcessedOrderLocked,
)
from modules.orders.lifecycle import (
    can_transition_to,
    derive_fulfillment_status,
    has_fulfillment_activity,
    is_fulfilled,
    is_payment_captured,
    is_processed,
    is_returnable,
    is_terminal,
)
from shared.infrastructure.bus import event_bus as default_event_bus

if TYPE_CHECKING:
    from modules.orders.dtos import OrderDocument
    from modules.orders.providers.interfaces import (
        IFulfillmentProvider,
        IPaymentProvider,
        IShippingProfileResolver,
    )
    from modules.orders.repositories.interfaces import IOrderRepository
    from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)

_field_update_adapter: TypeAdapter[FieldUpdate] = TypeAdapter(FieldUpdate)
_return_items_adapter = TypeAdapter(List[ReturnItemDTO])

OrderId = Union[str, UUID]


class OrderService:
    """Application service for Order use-cases.

    Receives the repository and providers via constructor injection
    (DIP).  ``event_bus`` defaults to the process-wide in-memory bus.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        payment_provider: IPaymentProvider,
        fulfillment_provider: IFulfillmentProvider,
        shipping_profile_resolver: IShippingProfileResolver,
        event_bus: Optional[IEventBus] = None,
    ) -> None:
        self._order_repo = order_repository
        self._payment_provider = payment_provider
        self._fulfillment_provider = fulfillment_provider
        self._shipping_profiles = shipping_profile_resolver
        self._event_bus = event_bus if event_bus is not None else default_event_bus

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: OrderId) -> OrderDocument:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.find_one(str(order_id))
        if order is None:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> List[OrderDocument]:
        """Return orders newest first, optionally filtered by status or email."""
        return self._order_repo.list(filters)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(self, fields: Dict[str, Any]) -> OrderDocument:
        """Insert a new order in ``pending`` / ``awaiting`` state.

        Only the storage schema validates *fields*; ``email`` is the
        minimum it requires.

        Raises:
            OrderValidationError: the storage schema rejected the fields.
        """
        order = self._order_repo.create(dict(fields))

        logger.info("order.created", order_id=str(order.id))
        self._event_bus.publish(OrderCreated(aggregate_id=order.id))
        return order

    def update_order(self, order_id: OrderId, fields: Dict[str, Any]) -> None:
        """Apply a partial update restricted to ``UPDATABLE_FIELDS``.

        Only the supplied fields are written.

        Raises:
            OrderNotFound: order does not exist.
            MetadataUpdateNotAllowed: ``metadata`` was supplied.
            InvalidAddress: an address misses a required field.
            OrderValidationError: unknown field or malformed value.
            ProcessedOrderLocked: locked fields on a processed order.
            InvalidOrderStatus: ``status`` move not allowed.
        """
        order = self.get_order(order_id)
        log = logger.bind(order_id=str(order.id), fields=sorted(fields))

        if "metadata" in fields:
            log.warning("order.metadata_update_rejected")
            raise MetadataUpdateNotAllowed("Use set_metadata to update metadata fields")

        changes = self._parse_changes(fields)

        if is_processed(order) and any(
            change.is_locked_after_processing for change in changes
        ):
            log.warning("order.processed_fields_locked")
            raise ProcessedOrderLocked(
                "Can't update shipping, billing, items and payment method "
                "when order is processed"
            )

        for change in changes:
            if isinstance(change, ScalarUpdate) and change.field == "status":
                self._check_status_update(order, change.value)

        if not changes:
            log.info("order.update_skipped")
            return

        update: Dict[str, Any] = {}
        for change in changes:
            update.update(change.as_set())

        self._order_repo.update_one(str(order.id), update, validate=True)

        log.info("order.updated")
        self._event_bus.publish(
            OrderUpdated(aggregate_id=order.id, fields=tuple(sorted(update)))
        )

    def set_metadata(self, order_id: OrderId, key: str, value: Any) -> None:
        """Set one metadata entry, keeping the others.

        This is the only path that writes ``metadata``.

        Raises:
            OrderNotFound: order does not exist.
            OrderValidationError: empty key or non-JSON value.
        """
        order = self.get_order(order_id)

        if not isinstance(key, str) or not key.strip():
            raise OrderValidationError("Metadata key must be a non-empty string.")
        try:
            json.dumps(value)
        except (TypeError, ValueError) as exc:
            raise OrderValidationError(
                f"Metadata value for '{key}' is not JSON serialisable."
            ) from exc

        metadata = {**order.metadata, key: value}
        self._order_repo.update_one(str(order.id), {"metadata": metadata})
        logger.info("order.metadata_set", order_id=str(order.id), key=key)

    def cancel_order(self, order_id: OrderId) -> OrderDocument:
        """Cancel an order that has neither been fulfilled nor paid.

        Raises:
            OrderNotFound: order does not exist.
            OrderNotCancellable: terminal, any fulfillment activity, or
                payment processed.
        """
        order = self.get_order(order_id)
        log = logger.bind(order_id=str(order.id), current_status=order.status)

        if is_terminal(order.status):
            log.warning("order.cancel_not_allowed", reason="terminal")
            raise OrderNotCancellable(f"Can't cancel an order that is {order.status}")
        if has_fulfillment_activity(order):
            log.warning("order.cancel_not_allowed", reason="fulfillment_activity")
            if is_fulfilled(order):
                raise OrderNotCancellable("Can't cancel a fulfilled order")
            raise OrderNotCancellable(
                f"Can't cancel an order whose fulfillment is {order.fulfillment_status}"
            )
        # Fulfillment is untouched here, so only payment can make it processed.
        if is_processed(order):
            log.warning("order.cancel_not_allowed", reason="payment_processed")
            raise OrderNotCancellable("Can't cancel an order with payment processed")

        self._order_repo.update_one(
            str(order.id), {"status": OrderStatus.CANCELLED}, validate=False
        )

        log.info("order.cancelled")
        self._event_bus.publish(OrderCancelled(aggregate_id=order.id))
        return self.get_order(order.id)

    def capture_payment(self, order_id: OrderId) -> OrderDocument:
        """Capture the order's payment through the payment provider.

        The provider is called once, without retries; if it raises, the
        order keeps its current payment status.

        Raises:
            OrderNotFound: order does not exist.
            PaymentAlreadyCaptured: payment already captured.
            InvalidOrderStatus: the order or its payment is cancelled.
            OrderValidationError: the order has no payment method.
            PaymentError: the provider rejected the capture.
        """
        order = self.get_order(order_id)
        log = logger.bind(order_id=str(order.id), payment_status=order.payment_status)

        if order.payment_status in PROCESSED_PAYMENT_STATES:
            log.warning("order.capture_not_allowed", reason="already_captured")
            raise PaymentAlreadyCaptured("Payment already captured")
        if (
            order.status == OrderStatus.CANCELLED
            or order.payment_status == PaymentStatus.CANCELED
        ):
            log.warning("order.capture_not_allowed", reason="cancelled")
            raise InvalidOrderStatus("Can't capture payment for a cancelled order")
        if order.payment_method is None:
            raise OrderValidationError("Order has no payment method to capture")

        try:
            self._payment_provider.capture(order.payment_method)
        except PaymentError:
            log.warning(
                "order.payment_capture_failed",
                provider_id=order.payment_method.provider_id,
            )
            raise

        self._order_repo.update_one(
            str(order.id), {"payment_status": PaymentStatus.CAPTURED}, validate=False
        )

        log.info("order.payment_captured")
        self._event_bus.publish(PaymentCaptured(aggregate_id=order.id))
        return self.get_order(order.id)

    def create_fulfillment(self, order_id: OrderId) -> Dict[str, Any]:
        """Ship the order through the fulfillment provider.

        Resolves the shipping profile first, then asks the provider for
        a shipment.  Returns the shipment reported by the provider.

        Raises:
            OrderNotFound: order does not exist.
            OrderAlreadyFulfilled: a fulfillment already exists.
            InvalidOrderStatus: the order is cancelled.
            FulfillmentError: the provider could not create the shipment.
        """
        order = self.get_order(order_id)
        log = logger.bind(
            order_id=str(order.id), fulfillment_status=order.fulfillment_status
        )

        if is_fulfilled(order):
            log.warning("order.fulfillment_not_allowed", reason="already_fulfilled")
            raise OrderAlreadyFulfilled("Order is already fulfilled")
        if order.status == OrderStatus.CANCELLED:
            log.warning("order.fulfillment_not_allowed", reason="cancelled")
            raise InvalidOrderStatus("Can't fulfill a cancelled order")

        shipping_profile = self._shipping_profiles.resolve(order)
        try:
            shipment = self._fulfillment_provider.create_fulfillment(
                order, shipping_profile
            )
        except FulfillmentError:
            log.warning("order.fulfillment_failed")
            raise

        self._order_repo.update_one(
            str(order.id),
            {"fulfillment_status": FulfillmentStatus.FULFILLED},
            validate=False,
        )

        log.info("order.fulfilled")
        self._event_bus.publish(FulfillmentCreated(aggregate_id=order.id))
        return shipment

    def return_items(
        self,
        order_id: OrderId,
        return_items: Sequence[Union[ReturnItemDTO, Dict[str, Any]]],
    ) -> OrderDocument:
        """Register a (partial) return and refund the returned value.

        Lines whose id already exists are merged: returned quantities
        add up and the descriptive fields are replaced by the incoming
        ones.  Unknown ids are appended as new, fully returned lines.
        The refund is issued before anything is persisted.

        Raises:
            OrderNotFound: order does not exist.
            OrderNotReturnable: payment not captured, order unfulfilled
                or already fully returned.
            InvalidReturn: malformed request or quantities that disagree
                with the stored lines.
            PaymentError: the provider rejected the refund.
        """
        order = self.get_order(order_id)
        log = logger.bind(
            order_id=str(order.id),
            payment_status=order.payment_status,
            fulfillment_status=order.fulfillment_status,
        )

        if not is_payment_captured(order):
            log.warning("order.return_not_allowed", reason="payment_unprocessed")
            raise OrderNotReturnable("Can't return an order with payment unprocessed")
        if not is_returnable(order):
            log.warning("order.return_not_allowed", reason="not_returnable")
            raise OrderNotReturnable(
                "Can't return an unfulfilled or already returned order"
            )

        requested = self._parse_return_items(return_items)
        items = self._merge_returned_items(order.items, requested)
        fulfillment_status = derive_fulfillment_status(items)
        refund_amount = totals.get_refund_total(order, requested)

        if refund_amount > 0:
            if order.payment_method is None:
                raise InvalidReturn("Order has no payment method to refund")
            try:
                self._payment_provider.refund(order.payment_method, refund_amount)
            except PaymentError:
                log.warning("order.refund_failed", amount=refund_amount)
                raise

        self._order_repo.update_one(
            str(order.id),
            {
                "items": [item.model_dump(mode="json") for item in items],
                "fulfillment_status": fulfillment_status,
            },
            validate=True,
        )

        log.info(
            "order.items_returned",
            refund_amount=refund_amount,
            new_fulfillment_status=fulfillment_status,
        )
        self._event_bus.publish(
            ItemsReturned(
                aggregate_id=order.id,
                refund_amount=refund_amount,
                fulfillment_status=fulfillment_status,
            )
        )
        return self.get_order(order.id)

    def archive_order(self, order_id: OrderId) -> OrderDocument:
        """Archive a processed order.

        Raises:
            OrderNotFound: order does not exist.
            OrderNotArchivable: no payment or fulfillment activity yet.
            InvalidOrderStatus: already archived or otherwise terminal.
        """
        order = self.get_order(order_id)
        log = logger.bind(order_id=str(order.id), current_status=order.status)

        if not is_processed(order):
            log.warning("order.archive_not_allowed", reason="unprocessed")
            raise OrderNotArchivable("Can't archive an unprocessed order")
        if not can_transition_to(order.status, OrderStatus.ARCHIVED):
            log.warning("order.archive_not_allowed", reason="terminal")
            raise InvalidOrderStatus(f"Can't archive an order that is {order.status}")

        self._order_repo.update_one(
            str(order.id), {"status": OrderStatus.ARCHIVED}, validate=False
        )

        log.info("order.archived")
        self._event_bus.publish(OrderArchived(aggregate_id=order.id))
        return self.get_order(order.id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_changes(fields: Dict[str, Any]) -> List[FieldUpdate]:
        """Turn raw update fields into typed ``FieldUpdate`` payloads."""
        changes: List[FieldUpdate] = []
        for name, value in fields.items():
            category = UPDATABLE_FIELDS.get(name)
            if category is None:
                raise OrderValidationError(f"Field '{name}' cannot be updated")
            try:
                change = _field_update_adapter.validate_python(
                    {"kind": category.value, "field": name, "value": value}
                )
            except PydanticValidationError as exc:
                if category is UpdateCategory.ADDRESS:
                    raise InvalidAddress("The address is not valid") from exc
                raise OrderValidationError(f"Invalid value for '{name}'") from exc
            changes.append(change)
        return changes

    @staticmethod
    def _check_status_update(order: OrderDocument, new_status: str) -> None:
        if new_status not in OrderStatus.values:
            raise OrderValidationError(f"Unknown order status '{new_status}'")
        if new_status in DEDICATED_STATUSES:
            raise OrderValidationError(
                f"Use the dedicated operation to set status '{new_status}'"
            )
        if new_status == order.status:
            return
        if not can_transition_to(order.status, new_status):
            raise InvalidOrderStatus(
                f"Cannot transition from {order.status} to {new_status}."
            )

    @staticmethod
    def _parse_return_items(
        return_items: Sequence[Union[ReturnItemDTO, Dict[str, Any]]],
    ) -> List[ReturnItemDTO]:
        if not return_items:
            raise InvalidReturn("A return must contain at least one item")
        try:
            return _return_items_adapter.validate_python(
                [
                    item.model_dump() if isinstance(item, ReturnItemDTO) else item
                    for item in return_items
                ]
            )
        except PydanticValidationError as exc:
            raise InvalidReturn(
                f"Invalid return request: {exc.error_count()} error(s)"
            ) from exc

    @staticmethod
    def _merge_returned_items(
        stored: Sequence[LineItemDTO], requested: Sequence[ReturnItemDTO]
    ) -> List[LineItemDTO]:
        """Fold *requested* returns into the stored line items.

        The ordered quantity of an existing line always comes from
        storage; a caller-supplied ``requested_quantity`` must match it.
        """
        items = list(stored)
        positions = {item.id: index for index, item in enumerate(items)}

        for returned in requested:
            index = positions.get(returned.id)
            if index is None:
                ordered = returned.requested_quantity or returned.quantity
                if returned.quantity > ordered:
                    raise InvalidReturn(
                        f"Cannot return {returned.quantity} units of line "
                        f"{returned.id}: only {ordered} ordered"
                    )
                positions[returned.id] = len(items)
                items.append(
                    LineItemDTO(
                        id=returned.id,
                        title=returned.title,
                        description=returned.description,
                        thumbnail=returned.thumbnail,
                        content=returned.content,
                        quantity=ordered,
                        returned_quantity=returned.quantity,
                    )
                )
                continue

            line = items[index]
            if (
                returned.requested_quantity is not None
                and returned.requested_quantity != line.quantity
            ):
                raise InvalidReturn(
                    f"Requested quantity {returned.requested_quantity} for line "
                    f"{line.id} does not match the ordered quantity {line.quantity}"
                )
            returned_quantity = line.returned_quantity + returned.quantity
            if returned_quantity > line.quantity:
                raise InvalidReturn(
                    f"Cannot return {returned.quantity} units of line {line.id}: "
                    f"only {line.quantity - line.returned_quantity} outstanding"
                )
            items[index] = line.model_copy(
                update={
                    "title": returned.title,
                    "description": returned.description,
                    "thumbnail": returned.thumbnail,
                    "content": returned.content,
                    "returned_quantity": returned_quantity,
                }
            )

        return items
