"""Totals calculator.

Pure functions over order documents and return requests.  Amounts are
integers in the currency's minor unit; no currency or tax handling.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from modules.orders.dtos import (
        LineItemContentDTO,
        LineItemDTO,
        OrderDocument,
        ReturnItemDTO,
    )


def get_unit_total(content: LineItemContentDTO) -> int:
    """Price of one unit of a line: ``unit_price * content.quantity``."""
    return content.unit_price * content.quantity


def get_line_item_total(item: LineItemDTO) -> int:
    return get_unit_total(item.content) * item.quantity


def get_subtotal(order: OrderDocument) -> int:
    """Sum of every line total in the order."""
    return sum(get_line_item_total(item) for item in order.items)


def get_returned_total(order: OrderDocument) -> int:
    """Value of the units already returned across the order."""
    return sum(
        get_unit_total(item.content) * item.returned_quantity for item in order.items
    )


def get_refund_total(
    order: OrderDocument, return_items: Sequence[ReturnItemDTO]
) -> int:
    """Amount owed back for *return_items*.

    Lines already in the order are priced from the stored content so a
    return request cannot inflate its own refund; new lines fall back
    to the content they carry.
    """
    total = 0
    for returned in return_items:
        stored = order.find_item(returned.id)
        content = stored.content if stored is not None else returned.content
        total += get_unit_total(content) * returned.quantity
    return total
