from __future__ import annotations

from uuid import uuid4

import pytest

from modules.orders import totals
from modules.orders.dtos import (
    LineItemContentDTO,
    LineItemDTO,
    OrderDocument,
    ReturnItemDTO,
)

pytestmark = pytest.mark.unit


def _content(unit_price: int, quantity: int = 1) -> dict:
    return {
        "unit_price": unit_price,
        "variant": {"id": "variant-1"},
        "product": {"id": "product-1"},
        "quantity": quantity,
    }


@pytest.fixture()
def order():
    return OrderDocument(
        id=uuid4(),
        email="totals@example.com",
        items=[
            LineItemDTO(
                id="line-1", title="Shirt", content=_content(1500), quantity=2
            ),
            LineItemDTO(
                id="line-2",
                title="Socks",
                content=_content(300, quantity=3),
                quantity=1,
                returned_quantity=1,
            ),
        ],
    )


def test_unit_total_multiplies_content_quantity():
    content = LineItemContentDTO.model_validate(_content(300, quantity=3))
    assert totals.get_unit_total(content) == 900


def test_line_item_total(order):
    assert totals.get_line_item_total(order.items[0]) == 3000


def test_subtotal(order):
    assert totals.get_subtotal(order) == 3000 + 900


def test_returned_total(order):
    assert totals.get_returned_total(order) == 900


def test_refund_total_prices_existing_lines_from_storage(order):
    returned = ReturnItemDTO(
        id="line-1", title="Shirt", content=_content(99999), quantity=1
    )
    assert totals.get_refund_total(order, [returned]) == 1500


def test_refund_total_uses_request_content_for_new_lines(order):
    returned = ReturnItemDTO(
        id="line-new", title="Hat", content=_content(700), quantity=2
    )
    assert totals.get_refund_total(order, [returned]) == 1400


def test_refund_total_for_empty_request(order):
    assert totals.get_refund_total(order, []) == 0
