"""Unit tests for the in-memory Order repository."""

from __future__ import annotations

from uuid import uuid4

import pytest

from conftest import make_address, make_order_fields
from modules.orders.constants import OrderStatus, PaymentStatus
from modules.orders.exceptions import OrderNotFound, OrderValidationError
from modules.orders.repositories import InMemoryOrderRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def repo():
    return InMemoryOrderRepository()


class TestCreate:
    def test_assigns_id_and_defaults(self, repo):
        order = repo.create({"email": "new@example.com"})
        assert order.id is not None
        assert order.status == OrderStatus.PENDING
        assert order.payment_status == PaymentStatus.AWAITING
        assert order.created_at is not None
        assert repo.list() == [order]

    def test_rejects_unknown_fields(self, repo):
        with pytest.raises(OrderValidationError, match="Unknown order fields: total"):
            repo.create({"email": "x@example.com", "total": 10})

    @pytest.mark.parametrize("email", ["not-an-email", "jane@", ""])
    def test_rejects_malformed_email(self, repo, email):
        with pytest.raises(OrderValidationError, match="email"):
            repo.create({"email": email})

    def test_keeps_payment_profile_id(self, repo):
        order = repo.create(make_order_fields())
        assert order.payment_method.profile_id == "prof-1"

    def test_rejects_invalid_document(self, repo):
        with pytest.raises(OrderValidationError, match="Invalid order data"):
            repo.create(make_order_fields(shipping_address={"city": "Nowhere"}))
        assert repo.list() == []


class TestFind:
    def test_find_one(self, repo):
        order = repo.create(make_order_fields())
        assert repo.find_one(str(order.id)) == order

    def test_find_one_missing(self, repo):
        assert repo.find_one(str(uuid4())) is None


class TestList:
    def test_newest_first(self, repo):
        first = repo.create({"email": "first@example.com"})
        second = repo.create({"email": "second@example.com"})
        assert [o.id for o in repo.list()] == [second.id, first.id]

    def test_filters(self, repo):
        repo.create({"email": "a@example.com"})
        paid = repo.create(
            {"email": "b@example.com", "payment_status": PaymentStatus.CAPTURED}
        )
        result = repo.list({"payment_status": PaymentStatus.CAPTURED})
        assert [o.id for o in result] == [paid.id]

    def test_unsupported_filter(self, repo):
        with pytest.raises(OrderValidationError, match="Unsupported order filters"):
            repo.list({"metadata": {}})


class TestUpdateOne:
    def test_sets_only_given_fields(self, repo):
        order = repo.create(make_order_fields(metadata={"k": "v"}))
        repo.update_one(str(order.id), {"email": "changed@example.com"})

        updated = repo.find_one(str(order.id))
        assert updated.email == "changed@example.com"
        assert updated.metadata == {"k": "v"}
        assert updated.items == order.items
        assert updated.updated_at >= order.updated_at

    def test_nested_value(self, repo):
        order = repo.create(make_order_fields())
        repo.update_one(
            str(order.id), {"billing_address": make_address(city="Shelbyville")}
        )
        assert repo.find_one(str(order.id)).billing_address.city == "Shelbyville"

    def test_missing_order(self, repo):
        with pytest.raises(OrderNotFound):
            repo.update_one(str(uuid4()), {"email": "x@example.com"})

    def test_invalid_value_leaves_document_untouched(self, repo):
        order = repo.create(make_order_fields())
        with pytest.raises(OrderValidationError):
            repo.update_one(str(order.id), {"email": ""})
        assert repo.find_one(str(order.id)) == order
