"""Unit tests for Order DTOs.

Covers:
- AddressDTO: required-field schema.
- LineItemDTO: quantity bounds and returned-quantity range.
- FieldUpdate: tagged union dispatch and the processed-order lock.
- OrderDocument: email format, unique line ids, from_entity factory.
- PaymentMethodDTO: profile id kept, unknown keys rejected.
"""

from __future__ import annotations

from uuid import uuid4

import pytest
from pydantic import TypeAdapter, ValidationError

from conftest import make_address, make_item
from modules.orders.constants import OrderStatus, UpdateCategory
from modules.orders.dtos import (
    AddressDTO,
    AddressUpdate,
    FieldUpdate,
    ItemsUpdate,
    LineItemDTO,
    OrderDocument,
    PaymentMethodDTO,
    PaymentMethodUpdate,
    ScalarUpdate,
)
from modules.orders.models import Order

pytestmark = pytest.mark.unit

field_update = TypeAdapter(FieldUpdate)


# ===========================================================================
# AddressDTO
# ===========================================================================


class TestAddressDTO:
    def test_valid_address(self):
        address = AddressDTO.model_validate(make_address(company="ACME"))
        assert address.city == "Springfield"
        assert address.company == "ACME"
        assert address.address_2 is None

    @pytest.mark.parametrize("missing", ["first_name", "city", "postal_code"])
    def test_missing_required_field(self, missing):
        data = make_address()
        del data[missing]
        with pytest.raises(ValidationError):
            AddressDTO.model_validate(data)

    def test_blank_required_field(self):
        with pytest.raises(ValidationError, match="must not be blank"):
            AddressDTO.model_validate(make_address(province="  "))

    def test_is_immutable(self):
        address = AddressDTO.model_validate(make_address())
        with pytest.raises(ValidationError):
            address.city = "Shelbyville"


# ===========================================================================
# LineItemDTO
# ===========================================================================


class TestLineItemDTO:
    def test_defaults(self):
        item = LineItemDTO.model_validate(make_item())
        assert item.returned_quantity == 0
        assert item.is_fully_returned is False

    def test_zero_quantity_raises(self):
        with pytest.raises(ValidationError, match="Quantity must be at least 1"):
            LineItemDTO.model_validate(make_item(quantity=0))

    def test_returned_above_quantity_raises(self):
        with pytest.raises(ValidationError, match="outside"):
            LineItemDTO.model_validate(make_item(quantity=2, returned_quantity=3))

    def test_negative_unit_price_raises(self):
        data = make_item()
        data["content"]["unit_price"] = -1
        with pytest.raises(ValidationError, match="must not be negative"):
            LineItemDTO.model_validate(data)

    def test_fully_returned(self):
        item = LineItemDTO.model_validate(make_item(quantity=2, returned_quantity=2))
        assert item.is_fully_returned is True


# ===========================================================================
# FieldUpdate
# ===========================================================================


class TestFieldUpdate:
    def test_scalar_dispatch(self):
        change = field_update.validate_python(
            {"kind": "scalar", "field": "email", "value": "x@example.com"}
        )
        assert isinstance(change, ScalarUpdate)
        assert change.category is UpdateCategory.SCALAR
        assert change.is_locked_after_processing is False
        assert change.as_set() == {"email": "x@example.com"}

    def test_address_dispatch(self):
        change = field_update.validate_python(
            {"kind": "address", "field": "shipping_address", "value": make_address()}
        )
        assert isinstance(change, AddressUpdate)
        assert change.is_locked_after_processing is True
        assert change.as_set()["shipping_address"]["city"] == "Springfield"

    def test_items_dispatch(self):
        change = field_update.validate_python(
            {"kind": "items", "field": "items", "value": [make_item()]}
        )
        assert isinstance(change, ItemsUpdate)
        assert change.as_set()["items"][0]["returned_quantity"] == 0

    def test_payment_method_dispatch(self):
        change = field_update.validate_python(
            {
                "kind": "payment_method",
                "field": "payment_method",
                "value": {"provider_id": "card"},
            }
        )
        assert isinstance(change, PaymentMethodUpdate)
        assert change.as_set() == {
            "payment_method": {"provider_id": "card", "profile_id": None, "data": {}}
        }

    def test_scalar_email_must_be_well_formed(self):
        with pytest.raises(ValidationError, match="well-formed"):
            field_update.validate_python(
                {"kind": "scalar", "field": "email", "value": "not-an-email"}
            )

    def test_scalar_status_is_not_checked_as_email(self):
        change = field_update.validate_python(
            {"kind": "scalar", "field": "status", "value": "completed"}
        )
        assert change.as_set() == {"status": "completed"}

    def test_field_outside_category_rejected(self):
        with pytest.raises(ValidationError):
            field_update.validate_python(
                {"kind": "scalar", "field": "metadata", "value": "x"}
            )

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            field_update.validate_python({"kind": "other", "field": "x", "value": 1})


# ===========================================================================
# OrderDocument
# ===========================================================================


class TestOrderDocument:
    def test_defaults(self):
        order = OrderDocument(id=uuid4(), email="a@example.com")
        assert order.status == OrderStatus.PENDING
        assert order.items == []
        assert order.metadata == {}

    @pytest.mark.parametrize("email", [" ", "not-an-email", "a@"])
    def test_malformed_email_raises(self, email):
        with pytest.raises(ValidationError):
            OrderDocument(id=uuid4(), email=email)

    def test_duplicate_line_ids_raise(self):
        with pytest.raises(ValidationError, match="unique"):
            OrderDocument(
                id=uuid4(),
                email="a@example.com",
                items=[make_item("dup"), make_item("dup")],
            )

    def test_find_item(self):
        order = OrderDocument(
            id=uuid4(), email="a@example.com", items=[make_item("line-9")]
        )
        assert order.find_item("line-9").id == "line-9"
        assert order.find_item("missing") is None

    def test_from_entity(self):
        entity = Order(
            email="entity@example.com",
            shipping_address=make_address(),
            items=[make_item()],
            metadata={"source": "pos"},
        )
        document = OrderDocument.from_entity(entity)
        assert document.id == entity.id
        assert document.shipping_address.city == "Springfield"
        assert document.billing_address is None
        assert document.items[0].id == "line-1"
        assert document.metadata == {"source": "pos"}


# ===========================================================================
# PaymentMethodDTO
# ===========================================================================


class TestPaymentMethodDTO:
    def test_profile_id_is_kept(self):
        method = PaymentMethodDTO.model_validate(
            {"provider_id": "stripe", "profile_id": "cus_42"}
        )
        assert method.profile_id == "cus_42"
        assert method.model_dump(mode="json")["profile_id"] == "cus_42"

    def test_profile_id_is_optional(self):
        method = PaymentMethodDTO.model_validate({"provider_id": "manual"})
        assert method.profile_id is None
        assert method.data == {}

    def test_unknown_keys_rejected(self):
        with pytest.raises(ValidationError, match="Extra inputs are not permitted"):
            PaymentMethodDTO.model_validate({"provider_id": "stripe", "card": "4242"})
