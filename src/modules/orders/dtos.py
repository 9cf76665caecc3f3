"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between storage, the providers and the
Service layer.  DTOs are immutable (``frozen=True``).

- ``AddressDTO``: postal record with the required-field schema.
- ``LineItemDTO`` / ``LineItemContentDTO``: one purchased variant.
- ``PaymentMethodDTO``: provider id, profile id and provider payload.
- ``ReturnItemDTO``: one line of a return request.
- ``FieldUpdate``: tagged union of the payloads accepted by the
  general update path (scalar, address, items, payment method).
- ``OrderDocument``: the order as read from storage.
"""

from __future__ import annotations

from datetime import datetime
from typing import (
    TYPE_CHECKING,
    Annotated,
    Any,
    Dict,
    List,
    Literal,
    Optional,
    Union,
)
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    TypeAdapter,
    field_validator,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError

from modules.orders.constants import (
    ADDRESS_REQUIRED_FIELDS,
    LOCKED_CATEGORIES,
    FulfillmentStatus,
    OrderStatus,
    PaymentStatus,
    UpdateCategory,
)

if TYPE_CHECKING:
    from modules.orders.models import Order

_email_adapter = TypeAdapter(EmailStr)


# ---------------------------------------------------------------------------
# Value DTOs
# ---------------------------------------------------------------------------


class AddressDTO(BaseModel):
    """Immutable postal address.

    Every field listed in ``ADDRESS_REQUIRED_FIELDS`` must be present
    and non-blank.
    """

    model_config = ConfigDict(frozen=True)

    first_name: str
    last_name: str
    address_1: str
    address_2: Optional[str] = None
    company: Optional[str] = None
    phone: Optional[str] = None
    city: str
    country_code: str
    province: str
    postal_code: str

    @field_validator(*ADDRESS_REQUIRED_FIELDS)
    @classmethod
    def required_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field must not be blank.")
        return v


class ReferenceDTO(BaseModel):
    """Reference to a catalogue entity (variant or product)."""

    model_config = ConfigDict(frozen=True)

    id: str


class LineItemContentDTO(BaseModel):
    """What a line item sells: unit price in minor units, variant, product."""

    model_config = ConfigDict(frozen=True)

    unit_price: int
    variant: ReferenceDTO
    product: ReferenceDTO
    quantity: int = 1

    @field_validator("unit_price")
    @classmethod
    def unit_price_must_not_be_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Unit price must not be negative.")
        return v

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


class LineItemDTO(BaseModel):
    """Immutable line item as stored in an order document."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    thumbnail: Optional[str] = None
    content: LineItemContentDTO
    quantity: int
    returned_quantity: int = 0

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v

    @model_validator(mode="after")
    def returned_within_requested(self):
        """``returned_quantity`` stays within ``[0, quantity]``."""
        if not 0 <= self.returned_quantity <= self.quantity:
            raise ValueError(
                f"Returned quantity {self.returned_quantity} is outside "
                f"0..{self.quantity} for line {self.id}."
            )
        return self

    @property
    def is_fully_returned(self) -> bool:
        return self.returned_quantity == self.quantity


class PaymentMethodDTO(BaseModel):
    """Provider id plus the provider-specific customer profile.

    Unknown keys are rejected.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    provider_id: str
    profile_id: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)


class ReturnItemDTO(BaseModel):
    """Immutable DTO for one line of a return request.

    ``quantity`` is the number of units coming back.  The descriptive
    fields replace those of the stored line when the ids match.
    ``requested_quantity`` is optional; when sent it must agree with
    the stored line (the stored value is authoritative).
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    thumbnail: Optional[str] = None
    content: LineItemContentDTO
    quantity: int
    requested_quantity: Optional[int] = None

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Returned quantity must be at least 1.")
        return v


# ---------------------------------------------------------------------------
# Update payloads (tagged union keyed on ``kind``)
# ---------------------------------------------------------------------------


class _FieldUpdateBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    @property
    def category(self) -> UpdateCategory:
        return UpdateCategory(self.kind)  # type: ignore[attr-defined]

    @property
    def is_locked_after_processing(self) -> bool:
        return self.category in LOCKED_CATEGORIES

    def as_set(self) -> Dict[str, Any]:
        """Return the ``{field: value}`` pair written by a partial update."""
        dumped = self.model_dump(mode="json")
        return {dumped["field"]: dumped["value"]}


class ScalarUpdate(_FieldUpdateBase):
    kind: Literal["scalar"] = "scalar"
    field: Literal["email", "status"]
    value: str

    @model_validator(mode="after")
    def email_must_be_well_formed(self):
        if self.field == "email":
            try:
                _email_adapter.validate_python(self.value)
            except PydanticValidationError as exc:
                raise ValueError("Email must be a well-formed address.") from exc
        return self


class AddressUpdate(_FieldUpdateBase):
    kind: Literal["address"] = "address"
    field: Literal["billing_address", "shipping_address"]
    value: AddressDTO


class ItemsUpdate(_FieldUpdateBase):
    kind: Literal["items"] = "items"
    field: Literal["items"] = "items"
    value: List[LineItemDTO]


class PaymentMethodUpdate(_FieldUpdateBase):
    kind: Literal["payment_method"] = "payment_method"
    field: Literal["payment_method"] = "payment_method"
    value: PaymentMethodDTO


FieldUpdate = Annotated[
    Union[ScalarUpdate, AddressUpdate, ItemsUpdate, PaymentMethodUpdate],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Order document
# ---------------------------------------------------------------------------


class OrderDocument(BaseModel):
    """Immutable snapshot of one order as held by storage."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    email: EmailStr
    status: OrderStatus = OrderStatus.PENDING
    fulfillment_status: FulfillmentStatus = FulfillmentStatus.NOT_FULFILLED
    payment_status: PaymentStatus = PaymentStatus.AWAITING
    billing_address: Optional[AddressDTO] = None
    shipping_address: Optional[AddressDTO] = None
    items: List[LineItemDTO] = Field(default_factory=list)
    payment_method: Optional[PaymentMethodDTO] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @model_validator(mode="after")
    def item_ids_unique(self):
        """Line item ids are unique within one order."""
        ids = [item.id for item in self.items]
        if len(ids) != len(set(ids)):
            raise ValueError("Line item ids must be unique within an order.")
        return self

    def find_item(self, item_id: str) -> Optional[LineItemDTO]:
        return next((item for item in self.items if item.id == item_id), None)

    @classmethod
    def from_entity(cls, order: Order) -> OrderDocument:
        """Build a document from an ``Order`` model instance."""
        return cls(
            id=order.id,
            email=order.email,
            status=order.status,
            fulfillment_status=order.fulfillment_status,
            payment_status=order.payment_status,
            billing_address=order.billing_address,
            shipping_address=order.shipping_address,
            items=order.items or [],
            payment_method=order.payment_method,
            metadata=order.metadata or {},
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
