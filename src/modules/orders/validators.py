"""Storage-schema validators for the JSON columns of ``Order``.

Each validator parses the raw JSON value through the matching pydantic
DTO and re-raises failures as Django ``ValidationError`` so that
``Model.full_clean()`` reports them per field.
"""

from __future__ import annotations

from typing import Any

from django.core.exceptions import ValidationError
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from modules.orders.dtos import AddressDTO, LineItemDTO, PaymentMethodDTO

_line_items_adapter = TypeAdapter(list[LineItemDTO])


def _errors(exc: PydanticValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in error['loc']) or 'value'}: {error['msg']}"
        for error in exc.errors()
    ]


def validate_address(value: Any) -> None:
    try:
        AddressDTO.model_validate(value)
    except PydanticValidationError as exc:
        raise ValidationError(_errors(exc)) from exc


def validate_line_items(value: Any) -> None:
    try:
        items = _line_items_adapter.validate_python(value)
    except PydanticValidationError as exc:
        raise ValidationError(_errors(exc)) from exc

    ids = [item.id for item in items]
    if len(ids) != len(set(ids)):
        raise ValidationError("Line item ids must be unique within an order.")


def validate_payment_method(value: Any) -> None:
    try:
        PaymentMethodDTO.model_validate(value)
    except PydanticValidationError as exc:
        raise ValidationError(_errors(exc)) from exc


def validate_metadata(value: Any) -> None:
    if not isinstance(value, dict):
        raise ValidationError("Metadata must be a JSON object.")
    if not all(isinstance(key, str) and key for key in value):
        raise ValidationError("Metadata keys must be non-empty strings.")
