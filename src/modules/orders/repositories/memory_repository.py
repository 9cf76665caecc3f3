"""In-memory implementation of the Order repository.

Keeps ``OrderDocument`` snapshots in a dict keyed by id.  Each instance
is independent: build a fresh one per test or per script run, never
share one across callers.

Documents are materialised by parsing them into ``OrderDocument``, so
the pydantic schema is always enforced; ``validate=False`` on
``update_one`` changes nothing here.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog
import uuid6
from pydantic import ValidationError

from modules.orders.constants import CREATABLE_FIELDS, LIST_FILTER_FIELDS
from modules.orders.dtos import OrderDocument
from modules.orders.exceptions import OrderNotFound, OrderValidationError
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class InMemoryOrderRepository(IOrderRepository):
    """Process-local Order repository."""

    def __init__(self) -> None:
        self._documents: Dict[str, OrderDocument] = {}

    def find_one(self, id: str) -> Optional[OrderDocument]:
        return self._documents.get(str(id))

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[OrderDocument]:
        filters = filters or {}
        unknown = set(filters) - LIST_FILTER_FIELDS
        if unknown:
            raise OrderValidationError(
                f"Unsupported order filters: {', '.join(sorted(unknown))}."
            )
        matches = [
            document
            for document in self._documents.values()
            if all(getattr(document, key) == value for key, value in filters.items())
        ]
        return sorted(matches, key=lambda document: document.id.int, reverse=True)

    def create(self, fields: Dict[str, Any]) -> OrderDocument:
        unknown = set(fields) - CREATABLE_FIELDS
        if unknown:
            raise OrderValidationError(
                f"Unknown order fields: {', '.join(sorted(unknown))}."
            )

        now = datetime.now(timezone.utc)
        document = _parse(
            {**fields, "id": uuid6.uuid7(), "created_at": now, "updated_at": now}
        )
        self._documents[str(document.id)] = document

        logger.info("order.document_created", order_id=str(document.id))
        return document

    def update_one(
        self, id: str, fields: Dict[str, Any], validate: bool = True
    ) -> None:
        current = self._documents.get(str(id))
        if current is None:
            raise OrderNotFound(f"Order {id} not found.")

        merged = {
            **current.model_dump(),
            **fields,
            "updated_at": datetime.now(timezone.utc),
        }
        self._documents[str(id)] = _parse(merged)

        logger.info("order.document_updated", order_id=str(id), fields=sorted(fields))


def _parse(data: Dict[str, Any]) -> OrderDocument:
    try:
        return OrderDocument.model_validate(data)
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        raise OrderValidationError(f"Invalid order data: {details}") from exc
