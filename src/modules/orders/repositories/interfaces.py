"""Order repository interface.

Extends ``IDocumentRepository[OrderDocument]`` for the Order aggregate.
Each order is persisted as one document; the Service Layer depends
exclusively on this contract (DIP).

Two implementations exist:

- ``OrderDjangoRepository``: Django ORM, JSON columns per document.
- ``InMemoryOrderRepository``: process-local dict, one per test.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IDocumentRepository

if TYPE_CHECKING:
    from modules.orders.dtos import OrderDocument


class IOrderRepository(IDocumentRepository["OrderDocument"]):
    """Repository contract for the Order aggregate root.

    Storage-schema failures surface as ``OrderValidationError``.
    """

    @abstractmethod
    def find_one(self, id: str) -> Optional[OrderDocument]:
        """Retrieve an order document by id."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[OrderDocument]:
        """List orders, newest first.

        Supported filter keys: ``status``, ``fulfillment_status``,
        ``payment_status``, ``email``.
        """

    @abstractmethod
    def create(self, fields: Dict[str, Any]) -> OrderDocument:
        """Create an order; ``email`` is required, statuses default."""

    @abstractmethod
    def update_one(
        self, id: str, fields: Dict[str, Any], validate: bool = True
    ) -> None:
        """Set *fields* on the order without touching any other field."""
