"""Generic document repository interface (Dependency Inversion Principle).

Provides ``IDocumentRepository[T]``, the base abstract class that
domain-specific repository interfaces extend.  Service-layer code
depends on this abstraction, never on Django ORM directly.

The contract mirrors a document store: reads return whole documents,
writes are set-only partial updates on named fields.  Documents are
never replaced wholesale and never deleted.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class IDocumentRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` represents the document type managed by the
    repository (e.g. ``OrderDocument``).
    """

    @abstractmethod
    def find_one(self, id: str) -> Optional[T]:
        """Retrieve a document by id; ``None`` when absent or malformed."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[T]:
        """List documents whose fields equal every value in *filters*."""

    @abstractmethod
    def create(self, fields: Dict[str, Any]) -> T:
        """Insert a new document built from *fields* and return it."""

    @abstractmethod
    def update_one(
        self, id: str, fields: Dict[str, Any], validate: bool = True
    ) -> None:
        """``$set`` *fields* on the document, leaving other fields untouched.

        When *validate* is true the storage schema checks the new values
        before anything is written.
        """
