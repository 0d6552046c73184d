"""Generic repository interface.

``IRepository[T]`` is the base abstract class that the order and stock
repository contracts extend.  Services depend on these abstractions and
receive Django ORM implementations through their constructors.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional, Sequence, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` is the aggregate managed by the repository
    (e.g. ``Order``, ``StockMovement``).
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by its primary key."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> Sequence[T]:
        """List entities with optional filters."""
