"""Stock movement repository interface.

Append and read only: the ledger contract has no update or delete.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.stock.models import StockMovement


class IStockMovementRepository(IRepository["StockMovement"]):
    @abstractmethod
    def append(self, data: Dict[str, Any]) -> StockMovement:
        """Insert a new movement built from *data*."""

    @abstractmethod
    def exists(self, **lookups: Any) -> bool:
        """Return ``True`` when a movement matching *lookups* exists."""
