"""Catalog Lookup contract used by the order workflow.

Stock mutations report the number of affected rows: ``0`` from
``decrease_stock_if_available`` means the product is inactive or does not
hold enough stock, and the caller must treat it as a lost race.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Iterable, List, Optional

if TYPE_CHECKING:
    from modules.catalog.models import Product


class ICatalogRepository(ABC):
    """Repository contract for product look-ups and stock counters."""

    @abstractmethod
    def find_by_id(self, id: Any) -> Optional[Product]:
        """Retrieve a product by primary key."""

    @abstractmethod
    def find_by_id_with_category(self, id: Any) -> Optional[Product]:
        """Retrieve a product with its category loaded in the same query."""

    @abstractmethod
    def find_all_by_ids(self, ids: Iterable[Any]) -> List[Product]:
        """Retrieve every existing product among *ids* (missing ids are skipped)."""

    @abstractmethod
    def decrease_stock_if_available(self, id: Any, quantity: int) -> int:
        """Atomically decrement stock when active and ``stock >= quantity``."""

    @abstractmethod
    def increase_stock(self, id: Any, quantity: int) -> int:
        """Atomically increment stock, unconditionally."""

    @abstractmethod
    def apply_stock_delta(self, id: Any, delta: int) -> int:
        """Atomically add a signed delta, refusing to go below zero."""

    @abstractmethod
    def current_stock(self, id: Any) -> int:
        """Read the stock counter as seen by the current transaction."""
