"""Order repository interface.

Extends ``IRepository[Order]`` with the operations ``OrderService`` needs:
creating the aggregate (order plus items), locking it for a transition and
the read models behind the customer and admin listings.

The Service Layer depends exclusively on this contract.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Insert an order and its items.

        ``data`` holds the order columns plus ``items``: a list of dicts
        with ``product_id``, ``product_name``, ``quantity``, ``unit_price``
        and ``position``.  An ``id`` may be supplied by the caller.
        """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with its items prefetched."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order holding a row lock until the transaction ends."""

    @abstractmethod
    def update_status(self, order: Order, status: str) -> Order:
        """Persist a new status on an already loaded order."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet[Order]:
        """List orders, newest first, with optional ORM filters."""

    @abstractmethod
    def list_for_customer(self, customer_id: Any) -> QuerySet[Order]:
        """Orders placed by a registered user, newest first."""

    @abstractmethod
    def count_by_status(self) -> Dict[str, int]:
        """Number of orders per status (statuses without orders omitted)."""
