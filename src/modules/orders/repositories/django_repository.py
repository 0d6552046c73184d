"""Django ORM implementation of the Order repository.

Writes are issued inside the caller's unit of work; this repository never
opens a transaction of its own.  Row locking for transitions uses
``select_for_update()``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db.models import Count, QuerySet

from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    def create(self, data: Dict[str, Any]) -> Order:
        data = dict(data)
        items = data.pop("items", [])

        order = Order(**data)
        order.save(force_insert=True)

        for item_data in items:
            OrderItem(order=order, **item_data).save(force_insert=True)

        logger.info("order.persisted", order_id=str(order.id), item_count=len(items))
        return order

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_status(self, order: Order, status: str) -> Order:
        order.status = status
        order.save(update_fields=["status"])
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with eager-loaded items.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return self._base_queryset().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Items are prefetched so the caller can walk them while the row is
        locked.  Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return (
                Order.objects.select_for_update(of=("self",))
                .select_related("customer")
                .prefetch_related("items")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet[Order]:
        queryset = self._base_queryset()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def list_for_customer(self, customer_id: Any) -> QuerySet[Order]:
        return self._base_queryset().filter(customer_id=customer_id)

    def count_by_status(self) -> Dict[str, int]:
        rows = (
            Order.objects.order_by()
            .values("status")
            .annotate(count=Count("id"))
        )
        return {row["status"]: row["count"] for row in rows}

    @staticmethod
    def _base_queryset() -> QuerySet[Order]:
        return Order.objects.select_related("customer").prefetch_related("items")
