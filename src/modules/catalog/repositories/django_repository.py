"""Django ORM implementation of the Catalog repository.

Stock counters are changed with ``QuerySet.update(stock=F(...))``, which
compiles to a single ``UPDATE ... WHERE`` statement: the guard and the write
happen in one step inside the database, so two transactions racing for the
last unit cannot both succeed.  The updated row stays locked by the
current transaction until it ends, which makes ``current_stock`` right
after an update return exactly the value that update produced.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db.models import F
from django.utils import timezone

from modules.catalog.models import Product
from modules.catalog.repositories.interfaces import ICatalogRepository

logger = structlog.get_logger(__name__)


class CatalogDjangoRepository(ICatalogRepository):
    """Concrete Catalog repository backed by Django ORM."""

    def find_by_id(self, id: Any) -> Optional[Product]:
        """Returns ``None`` for non-existent or malformed IDs."""
        try:
            return Product.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def find_by_id_with_category(self, id: Any) -> Optional[Product]:
        try:
            return Product.objects.select_related("category").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def find_all_by_ids(self, ids: Iterable[Any]) -> List[Product]:
        try:
            return list(Product.objects.filter(id__in=list(ids)))
        except (ValueError, ValidationError):
            return []

    def decrease_stock_if_available(self, id: Any, quantity: int) -> int:
        affected = Product.objects.filter(
            id=id,
            is_active=True,
            stock__gte=quantity,
        ).update(stock=F("stock") - quantity, updated_at=timezone.now())
        logger.debug(
            "catalog.stock_decrease",
            product_id=str(id),
            quantity=quantity,
            affected=affected,
        )
        return affected

    def increase_stock(self, id: Any, quantity: int) -> int:
        affected = Product.objects.filter(id=id).update(
            stock=F("stock") + quantity, updated_at=timezone.now()
        )
        logger.debug(
            "catalog.stock_increase",
            product_id=str(id),
            quantity=quantity,
            affected=affected,
        )
        return affected

    def apply_stock_delta(self, id: Any, delta: int) -> int:
        """Add a signed *delta* unless the result would be negative."""
        affected = Product.objects.filter(id=id, stock__gte=-delta).update(
            stock=F("stock") + delta, updated_at=timezone.now()
        )
        logger.debug(
            "catalog.stock_adjust",
            product_id=str(id),
            delta=delta,
            affected=affected,
        )
        return affected

    def current_stock(self, id: Any) -> int:
        return Product.objects.values_list("stock", flat=True).get(id=id)
