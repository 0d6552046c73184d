"""Django ORM implementation of the stock movement repository."""

from __future__ import annotations

from typing import Any, Dict, Optional

from django.core.exceptions import ValidationError

from modules.stock.models import StockMovement, StockMovementQuerySet
from modules.stock.repositories.interfaces import IStockMovementRepository


class StockMovementDjangoRepository(IStockMovementRepository):
    def append(self, data: Dict[str, Any]) -> StockMovement:
        return StockMovement.objects.create(**data)

    def get_by_id(self, id: str) -> Optional[StockMovement]:
        try:
            return StockMovement.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> StockMovementQuerySet:
        queryset = StockMovement.objects.select_related("product")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def exists(self, **lookups: Any) -> bool:
        return StockMovement.objects.filter(**lookups).exists()
