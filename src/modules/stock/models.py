"""Append-only stock ledger.

Each ``StockMovement`` records one change of a product's stock counter:
what changed (``delta``), the counter before and after, why (``type`` and
the reference it belongs to) and who did it (``actor``).

Rules:
- ``before_stock + delta == after_stock`` (database check constraint).
- ``delta`` is never zero.
- Rows are never updated or deleted once written.
"""

from __future__ import annotations

from typing import Any

from django.db import models
from django.db.models import F

from modules.core.models import BaseModel
from modules.stock.constants import StockMovementType
from modules.stock.exceptions import ImmutableStockMovement


class StockMovementQuerySet(models.QuerySet):
    def update(self, **kwargs: Any) -> int:
        raise ImmutableStockMovement("Stock movements cannot be updated.")

    def delete(self) -> Any:
        raise ImmutableStockMovement("Stock movements cannot be deleted.")


class StockMovement(BaseModel):
    product = models.ForeignKey(
        "catalog.Product",
        on_delete=models.PROTECT,
        related_name="stock_movements",
    )
    type = models.CharField(max_length=20, choices=StockMovementType.choices)
    delta = models.IntegerField()
    before_stock = models.IntegerField()
    after_stock = models.IntegerField()
    reference_type = models.CharField(max_length=32, blank=True, default="")
    reference_id = models.CharField(max_length=64, blank=True, default="")
    note = models.CharField(max_length=255, blank=True, default="")
    actor = models.CharField(max_length=255, blank=True, default="")

    objects = StockMovementQuerySet.as_manager()

    class Meta:
        db_table = "stock_movements"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["product", "-created_at"], name="stock_mv_product_idx"),
            models.Index(
                fields=["reference_type", "reference_id"],
                name="stock_mv_reference_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(before_stock=F("after_stock") - F("delta")),
                name="stock_mv_balance",
            ),
            models.CheckConstraint(
                condition=~models.Q(delta=0),
                name="stock_mv_delta_non_zero",
            ),
        ]

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self._state.adding:
            raise ImmutableStockMovement("Stock movements cannot be updated.")
        super().save(*args, **kwargs)

    def delete(self, *args: Any, **kwargs: Any) -> Any:
        raise ImmutableStockMovement("Stock movements cannot be deleted.")

    def __str__(self) -> str:
        return f"{self.type} {self.delta:+d} ({self.before_stock}->{self.after_stock})"
