"""Stock Ledger service.

``append`` records a movement inside the caller's transaction; it does not
open one of its own, so a movement is committed or rolled back together
with the stock change it describes.

Business rules enforced here:
- ``before_stock + delta == after_stock`` is checked before writing.
- A cancelled order is reversed at most once per product
  (``has_reversal``).
- Admin adjustments never take stock below zero.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

import structlog
from django.db import transaction

from modules.stock.constants import REFERENCE_ADMIN, REFERENCE_ORDER, StockMovementType
from modules.stock.exceptions import StockAdjustmentRejected, StockProductNotFound

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.catalog.repositories.interfaces import ICatalogRepository
    from modules.stock.models import StockMovement
    from modules.stock.repositories.interfaces import IStockMovementRepository

logger = structlog.get_logger(__name__)


class StockLedgerService:
    """Application service for the append-only stock ledger."""

    def __init__(self, repository: IStockMovementRepository) -> None:
        self._repo = repository

    def append(
        self,
        product_id: Any,
        type: StockMovementType,
        delta: int,
        before_stock: int,
        after_stock: int,
        reference_type: str = "",
        reference_id: Optional[Any] = None,
        note: Optional[str] = None,
        actor: Optional[str] = None,
    ) -> StockMovement:
        if before_stock + delta != after_stock:
            raise ValueError(
                f"Unbalanced stock movement: {before_stock} {delta:+d} != {after_stock}"
            )
        movement = self._repo.append(
            {
                "product_id": product_id,
                "type": type,
                "delta": delta,
                "before_stock": before_stock,
                "after_stock": after_stock,
                "reference_type": reference_type or "",
                "reference_id": "" if reference_id is None else str(reference_id),
                "note": note or "",
                "actor": actor or "",
            }
        )
        logger.info(
            "stock.movement_logged",
            product_id=str(product_id),
            movement_type=str(type),
            delta=delta,
            before_stock=before_stock,
            after_stock=after_stock,
            reference_id=movement.reference_id,
        )
        return movement

    def list_by_product(self, product_id: Any) -> QuerySet[StockMovement]:
        """Movements of one product, newest first."""
        return self._repo.list({"product_id": product_id})

    def list_by_reference(self, reference_type: str, reference_id: Any) -> QuerySet:
        return self._repo.list(
            {"reference_type": reference_type, "reference_id": str(reference_id)}
        )

    def has_reversal(self, order_id: Any, product_id: Any) -> bool:
        """``True`` if stock of *product_id* was already returned for *order_id*."""
        return self._repo.exists(
            type=StockMovementType.ORDER_CANCEL,
            reference_type=REFERENCE_ORDER,
            reference_id=str(order_id),
            product_id=product_id,
        )


class StockAdjustmentService:
    """Admin stock corrections, logged as ``ADMIN_ADJUST`` movements."""

    def __init__(
        self,
        catalog: ICatalogRepository,
        ledger: StockLedgerService,
    ) -> None:
        self._catalog = catalog
        self._ledger = ledger

    @transaction.atomic
    def adjust(
        self,
        product_id: Any,
        delta: int,
        actor: str = "",
        note: str = "",
    ) -> StockMovement:
        """Apply a signed correction to a product's stock.

        Raises:
            StockProductNotFound: the product does not exist.
            StockAdjustmentRejected: *delta* is zero or would make stock negative.
        """
        log = logger.bind(product_id=str(product_id), delta=delta)
        if delta == 0:
            raise StockAdjustmentRejected("Adjustment delta must not be zero.")
        if self._catalog.find_by_id(product_id) is None:
            raise StockProductNotFound(f"Product {product_id} not found.")

        if self._catalog.apply_stock_delta(product_id, delta) == 0:
            log.warning("stock.adjust_rejected")
            raise StockAdjustmentRejected(
                f"Adjusting product {product_id} by {delta} would make stock negative."
            )

        after = self._catalog.current_stock(product_id)
        movement = self._ledger.append(
            product_id=product_id,
            type=StockMovementType.ADMIN_ADJUST,
            delta=delta,
            before_stock=after - delta,
            after_stock=after,
            reference_type=REFERENCE_ADMIN,
            note=note,
            actor=actor,
        )
        log.info("stock.adjusted", after_stock=after)
        return movement
