"""Stock ledger exceptions."""

from __future__ import annotations

from rest_framework import status

from modules.core.exceptions import BusinessError


class ImmutableStockMovement(Exception):
    """Stock movements are append-only; updating or deleting one is a bug."""


class StockAdjustmentRejected(BusinessError):
    """The adjustment would leave the product with negative stock."""

    code = "stock_adjustment_rejected"
    http_status = status.HTTP_409_CONFLICT


class StockProductNotFound(BusinessError):
    """The product to adjust does not exist."""

    code = "product_not_found"
    http_status = status.HTTP_404_NOT_FOUND
