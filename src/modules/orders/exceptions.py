"""Order domain exceptions.

Raised by the service layer when business rules are violated.  Each one
carries a machine-readable ``code`` and the HTTP status the API layer
answers with; none of them is retried by the service.
"""

from __future__ import annotations

from typing import Any

from rest_framework import status

from modules.core.exceptions import BusinessError


class InvalidOrderRequest(BusinessError):
    """Required guest or item fields are missing or malformed."""

    code = "invalid_order_request"


class StoreClosed(BusinessError):
    """The store is not accepting orders or is outside working hours."""

    code = "store_closed"


class PaymentMethodRejected(BusinessError):
    """Payment method missing, disabled or not allow-listed."""

    code = "payment_method_rejected"


class BelowMinimumOrder(BusinessError):
    """The order subtotal is below the configured minimum amount."""

    code = "below_minimum_order"


class ProductError(BusinessError):
    """A business error tied to one product of the order."""

    def __init__(self, product_id: Any, message: str = "") -> None:
        self.product_id = product_id
        super().__init__(message)


class ProductNotFound(ProductError):
    """A product referenced by an order line does not exist."""

    code = "product_not_found"
    http_status = status.HTTP_404_NOT_FOUND

    def __init__(self, product_id: Any) -> None:
        super().__init__(product_id, f"Product not found: {product_id}")


class ProductInactive(ProductError):
    """A product referenced by an order line is inactive."""

    code = "product_inactive"

    def __init__(self, product_id: Any) -> None:
        super().__init__(product_id, f"Product is inactive: {product_id}")


class CategoryInactive(ProductError):
    """The category of a product in the order is inactive."""

    code = "category_inactive"

    def __init__(self, product_id: Any, category_id: Any) -> None:
        self.category_id = category_id
        super().__init__(
            product_id,
            f"Category {category_id} of product {product_id} is inactive.",
        )


class InsufficientStock(ProductError):
    """Not enough stock left (or the product went inactive) for a line."""

    code = "insufficient_stock"
    http_status = status.HTTP_409_CONFLICT

    def __init__(self, product_id: Any) -> None:
        super().__init__(product_id, f"Insufficient stock for product: {product_id}")


class InvalidTransition(BusinessError):
    """The requested status change is not allowed from the current status."""

    code = "invalid_transition"

    def __init__(self, source: str, target: str) -> None:
        self.source = source
        self.target = target
        super().__init__(f"Invalid status transition: {source} -> {target}")


class Unauthorized(BusinessError):
    """The caller is not allowed to act on this order."""

    code = "unauthorized"
    http_status = status.HTTP_403_FORBIDDEN


class OrderNotFound(BusinessError):
    """The requested order does not exist."""

    code = "order_not_found"
    http_status = status.HTTP_404_NOT_FOUND
