"""Order domain constants.

Status choices, payment methods and the order state machine's transition
table.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    DELIVERED = "DELIVERED", "Delivered"
    CANCELLED = "CANCELLED", "Cancelled"


class PaymentMethod(models.TextChoices):
    CASH = "CASH", "Cash on delivery"
    CARD = "CARD", "Card on delivery"


# (source, target) -> allowed.  Pairs that are absent are rejected.
TRANSITIONS: dict[tuple[str, str], bool] = {
    (OrderStatus.PENDING, OrderStatus.PENDING): True,
    (OrderStatus.PENDING, OrderStatus.DELIVERED): True,
    (OrderStatus.PENDING, OrderStatus.CANCELLED): True,
    (OrderStatus.DELIVERED, OrderStatus.DELIVERED): True,
    (OrderStatus.CANCELLED, OrderStatus.CANCELLED): True,
}

TERMINAL_STATES: set[str] = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}

# Transitions whose side effect is returning every line's stock.
STOCK_REVERSING_TRANSITIONS: set[tuple[str, str]] = {
    (OrderStatus.PENDING, OrderStatus.CANCELLED),
}

ADMIN_ACTOR = "ADMIN"
CUSTOMER_CANCEL_NOTE = "Customer cancelled order"
ADMIN_CANCEL_NOTE = "Admin cancelled order"
