"""Stock ledger constants."""

from django.db import models


class StockMovementType(models.TextChoices):
    ORDER_CREATE = "ORDER_CREATE", "Order created"
    ORDER_CANCEL = "ORDER_CANCEL", "Order cancelled"
    ADMIN_ADJUST = "ADMIN_ADJUST", "Admin adjustment"


REFERENCE_ORDER = "ORDER"
REFERENCE_ADMIN = "ADMIN"
