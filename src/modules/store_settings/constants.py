"""Store setting keys and their defaults.

Values are persisted as text; typed access goes through ``SettingService``.
"""

from decimal import Decimal

from django.db import models


class SettingKey(models.TextChoices):
    ORDER_ACCEPTING_ENABLED = "ORDER_ACCEPTING_ENABLED", "Order accepting enabled"
    ORDER_CLOSED_MESSAGE = "ORDER_CLOSED_MESSAGE", "Order closed message"
    WORKING_HOURS_ENABLED = "WORKING_HOURS_ENABLED", "Working hours enabled"
    WORKING_HOURS_START = "WORKING_HOURS_START", "Working hours start"
    WORKING_HOURS_END = "WORKING_HOURS_END", "Working hours end"
    MIN_ORDER_AMOUNT = "MIN_ORDER_AMOUNT", "Minimum order amount"
    PAYMENT_ON_DELIVERY_ENABLED = (
        "PAYMENT_ON_DELIVERY_ENABLED",
        "Payment on delivery enabled",
    )
    PAYMENT_ON_DELIVERY_METHODS = (
        "PAYMENT_ON_DELIVERY_METHODS",
        "Payment on delivery methods",
    )
    DELIVERY_FEE_FIXED = "DELIVERY_FEE_FIXED", "Fixed delivery fee"
    DELIVERY_FREE_THRESHOLD = "DELIVERY_FREE_THRESHOLD", "Free delivery threshold"


DEFAULT_ORDER_ACCEPTING_ENABLED = True
DEFAULT_ORDER_CLOSED_MESSAGE = "We are not accepting orders right now."
DEFAULT_WORKING_HOURS_ENABLED = False
DEFAULT_WORKING_HOURS_START = "09:00"
DEFAULT_WORKING_HOURS_END = "22:00"
DEFAULT_MIN_ORDER_AMOUNT = Decimal("0")
DEFAULT_PAYMENT_ON_DELIVERY_ENABLED = True
DEFAULT_PAYMENT_ON_DELIVERY_METHODS = "CASH,CARD"
DEFAULT_DELIVERY_FEE_FIXED = Decimal("0")
DEFAULT_DELIVERY_FREE_THRESHOLD = Decimal("0")

DECIMAL_KEYS = frozenset(
    {
        SettingKey.MIN_ORDER_AMOUNT,
        SettingKey.DELIVERY_FEE_FIXED,
        SettingKey.DELIVERY_FREE_THRESHOLD,
    }
)
BOOLEAN_KEYS = frozenset(
    {
        SettingKey.ORDER_ACCEPTING_ENABLED,
        SettingKey.WORKING_HOURS_ENABLED,
        SettingKey.PAYMENT_ON_DELIVERY_ENABLED,
    }
)
