"""Pricing Calculator.

Sums order lines with exact decimal arithmetic and applies the store's
minimum-order and delivery-fee rules.  Money is rounded (half-up, two
places) only when a value leaves the calculator.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Iterable, Tuple

from modules.orders.exceptions import BelowMinimumOrder
from modules.store_settings.constants import (
    DEFAULT_DELIVERY_FEE_FIXED,
    DEFAULT_DELIVERY_FREE_THRESHOLD,
    DEFAULT_MIN_ORDER_AMOUNT,
    SettingKey,
)

if TYPE_CHECKING:
    from modules.store_settings.services import ISettingsProvider

CENT = Decimal("0.01")
ZERO = Decimal("0")


def quantize_money(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Quote:
    subtotal: Decimal
    delivery_fee: Decimal
    total: Decimal


class PricingCalculator:
    def __init__(self, settings: ISettingsProvider) -> None:
        self._settings = settings

    def subtotal(self, lines: Iterable[Tuple[Decimal, int]]) -> Decimal:
        """Exact sum of ``unit_price * quantity`` over ``(unit_price, quantity)``."""
        return sum((price * quantity for price, quantity in lines), ZERO)

    def delivery_fee(self, subtotal: Decimal) -> Decimal:
        threshold = self._settings.get_decimal(
            SettingKey.DELIVERY_FREE_THRESHOLD, DEFAULT_DELIVERY_FREE_THRESHOLD
        )
        if subtotal >= threshold:
            return ZERO
        return self._settings.get_decimal(
            SettingKey.DELIVERY_FEE_FIXED, DEFAULT_DELIVERY_FEE_FIXED
        )

    def check_minimum(self, subtotal: Decimal) -> None:
        minimum = self._settings.get_decimal(
            SettingKey.MIN_ORDER_AMOUNT, DEFAULT_MIN_ORDER_AMOUNT
        )
        if minimum > 0 and subtotal < minimum:
            raise BelowMinimumOrder(
                f"Minimum order amount is {quantize_money(minimum)}; "
                f"order subtotal is {quantize_money(subtotal)}."
            )

    def quote(self, lines: Iterable[Tuple[Decimal, int]]) -> Quote:
        """Price an order.

        Raises:
            BelowMinimumOrder: a positive minimum is configured and the
                subtotal does not reach it.
        """
        subtotal = self.subtotal(lines)
        self.check_minimum(subtotal)
        subtotal = quantize_money(subtotal)
        fee = quantize_money(self.delivery_fee(subtotal))
        return Quote(subtotal=subtotal, delivery_fee=fee, total=subtotal + fee)
