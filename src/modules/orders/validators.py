"""Order Validator.

Checks a creation request against the store rules before any stock is
touched.  Checks run in a fixed order and stop at the first failure:

1. guest contact fields (only when there is no authenticated identity);
2. item lines;
3. order accepting switch;
4. working hours;
5. payment method.
"""

from __future__ import annotations

from datetime import datetime, time
from typing import TYPE_CHECKING, Callable, Optional

import structlog
from django.utils import timezone

from modules.orders.constants import PaymentMethod
from modules.orders.exceptions import (
    InvalidOrderRequest,
    PaymentMethodRejected,
    StoreClosed,
)
from modules.store_settings.constants import (
    DEFAULT_ORDER_ACCEPTING_ENABLED,
    DEFAULT_ORDER_CLOSED_MESSAGE,
    DEFAULT_PAYMENT_ON_DELIVERY_ENABLED,
    DEFAULT_PAYMENT_ON_DELIVERY_METHODS,
    DEFAULT_WORKING_HOURS_ENABLED,
    DEFAULT_WORKING_HOURS_END,
    DEFAULT_WORKING_HOURS_START,
    SettingKey,
)
from modules.store_settings.services import parse_time

if TYPE_CHECKING:
    from modules.core.identity import Identity
    from modules.orders.dtos import CreateOrderDTO
    from modules.store_settings.services import ISettingsProvider

logger = structlog.get_logger(__name__)


def is_within_working_hours(now: time, start: time, end: time) -> bool:
    """``True`` when *now* falls in ``[start, end)``.

    ``start == end`` means open all day; ``start > end`` wraps past midnight.
    """
    if start == end:
        return True
    if start < end:
        return start <= now < end
    return now >= start or now < end


def parse_method_list(raw: str) -> set[str]:
    return {part.strip().upper() for part in raw.split(",") if part.strip()}


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class OrderValidator:
    """Read-only validation of order creation requests.

    *clock* returns the store's local time; it defaults to
    ``django.utils.timezone.localtime``.
    """

    def __init__(
        self,
        settings_provider: ISettingsProvider,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._settings = settings_provider
        self._clock = clock or timezone.localtime

    def validate(self, dto: CreateOrderDTO, identity: Identity) -> None:
        """Raise the business error of the first failed rule, if any."""
        if identity is None:
            self._check_guest(dto)
        self._check_items(dto)
        self._check_accepting()
        self._check_working_hours()
        self._check_payment_method(dto.payment_method)

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def _check_guest(self, dto: CreateOrderDTO) -> None:
        if _blank(dto.guest_name):
            raise InvalidOrderRequest("Guest name is required.")
        if _blank(dto.guest_email):
            raise InvalidOrderRequest("Guest email is required.")
        if _blank(dto.contact_phone):
            raise InvalidOrderRequest("Contact phone is required.")

    def _check_items(self, dto: CreateOrderDTO) -> None:
        if not dto.items:
            raise InvalidOrderRequest("Order must have at least one item.")
        for position, item in enumerate(dto.items, start=1):
            if item.product_id is None:
                raise InvalidOrderRequest(f"Item {position}: product id is required.")
            if item.quantity is None or item.quantity < 1:
                raise InvalidOrderRequest(
                    f"Item {position}: quantity must be at least 1."
                )

    def _check_accepting(self) -> None:
        accepting = self._settings.get_boolean(
            SettingKey.ORDER_ACCEPTING_ENABLED, DEFAULT_ORDER_ACCEPTING_ENABLED
        )
        if not accepting:
            raise StoreClosed(self._closed_message())

    def _check_working_hours(self) -> None:
        enabled = self._settings.get_boolean(
            SettingKey.WORKING_HOURS_ENABLED, DEFAULT_WORKING_HOURS_ENABLED
        )
        if not enabled:
            return
        start_raw = self._settings.get_string(
            SettingKey.WORKING_HOURS_START, DEFAULT_WORKING_HOURS_START
        )
        end_raw = self._settings.get_string(
            SettingKey.WORKING_HOURS_END, DEFAULT_WORKING_HOURS_END
        )
        try:
            start, end = parse_time(start_raw), parse_time(end_raw)
        except ValueError:
            logger.warning(
                "order.working_hours_unparseable", start=start_raw, end=end_raw
            )
            raise StoreClosed(self._closed_message()) from None

        now = self._clock().time().replace(tzinfo=None)
        if not is_within_working_hours(now, start, end):
            raise StoreClosed(self._closed_message())

    def _check_payment_method(self, method: Optional[str]) -> None:
        if _blank(method):
            raise PaymentMethodRejected("Payment method is required.")
        enabled = self._settings.get_boolean(
            SettingKey.PAYMENT_ON_DELIVERY_ENABLED,
            DEFAULT_PAYMENT_ON_DELIVERY_ENABLED,
        )
        if not enabled:
            raise PaymentMethodRejected("Payment on delivery is disabled.")

        normalized = method.strip().upper()
        allowed = parse_method_list(
            self._settings.get_string(
                SettingKey.PAYMENT_ON_DELIVERY_METHODS,
                DEFAULT_PAYMENT_ON_DELIVERY_METHODS,
            )
        )
        if normalized not in PaymentMethod.values or normalized not in allowed:
            raise PaymentMethodRejected(
                f"Payment method {method.strip()} is not accepted."
            )

    def _closed_message(self) -> str:
        return self._settings.get_string(
            SettingKey.ORDER_CLOSED_MESSAGE, DEFAULT_ORDER_CLOSED_MESSAGE
        )
