"""Settings Provider: typed, cached access to store configuration.

Reads are served from the process-wide ``settings`` cache and fall back to
the repository on a miss.  Every write clears that cache immediately and
again once the surrounding transaction commits, so a read in the same
process after a write always sees the new value.  Other processes may keep
serving their cached value until their entry expires.
"""

from __future__ import annotations

from datetime import time
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Protocol

import structlog
from django.conf import settings as django_settings
from django.core.cache import caches
from django.db import transaction

from modules.store_settings.constants import (
    BOOLEAN_KEYS,
    DECIMAL_KEYS,
    DEFAULT_DELIVERY_FEE_FIXED,
    DEFAULT_DELIVERY_FREE_THRESHOLD,
    DEFAULT_MIN_ORDER_AMOUNT,
    DEFAULT_ORDER_ACCEPTING_ENABLED,
    DEFAULT_ORDER_CLOSED_MESSAGE,
    DEFAULT_PAYMENT_ON_DELIVERY_ENABLED,
    DEFAULT_PAYMENT_ON_DELIVERY_METHODS,
    DEFAULT_WORKING_HOURS_ENABLED,
    DEFAULT_WORKING_HOURS_END,
    DEFAULT_WORKING_HOURS_START,
    SettingKey,
)
from modules.store_settings.exceptions import InvalidSettingValue

if TYPE_CHECKING:
    from django.core.cache.backends.base import BaseCache

    from modules.store_settings.repositories.interfaces import ISettingRepository

logger = structlog.get_logger(__name__)

_CACHE_PREFIX = "setting:"
_MISS = object()

TIME_KEYS = frozenset({SettingKey.WORKING_HOURS_START, SettingKey.WORKING_HOURS_END})

DEFAULTS: Dict[str, Any] = {
    SettingKey.ORDER_ACCEPTING_ENABLED: DEFAULT_ORDER_ACCEPTING_ENABLED,
    SettingKey.ORDER_CLOSED_MESSAGE: DEFAULT_ORDER_CLOSED_MESSAGE,
    SettingKey.WORKING_HOURS_ENABLED: DEFAULT_WORKING_HOURS_ENABLED,
    SettingKey.WORKING_HOURS_START: DEFAULT_WORKING_HOURS_START,
    SettingKey.WORKING_HOURS_END: DEFAULT_WORKING_HOURS_END,
    SettingKey.MIN_ORDER_AMOUNT: DEFAULT_MIN_ORDER_AMOUNT,
    SettingKey.PAYMENT_ON_DELIVERY_ENABLED: DEFAULT_PAYMENT_ON_DELIVERY_ENABLED,
    SettingKey.PAYMENT_ON_DELIVERY_METHODS: DEFAULT_PAYMENT_ON_DELIVERY_METHODS,
    SettingKey.DELIVERY_FEE_FIXED: DEFAULT_DELIVERY_FEE_FIXED,
    SettingKey.DELIVERY_FREE_THRESHOLD: DEFAULT_DELIVERY_FREE_THRESHOLD,
}


class ISettingsProvider(Protocol):
    """Read contract consumed by the order workflow."""

    def get_decimal(self, key: str, default: Decimal) -> Decimal: ...

    def get_boolean(self, key: str, default: bool) -> bool: ...

    def get_string(self, key: str, default: str) -> str: ...


def parse_time(value: str) -> time:
    """Parse an ``HH:MM`` (or ``HH:MM:SS``) setting value."""
    return time.fromisoformat(value.strip())


class SettingService:
    """Application service behind the Settings Provider contract.

    Receives an ``ISettingRepository`` via constructor injection; the cache
    defaults to the ``SETTINGS_CACHE_ALIAS`` backend.
    """

    def __init__(
        self,
        repository: ISettingRepository,
        cache: Optional[BaseCache] = None,
    ) -> None:
        self._repo = repository
        self._cache = cache or caches[django_settings.SETTINGS_CACHE_ALIAS]

    # ------------------------------------------------------------------
    # Typed reads
    # ------------------------------------------------------------------

    def get_decimal(self, key: str, default: Decimal) -> Decimal:
        raw = self._get_raw(key)
        if raw is None:
            return default
        try:
            return Decimal(raw.strip())
        except InvalidOperation:
            logger.warning("settings.invalid_decimal", key=str(key), value=raw)
            return default

    def get_boolean(self, key: str, default: bool) -> bool:
        raw = self._get_raw(key)
        if raw is None:
            return default
        return raw.strip().lower() == "true"

    def get_string(self, key: str, default: str) -> str:
        raw = self._get_raw(key)
        return default if raw is None else raw

    def snapshot(self) -> Dict[str, Any]:
        """Return the effective (typed) value of every known setting."""
        values: Dict[str, Any] = {}
        for key in SettingKey:
            default = DEFAULTS[key]
            if key in DECIMAL_KEYS:
                values[key.value] = self.get_decimal(key, default)
            elif key in BOOLEAN_KEYS:
                values[key.value] = self.get_boolean(key, default)
            else:
                values[key.value] = self.get_string(key, default)
        return values

    # ------------------------------------------------------------------
    # Writes (each one invalidates the cache)
    # ------------------------------------------------------------------

    @transaction.atomic
    def set_decimal(self, key: str, value: Optional[Decimal]) -> None:
        if value is None or not value.is_finite() or value < 0:
            raise InvalidSettingValue(f"Setting {key} must be a number >= 0.")
        self._write(key, format(value, "f"))

    @transaction.atomic
    def set_boolean(self, key: str, value: bool) -> None:
        self._write(key, "true" if value else "false")

    @transaction.atomic
    def set_string(self, key: str, value: Optional[str]) -> None:
        if key in TIME_KEYS:
            try:
                parse_time(value or "")
            except ValueError as exc:
                raise InvalidSettingValue(
                    f"Setting {key} must be a time formatted as HH:MM."
                ) from exc
        self._write(key, value or "")

    @transaction.atomic
    def update_many(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        """Apply several writes atomically and return the new snapshot."""
        for key, value in values.items():
            if key in DECIMAL_KEYS:
                self.set_decimal(key, _to_decimal(key, value))
            elif key in BOOLEAN_KEYS:
                self.set_boolean(key, bool(value))
            elif key in SettingKey.values:
                self.set_string(key, None if value is None else str(value))
            else:
                raise InvalidSettingValue(f"Unknown setting {key}.")
        return self.snapshot()

    def clear_cache(self) -> None:
        self._cache.clear()
        logger.info("settings.cache_cleared")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _get_raw(self, key: str) -> Optional[str]:
        cache_key = f"{_CACHE_PREFIX}{key}"
        cached = self._cache.get(cache_key, _MISS)
        if cached is not _MISS:
            return cached
        raw = self._repo.get_value(str(key))
        self._cache.set(cache_key, raw)
        return raw

    def _write(self, key: str, raw: str) -> None:
        self._repo.set_value(str(key), raw)
        self.clear_cache()
        transaction.on_commit(self.clear_cache)
        logger.info("settings.updated", key=str(key))


def _to_decimal(key: str, value: Any) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidSettingValue(f"Setting {key} must be a number >= 0.") from exc
