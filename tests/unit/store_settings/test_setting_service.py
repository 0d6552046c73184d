"""Unit tests for ``SettingService``.

Covers typed reads with defaults, validation of writes and the
process-wide cache: a write must be visible to the very next read.
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from django.core.cache.backends.locmem import LocMemCache

from modules.store_settings.constants import SettingKey
from modules.store_settings.exceptions import InvalidSettingValue
from modules.store_settings.models import Setting
from modules.store_settings.repositories import SettingDjangoRepository
from modules.store_settings.services import SettingService

pytestmark = pytest.mark.unit


class TestTypedReads:
    def test_defaults_when_unset(self, settings_service):
        assert settings_service.get_decimal(SettingKey.MIN_ORDER_AMOUNT, Decimal("7")) == 7
        assert settings_service.get_boolean(SettingKey.WORKING_HOURS_ENABLED, True) is True
        assert settings_service.get_string(SettingKey.ORDER_CLOSED_MESSAGE, "x") == "x"

    def test_boolean_is_case_insensitive(self, settings_service):
        Setting.objects.create(key=SettingKey.ORDER_ACCEPTING_ENABLED, value=" TRUE ")
        assert settings_service.get_boolean(SettingKey.ORDER_ACCEPTING_ENABLED, False)

    def test_anything_but_true_is_false(self, settings_service):
        Setting.objects.create(key=SettingKey.ORDER_ACCEPTING_ENABLED, value="yes")
        assert not settings_service.get_boolean(SettingKey.ORDER_ACCEPTING_ENABLED, True)

    def test_malformed_decimal_falls_back_to_default(self, settings_service):
        Setting.objects.create(key=SettingKey.DELIVERY_FEE_FIXED, value="ten")
        assert settings_service.get_decimal(
            SettingKey.DELIVERY_FEE_FIXED, Decimal("5")
        ) == Decimal("5")

    def test_snapshot_lists_every_key(self, settings_service):
        snapshot = settings_service.snapshot()
        assert set(snapshot) == set(SettingKey.values)
        assert snapshot["PAYMENT_ON_DELIVERY_METHODS"] == "CASH,CARD"
        assert snapshot["ORDER_ACCEPTING_ENABLED"] is True


class TestWrites:
    def test_set_decimal_round_trip(self, settings_service):
        settings_service.set_decimal(SettingKey.MIN_ORDER_AMOUNT, Decimal("12.50"))
        assert Setting.objects.get(key=SettingKey.MIN_ORDER_AMOUNT).value == "12.50"

    @pytest.mark.parametrize("value", [None, Decimal("-1"), Decimal("NaN")])
    def test_set_decimal_rejects_invalid(self, settings_service, value):
        with pytest.raises(InvalidSettingValue):
            settings_service.set_decimal(SettingKey.MIN_ORDER_AMOUNT, value)
        assert not Setting.objects.exists()

    def test_time_keys_are_validated(self, settings_service):
        with pytest.raises(InvalidSettingValue, match="HH:MM"):
            settings_service.set_string(SettingKey.WORKING_HOURS_START, "25:00")

    def test_update_many_is_atomic(self, settings_service):
        with pytest.raises(InvalidSettingValue):
            settings_service.update_many(
                {
                    "DELIVERY_FEE_FIXED": Decimal("4"),
                    "WORKING_HOURS_END": "late",
                }
            )
        assert not Setting.objects.exists()

    def test_update_many_rejects_unknown_key(self, settings_service):
        with pytest.raises(InvalidSettingValue, match="Unknown setting"):
            settings_service.update_many({"TAX_RATE": "18"})

    def test_update_many_returns_fresh_snapshot(self, settings_service):
        snapshot = settings_service.update_many(
            {"ORDER_ACCEPTING_ENABLED": False, "DELIVERY_FEE_FIXED": "9.90"}
        )
        assert snapshot["ORDER_ACCEPTING_ENABLED"] is False
        assert snapshot["DELIVERY_FEE_FIXED"] == Decimal("9.90")


class TestCache:
    def test_reads_are_cached(self):
        repository = MagicMock(spec=SettingDjangoRepository)
        repository.get_value.return_value = "15"
        service = SettingService(repository, cache=LocMemCache("unit-cache", {}))

        for _ in range(3):
            assert service.get_decimal(SettingKey.MIN_ORDER_AMOUNT, Decimal("0")) == 15

        repository.get_value.assert_called_once_with("MIN_ORDER_AMOUNT")

    def test_missing_values_are_cached_too(self):
        repository = MagicMock(spec=SettingDjangoRepository)
        repository.get_value.return_value = None
        service = SettingService(repository, cache=LocMemCache("unit-cache-miss", {}))

        service.get_string(SettingKey.ORDER_CLOSED_MESSAGE, "a")
        service.get_string(SettingKey.ORDER_CLOSED_MESSAGE, "b")

        repository.get_value.assert_called_once()

    def test_write_is_visible_to_next_read(self, settings_service):
        assert settings_service.get_boolean(SettingKey.ORDER_ACCEPTING_ENABLED, True)
        settings_service.set_boolean(SettingKey.ORDER_ACCEPTING_ENABLED, False)
        assert not settings_service.get_boolean(SettingKey.ORDER_ACCEPTING_ENABLED, True)

    def test_write_through_another_instance_invalidates(self, settings_service):
        reader = SettingService(repository=SettingDjangoRepository())
        assert reader.get_string(SettingKey.WORKING_HOURS_END, "22:00") == "22:00"

        settings_service.set_string(SettingKey.WORKING_HOURS_END, "23:30")

        assert reader.get_string(SettingKey.WORKING_HOURS_END, "22:00") == "23:30"

    def test_direct_db_change_needs_clear_cache(self, settings_service):
        settings_service.get_string(SettingKey.ORDER_CLOSED_MESSAGE, "default")
        Setting.objects.create(key=SettingKey.ORDER_CLOSED_MESSAGE, value="Closed")

        read = settings_service.get_string
        assert read(SettingKey.ORDER_CLOSED_MESSAGE, "default") == "default"
        settings_service.clear_cache()
        assert read(SettingKey.ORDER_CLOSED_MESSAGE, "default") == "Closed"

    def test_cache_cleared_again_on_commit(
        self, settings_service, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks() as callbacks:
            settings_service.set_boolean(SettingKey.WORKING_HOURS_ENABLED, True)
        assert callbacks == [settings_service.clear_cache]
