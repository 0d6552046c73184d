"""Integration tests for the admin settings endpoints."""

from __future__ import annotations

import pytest

from modules.store_settings.models import Setting

pytestmark = pytest.mark.integration

URL = "/api/v1/admin/settings/"


class TestReadSettings:
    def test_defaults_when_nothing_is_stored(self, admin_client):
        response = admin_client.get(URL)

        assert response.status_code == 200
        data = response.json()
        assert data["ORDER_ACCEPTING_ENABLED"] is True
        assert data["WORKING_HOURS_START"] == "09:00"
        assert data["MIN_ORDER_AMOUNT"] == "0.00"
        assert data["PAYMENT_ON_DELIVERY_METHODS"] == "CASH,CARD"

    def test_customer_is_forbidden(self, customer_client):
        response = customer_client.get(URL)

        assert response.status_code == 403

    def test_guest_is_unauthenticated(self, api_client):
        response = api_client.get(URL)

        assert response.status_code == 401


class TestUpdateSettings:
    def test_patch_writes_only_given_keys(self, admin_client):
        response = admin_client.patch(
            URL,
            {"MIN_ORDER_AMOUNT": "75.00", "ORDER_ACCEPTING_ENABLED": False},
            format="json",
        )

        assert response.status_code == 200
        data = response.json()
        assert data["MIN_ORDER_AMOUNT"] == "75.00"
        assert data["ORDER_ACCEPTING_ENABLED"] is False
        assert set(Setting.objects.values_list("key", flat=True)) == {
            "MIN_ORDER_AMOUNT",
            "ORDER_ACCEPTING_ENABLED",
        }

    def test_write_is_visible_to_next_read(self, admin_client):
        admin_client.get(URL)  # warm the cache
        admin_client.patch(URL, {"DELIVERY_FEE_FIXED": "12.50"}, format="json")

        response = admin_client.get(URL)

        assert response.json()["DELIVERY_FEE_FIXED"] == "12.50"

    def test_invalid_time_is_rejected(self, admin_client):
        response = admin_client.patch(
            URL, {"WORKING_HOURS_START": "nine"}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "invalid_setting_value"
        assert not Setting.objects.exists()

    def test_negative_amount_is_a_validation_error(self, admin_client):
        response = admin_client.patch(
            URL, {"MIN_ORDER_AMOUNT": "-1"}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["attr"] == "MIN_ORDER_AMOUNT"

    def test_new_minimum_applies_to_the_next_order(
        self, admin_client, api_client, product, guest_fields
    ):
        admin_client.patch(URL, {"MIN_ORDER_AMOUNT": "500"}, format="json")

        response = api_client.post(
            "/api/v1/orders/",
            {
                "items": [{"product_id": str(product.id), "quantity": 1}],
                "payment_method": "CASH",
                **guest_fields,
            },
            format="json",
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "below_minimum_order"


class TestClearCache:
    def test_clear_cache(self, admin_client):
        response = admin_client.post(f"{URL}clear-cache/")

        assert response.status_code == 200
        assert response.json() == {"detail": "Settings cache cleared."}


class TestPublicSettings:
    def test_guest_can_read_checkout_rules(self, api_client):
        response = api_client.get("/api/v1/settings/")

        assert response.status_code == 200
        data = response.json()
        assert data["DELIVERY_FEE_FIXED"] == "0.00"
        assert data["MIN_ORDER_AMOUNT"] == "0.00"
        assert data["PAYMENT_ON_DELIVERY_METHODS"] == ["CASH", "CARD"]
        assert data["ORDER_ACCEPTING_ENABLED"] is True

    def test_reflects_admin_changes(self, admin_client, api_client):
        admin_client.patch(
            URL,
            {
                "DELIVERY_FEE_FIXED": "15",
                "DELIVERY_FREE_THRESHOLD": "200",
                "PAYMENT_ON_DELIVERY_METHODS": " cash , ,card",
            },
            format="json",
        )

        data = api_client.get("/api/v1/settings/").json()

        assert data["DELIVERY_FEE_FIXED"] == "15.00"
        assert data["DELIVERY_FREE_THRESHOLD"] == "200.00"
        assert data["PAYMENT_ON_DELIVERY_METHODS"] == ["CASH", "CARD"]

    def test_is_read_only(self, api_client):
        response = api_client.patch(
            "/api/v1/settings/", {"MIN_ORDER_AMOUNT": "1"}, format="json"
        )

        assert response.status_code == 405
        assert not Setting.objects.exists()
