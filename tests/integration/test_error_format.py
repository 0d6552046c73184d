"""Integration tests for standardized error responses."""

import pytest

pytestmark = pytest.mark.integration


def _assert_standard(data):
    assert set(data) == {"type", "errors"}
    assert isinstance(data["errors"], list)
    assert data["errors"]
    for error in data["errors"]:
        assert set(error) == {"code", "detail", "attr"}


class TestStandardizedErrors:
    def test_auth_error_has_standard_format(self, api_client):
        response = api_client.get("/api/v1/admin/orders/")
        assert response.status_code == 401
        data = response.json()
        _assert_standard(data)
        assert data["type"] == "client_error"
        assert data["errors"][0]["code"] == "not_authenticated"

    def test_malformed_json_has_standard_format(self, api_client):
        response = api_client.post(
            "/api/v1/orders/", data="{", content_type="application/json"
        )
        assert response.status_code == 400
        _assert_standard(response.json())

    def test_validation_error_names_the_field(self, admin_client):
        response = admin_client.patch(
            "/api/v1/admin/settings/", {"DELIVERY_FEE_FIXED": "abc"}, format="json"
        )
        assert response.status_code == 400
        data = response.json()
        _assert_standard(data)
        assert data["type"] == "validation_error"
        assert data["errors"][0]["attr"] == "DELIVERY_FEE_FIXED"

    def test_nested_item_errors_carry_a_path(self, api_client):
        response = api_client.post(
            "/api/v1/orders/",
            {"items": [{"product_id": "nope", "quantity": 1}]},
            format="json",
        )
        assert response.status_code == 400
        data = response.json()
        _assert_standard(data)
        assert data["errors"][0]["attr"] == "items.0.product_id"

    def test_business_error_has_standard_format(self, api_client):
        response = api_client.post(
            "/api/v1/orders/",
            {"items": [], "payment_method": "CASH"},
            format="json",
        )
        assert response.status_code == 400
        data = response.json()
        _assert_standard(data)
        assert data["type"] == "client_error"
        assert data["errors"][0]["attr"] is None

    def test_not_found_has_standard_format(self, customer_client):
        response = customer_client.post(
            "/api/v1/orders/00000000-0000-0000-0000-000000000000/cancel/"
        )
        assert response.status_code == 404
        _assert_standard(response.json())
