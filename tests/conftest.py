from decimal import Decimal

import pytest
from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.cache import caches
from rest_framework.test import APIClient

from modules.catalog.models import Category, Product
from modules.catalog.repositories import CatalogDjangoRepository
from modules.core.identity import principal_from_user
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.repositories import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.stock.repositories import StockMovementDjangoRepository
from modules.stock.services import StockLedgerService
from modules.store_settings.repositories import SettingDjangoRepository
from modules.store_settings.services import SettingService

User = get_user_model()


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """The settings cache is process-wide; start every test from a cold one."""
    caches[settings.SETTINGS_CACHE_ALIAS].clear()
    yield
    caches[settings.SETTINGS_CACHE_ALIAS].clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Users and identities
# ---------------------------------------------------------------------------


@pytest.fixture()
def customer_user():
    return User.objects.create_user(
        username="ayse",
        email="ayse@example.com",
        password="testpass123",
        first_name="Ayse",
        last_name="Demir",
    )


@pytest.fixture()
def other_user():
    return User.objects.create_user(
        username="mehmet", email="mehmet@example.com", password="testpass123"
    )


@pytest.fixture()
def admin_user():
    return User.objects.create_user(
        username="admin",
        email="admin@example.com",
        password="testpass123",
        is_staff=True,
    )


@pytest.fixture()
def customer(customer_user):
    """``Principal`` of ``customer_user``."""
    return principal_from_user(customer_user)


@pytest.fixture()
def customer_client(customer_user):
    client = APIClient()
    client.force_authenticate(user=customer_user)
    return client


@pytest.fixture()
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@pytest.fixture()
def category():
    return Category.objects.create(name="Bakery", is_active=True)


@pytest.fixture()
def make_product(category):
    def _make(name="Simit", price="10.00", stock=10, is_active=True, category=category):
        return Product.objects.create(
            name=name,
            price=Decimal(price),
            stock=stock,
            is_active=is_active,
            category=category,
        )

    return _make


@pytest.fixture()
def product(make_product):
    return make_product()


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


@pytest.fixture()
def settings_service():
    return SettingService(repository=SettingDjangoRepository())


@pytest.fixture()
def ledger():
    return StockLedgerService(repository=StockMovementDjangoRepository())


@pytest.fixture()
def order_service(settings_service, ledger):
    return OrderService(
        order_repository=OrderDjangoRepository(),
        catalog=CatalogDjangoRepository(),
        ledger=ledger,
        settings_provider=settings_service,
    )


@pytest.fixture()
def make_order_dto():
    """Build a ``CreateOrderDTO`` from ``(product, quantity)`` pairs."""

    def _make(*lines, payment_method="CASH", **guest):
        return CreateOrderDTO(
            items=[
                CreateOrderItemDTO(product_id=product.id, quantity=quantity)
                for product, quantity in lines
            ],
            payment_method=payment_method,
            delivery_address="Moda Cd. 12, Kadikoy",
            **guest,
        )

    return _make


@pytest.fixture()
def guest_fields():
    return {
        "guest_name": "Guest Buyer",
        "guest_email": "guest@example.com",
        "contact_phone": "+90 555 000 0000",
    }
