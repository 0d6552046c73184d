"""Integration tests for ``OrderDjangoRepository`` against the database."""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.orders.constants import OrderStatus
from modules.orders.models import Order
from modules.orders.repositories import OrderDjangoRepository

pytestmark = pytest.mark.integration


@pytest.fixture()
def repo():
    return OrderDjangoRepository()


@pytest.fixture()
def order_data(customer_user, product):
    return {
        "customer_id": customer_user.id,
        "payment_method": "CASH",
        "subtotal_amount": Decimal("20.00"),
        "total_amount": Decimal("20.00"),
        "items": [
            {
                "product_id": product.id,
                "product_name": product.name,
                "quantity": 2,
                "unit_price": product.price,
                "position": 0,
            }
        ],
    }


class TestCreate:
    def test_persists_order_and_items(self, repo, order_data):
        order = repo.create(order_data)

        stored = Order.objects.get(id=order.id)
        assert stored.status == OrderStatus.PENDING
        item = stored.items.get()
        assert item.line_total == Decimal("20.00")
        assert item.product_name == "Simit"

    def test_does_not_mutate_input(self, repo, order_data):
        repo.create(order_data)

        assert "items" in order_data

    def test_uses_given_id(self, repo, order_data):
        order_id = uuid4()

        order = repo.create({**order_data, "id": order_id})

        assert order.id == order_id


class TestRead:
    def test_get_by_id_returns_none_for_unknown_id(self, repo):
        assert repo.get_by_id(str(uuid4())) is None

    def test_get_by_id_returns_none_for_malformed_id(self, repo):
        assert repo.get_by_id("not-a-uuid") is None

    def test_get_for_update_loads_items(self, repo, order_data):
        order = repo.create(order_data)

        locked = repo.get_for_update(str(order.id))

        assert locked.id == order.id
        assert [item.quantity for item in locked.items.all()] == [2]

    def test_get_for_update_returns_none_for_malformed_id(self, repo):
        assert repo.get_for_update("not-a-uuid") is None

    def test_list_for_customer(self, repo, order_data, other_user):
        mine = repo.create(order_data)
        repo.create({**order_data, "customer_id": other_user.id})

        assert [order.id for order in repo.list_for_customer(mine.customer_id)] == [
            mine.id
        ]

    def test_list_applies_filters(self, repo, order_data):
        order = repo.create(order_data)
        repo.update_status(order, OrderStatus.DELIVERED)
        repo.create(order_data)

        delivered = repo.list({"status": OrderStatus.DELIVERED})

        assert [o.id for o in delivered] == [order.id]


class TestUpdateAndCount:
    def test_update_status_saves_and_touches_updated_at(self, repo, order_data):
        order = repo.create(order_data)
        before = order.updated_at

        repo.update_status(order, OrderStatus.CANCELLED)

        stored = Order.objects.get(id=order.id)
        assert stored.status == OrderStatus.CANCELLED
        assert stored.updated_at >= before

    def test_count_by_status(self, repo, order_data):
        first = repo.create(order_data)
        repo.create(order_data)
        repo.update_status(first, OrderStatus.CANCELLED)

        assert repo.count_by_status() == {
            OrderStatus.PENDING: 1,
            OrderStatus.CANCELLED: 1,
        }
