"""Unit tests for ``CatalogDjangoRepository`` stock counters."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.catalog.repositories import CatalogDjangoRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def catalog():
    return CatalogDjangoRepository()


def _stock(product) -> int:
    product.refresh_from_db()
    return product.stock


class TestLookups:
    def test_find_by_id(self, catalog, product):
        assert catalog.find_by_id(product.id) == product

    @pytest.mark.parametrize("bad_id", ["not-a-uuid", None])
    def test_malformed_id_returns_none(self, catalog, bad_id):
        assert catalog.find_by_id(bad_id) is None

    def test_unknown_id_returns_none(self, catalog):
        assert catalog.find_by_id(uuid4()) is None

    def test_find_by_id_with_category(
        self, catalog, product, category, django_assert_num_queries
    ):
        with django_assert_num_queries(1):
            found = catalog.find_by_id_with_category(product.id)
            assert found.category.name == category.name

    def test_find_all_by_ids_skips_missing(self, catalog, product):
        assert catalog.find_all_by_ids([product.id, uuid4()]) == [product]


class TestDecreaseStockIfAvailable:
    def test_decrements_when_enough_stock(self, catalog, product):
        assert catalog.decrease_stock_if_available(product.id, 4) == 1
        assert _stock(product) == 6

    def test_can_take_the_last_unit(self, catalog, make_product):
        last = make_product(stock=1)
        assert catalog.decrease_stock_if_available(last.id, 1) == 1
        assert _stock(last) == 0

    def test_no_rows_when_not_enough_stock(self, catalog, product):
        assert catalog.decrease_stock_if_available(product.id, 11) == 0
        assert _stock(product) == 10

    def test_no_rows_when_product_inactive(self, catalog, make_product):
        inactive = make_product(is_active=False)
        assert catalog.decrease_stock_if_available(inactive.id, 1) == 0
        assert _stock(inactive) == 10

    def test_second_decrement_loses_the_race(self, catalog, make_product):
        last = make_product(stock=1)
        assert catalog.decrease_stock_if_available(last.id, 1) == 1
        assert catalog.decrease_stock_if_available(last.id, 1) == 0
        assert _stock(last) == 0


class TestIncreaseAndAdjust:
    def test_increase_is_unconditional(self, catalog, make_product):
        inactive = make_product(is_active=False, stock=0)
        assert catalog.increase_stock(inactive.id, 3) == 1
        assert catalog.current_stock(inactive.id) == 3

    def test_apply_negative_delta_guarded(self, catalog, product):
        assert catalog.apply_stock_delta(product.id, -10) == 1
        assert catalog.apply_stock_delta(product.id, -1) == 0
        assert _stock(product) == 0
