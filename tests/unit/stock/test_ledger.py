"""Unit tests for the append-only stock ledger and admin adjustments."""

from __future__ import annotations

from uuid import uuid4

import pytest
from django.db import IntegrityError, transaction

from modules.catalog.repositories import CatalogDjangoRepository
from modules.stock.constants import REFERENCE_ADMIN, StockMovementType
from modules.stock.exceptions import (
    ImmutableStockMovement,
    StockAdjustmentRejected,
    StockProductNotFound,
)
from modules.stock.models import StockMovement
from modules.stock.services import StockAdjustmentService

pytestmark = pytest.mark.unit


@pytest.fixture()
def movement(ledger, product):
    return ledger.append(
        product_id=product.id,
        type=StockMovementType.ADMIN_ADJUST,
        delta=5,
        before_stock=10,
        after_stock=15,
        reference_type=REFERENCE_ADMIN,
        actor="admin@example.com",
    )


@pytest.fixture()
def adjustments(ledger):
    return StockAdjustmentService(catalog=CatalogDjangoRepository(), ledger=ledger)


class TestAppend:
    def test_append_persists_movement(self, movement, product):
        stored = StockMovement.objects.get(id=movement.id)
        assert stored.product_id == product.id
        assert (stored.before_stock, stored.delta, stored.after_stock) == (10, 5, 15)
        assert stored.reference_id == ""
        assert stored.actor == "admin@example.com"

    def test_unbalanced_movement_rejected(self, ledger, product):
        with pytest.raises(ValueError, match="Unbalanced"):
            ledger.append(
                product_id=product.id,
                type=StockMovementType.ADMIN_ADJUST,
                delta=-2,
                before_stock=10,
                after_stock=9,
            )
        assert not StockMovement.objects.exists()

    def test_balance_enforced_by_database(self, product):
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                StockMovement.objects.create(
                    product=product,
                    type=StockMovementType.ADMIN_ADJUST,
                    delta=1,
                    before_stock=0,
                    after_stock=5,
                )

    def test_reference_id_stored_as_text(self, ledger, product):
        order_id = uuid4()
        movement = ledger.append(
            product_id=product.id,
            type=StockMovementType.ORDER_CREATE,
            delta=-1,
            before_stock=10,
            after_stock=9,
            reference_type="ORDER",
            reference_id=order_id,
        )
        assert movement.reference_id == str(order_id)
        assert list(ledger.list_by_reference("ORDER", order_id)) == [movement]


class TestImmutability:
    def test_instance_cannot_be_updated(self, movement):
        movement.note = "edited"
        with pytest.raises(ImmutableStockMovement):
            movement.save()

    def test_instance_cannot_be_deleted(self, movement):
        with pytest.raises(ImmutableStockMovement):
            movement.delete()

    def test_queryset_cannot_update_or_delete(self, movement):
        with pytest.raises(ImmutableStockMovement):
            StockMovement.objects.filter(id=movement.id).update(delta=9)
        with pytest.raises(ImmutableStockMovement):
            StockMovement.objects.filter(id=movement.id).delete()
        assert StockMovement.objects.get(id=movement.id).delta == 5


class TestQueries:
    def test_list_by_product_newest_first(
        self, ledger, movement, product, make_product
    ):
        other = make_product(name="Other")
        ledger.append(
            product_id=other.id,
            type=StockMovementType.ADMIN_ADJUST,
            delta=1,
            before_stock=10,
            after_stock=11,
        )
        latest = ledger.append(
            product_id=product.id,
            type=StockMovementType.ADMIN_ADJUST,
            delta=-3,
            before_stock=15,
            after_stock=12,
        )
        movements = list(ledger.list_by_product(product.id))
        assert set(movements) == {latest, movement}
        assert movements[0].created_at >= movements[1].created_at

    def test_has_reversal(self, ledger, product):
        order_id = uuid4()
        assert ledger.has_reversal(order_id, product.id) is False
        ledger.append(
            product_id=product.id,
            type=StockMovementType.ORDER_CANCEL,
            delta=2,
            before_stock=8,
            after_stock=10,
            reference_type="ORDER",
            reference_id=order_id,
        )
        assert ledger.has_reversal(order_id, product.id) is True
        assert ledger.has_reversal(uuid4(), product.id) is False


class TestAdjustments:
    def test_positive_adjustment(self, adjustments, product):
        movement = adjustments.adjust(
            product.id, 5, actor="admin@example.com", note="Delivery"
        )

        product.refresh_from_db()
        assert product.stock == 15
        assert movement.type == StockMovementType.ADMIN_ADJUST
        assert (movement.before_stock, movement.after_stock) == (10, 15)
        assert movement.note == "Delivery"

    def test_negative_adjustment(self, adjustments, product):
        movement = adjustments.adjust(product.id, -10)
        product.refresh_from_db()
        assert product.stock == 0
        assert movement.after_stock == 0

    def test_cannot_go_below_zero(self, adjustments, product):
        with pytest.raises(StockAdjustmentRejected):
            adjustments.adjust(product.id, -11)
        product.refresh_from_db()
        assert product.stock == 10
        assert not StockMovement.objects.exists()

    def test_zero_delta_rejected(self, adjustments, product):
        with pytest.raises(StockAdjustmentRejected):
            adjustments.adjust(product.id, 0)

    def test_unknown_product(self, adjustments):
        with pytest.raises(StockProductNotFound):
            adjustments.adjust(uuid4(), 3)
