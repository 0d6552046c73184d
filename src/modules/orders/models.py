"""Order and OrderItem models.

Rules:
- An order belongs either to a registered user or to a guest, never both
  (database check constraint; ``Order.orderer`` exposes the variant).
- ``total_amount == subtotal_amount + delivery_fee`` and
  ``subtotal_amount == sum(item.line_total)``; amounts are computed by the
  service layer and stored already rounded.
- OrderItem snapshots product name and price at creation time.
- Orders are never physically deleted by the application.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import OrderStatus, PaymentMethod
from modules.orders.dtos import GuestOrderer, RegisteredOrderer


def _money(**kwargs: Any) -> models.DecimalField:
    return models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0"))],
        **kwargs,
    )


class Order(BaseModel):
    """Order aggregate root.

    ``customer`` is set for registered users; ``guest_name`` and
    ``guest_email`` are set for guest orders.  ``contact_phone`` is kept for
    both.
    """

    customer: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders",
        null=True,
        blank=True,
    )
    guest_name: models.CharField = models.CharField(max_length=150, blank=True, default="")
    guest_email: models.EmailField = models.EmailField(blank=True, default="")
    contact_phone: models.CharField = models.CharField(max_length=32, blank=True, default="")
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    payment_method: models.CharField = models.CharField(
        max_length=10,
        choices=PaymentMethod.choices,
    )
    subtotal_amount: models.DecimalField = _money()
    delivery_fee: models.DecimalField = _money()
    total_amount: models.DecimalField = _money()
    delivery_address: models.TextField = models.TextField(blank=True, default="")
    note: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "orders"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(customer__isnull=False, guest_name="", guest_email="")
                    | (models.Q(customer__isnull=True) & ~models.Q(guest_email=""))
                ),
                name="orders_single_orderer",
            ),
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=0)
                & models.Q(subtotal_amount__gte=0)
                & models.Q(delivery_fee__gte=0),
                name="orders_amounts_non_negative",
            ),
        ]

    @property
    def orderer(self) -> RegisteredOrderer | GuestOrderer:
        if self.customer_id is not None:
            return RegisteredOrderer(user_id=self.customer_id)
        return GuestOrderer(
            name=self.guest_name,
            email=self.guest_email,
            phone=self.contact_phone,
        )

    def is_owned_by(self, user_id: Any) -> bool:
        return user_id is not None and self.customer_id == user_id

    def __str__(self) -> str:
        return f"Order {self.id} ({self.status})"


class OrderItem(BaseModel):
    """Line of an order.

    ``unit_price`` and ``product_name`` are snapshots; they never follow
    later catalog changes.  ``line_total`` is ``unit_price * quantity``.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product: models.ForeignKey = models.ForeignKey(
        "catalog.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    product_name: models.CharField = models.CharField(max_length=255)
    quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
    )
    unit_price: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
    )
    line_total: models.DecimalField = models.DecimalField(
        max_digits=12,
        decimal_places=2,
    )
    position: models.PositiveSmallIntegerField = models.PositiveSmallIntegerField(
        default=0
    )

    class Meta:
        db_table = "order_items"
        ordering = ["position"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    def save(self, *args: Any, **kwargs: Any) -> None:
        self.line_total = self.unit_price * self.quantity
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.product_name} x{self.quantity} ({self.line_total})"
