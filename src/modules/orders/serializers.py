"""Order DRF serializers for API input/output.

Input serializers only check the payload's shape; business rules (guest
fields, item lines, payment method) are reported by the Service Layer,
which receives Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateOrderItemSerializer(serializers.Serializer):
    product_id = serializers.UUIDField(required=False, allow_null=True)
    quantity = serializers.IntegerField(required=False, allow_null=True)


class CreateOrderSerializer(serializers.Serializer):
    """Validates the order creation request payload."""

    items = CreateOrderItemSerializer(many=True, required=False)
    payment_method = serializers.CharField(
        required=False, allow_blank=True, allow_null=True
    )
    guest_name = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=150
    )
    guest_email = serializers.EmailField(
        required=False, allow_blank=True, allow_null=True
    )
    contact_phone = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=32
    )
    delivery_address = serializers.CharField(
        required=False, allow_blank=True, default=""
    )
    note = serializers.CharField(required=False, allow_blank=True, default="")


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    """Read serializer for order items with product snapshot."""

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product_id",
            "product_name",
            "quantity",
            "unit_price",
            "line_total",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with nested items."""

    items = OrderItemSerializer(many=True, read_only=True)
    orderer = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "orderer",
            "contact_phone",
            "status",
            "payment_method",
            "subtotal_amount",
            "delivery_fee",
            "total_amount",
            "delivery_address",
            "note",
            "created_at",
            "updated_at",
            "items",
        ]
        read_only_fields = fields

    def get_orderer(self, obj: Order) -> dict:
        return obj.orderer.model_dump(mode="json")


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order lists (no nested relations)."""

    class Meta:
        model = Order
        fields = [
            "id",
            "customer_id",
            "guest_name",
            "status",
            "payment_method",
            "total_amount",
            "created_at",
        ]
        read_only_fields = fields
