"""Settings DRF serializers."""

from __future__ import annotations

from rest_framework import serializers


class StoreSettingsSerializer(serializers.Serializer):
    """Typed view of every store setting; all fields optional on update."""

    ORDER_ACCEPTING_ENABLED = serializers.BooleanField(required=False)
    ORDER_CLOSED_MESSAGE = serializers.CharField(required=False, allow_blank=True)
    WORKING_HOURS_ENABLED = serializers.BooleanField(required=False)
    WORKING_HOURS_START = serializers.CharField(required=False, max_length=8)
    WORKING_HOURS_END = serializers.CharField(required=False, max_length=8)
    MIN_ORDER_AMOUNT = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, min_value=0
    )
    PAYMENT_ON_DELIVERY_ENABLED = serializers.BooleanField(required=False)
    PAYMENT_ON_DELIVERY_METHODS = serializers.CharField(
        required=False, allow_blank=True
    )
    DELIVERY_FEE_FIXED = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, min_value=0
    )
    DELIVERY_FREE_THRESHOLD = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, min_value=0
    )


class PublicStoreSettingsSerializer(serializers.Serializer):
    """Checkout rules the storefront shows before an order is placed."""

    ORDER_ACCEPTING_ENABLED = serializers.BooleanField(read_only=True)
    ORDER_CLOSED_MESSAGE = serializers.CharField(read_only=True)
    WORKING_HOURS_ENABLED = serializers.BooleanField(read_only=True)
    WORKING_HOURS_START = serializers.CharField(read_only=True)
    WORKING_HOURS_END = serializers.CharField(read_only=True)
    MIN_ORDER_AMOUNT = serializers.DecimalField(
        max_digits=10, decimal_places=2, read_only=True
    )
    DELIVERY_FEE_FIXED = serializers.DecimalField(
        max_digits=10, decimal_places=2, read_only=True
    )
    DELIVERY_FREE_THRESHOLD = serializers.DecimalField(
        max_digits=10, decimal_places=2, read_only=True
    )
    PAYMENT_ON_DELIVERY_ENABLED = serializers.BooleanField(read_only=True)
    PAYMENT_ON_DELIVERY_METHODS = serializers.SerializerMethodField()

    def get_PAYMENT_ON_DELIVERY_METHODS(self, obj: dict) -> list[str]:
        raw = obj.get("PAYMENT_ON_DELIVERY_METHODS") or ""
        return [method.strip().upper() for method in raw.split(",") if method.strip()]
