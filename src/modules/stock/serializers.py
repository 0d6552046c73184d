"""Stock ledger DRF serializers."""

from __future__ import annotations

from rest_framework import serializers

from modules.stock.models import StockMovement


class StockMovementSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source="product.name", read_only=True)

    class Meta:
        model = StockMovement
        fields = [
            "id",
            "product_id",
            "product_name",
            "type",
            "delta",
            "before_stock",
            "after_stock",
            "reference_type",
            "reference_id",
            "note",
            "actor",
            "created_at",
        ]
        read_only_fields = fields


class StockAdjustmentSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    delta = serializers.IntegerField()
    note = serializers.CharField(required=False, default="", allow_blank=True)

    def validate_delta(self, value: int) -> int:
        if value == 0:
            raise serializers.ValidationError("Delta must not be zero.")
        return value
