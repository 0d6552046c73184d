"""Admin stock ledger API views."""

from __future__ import annotations

from uuid import UUID

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.catalog.repositories import CatalogDjangoRepository
from modules.core.identity import resolve_identity
from modules.core.pagination import StandardResultsSetPagination
from modules.stock.models import StockMovement
from modules.stock.repositories import StockMovementDjangoRepository
from modules.stock.serializers import StockAdjustmentSerializer, StockMovementSerializer
from modules.stock.services import StockAdjustmentService, StockLedgerService


class AdminStockMovementViewSet(GenericViewSet):
    """Read the ledger of a product and record admin corrections."""

    queryset = StockMovement.objects.none()
    serializer_class = StockMovementSerializer
    permission_classes = [IsAdminUser]
    pagination_class = StandardResultsSetPagination

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._ledger = StockLedgerService(repository=StockMovementDjangoRepository())
        self._adjustments = StockAdjustmentService(
            catalog=CatalogDjangoRepository(),
            ledger=self._ledger,
        )

    def list(self, request: Request) -> Response:
        """GET /api/v1/admin/stock-movements/?product_id=<uuid>"""
        product_id = request.query_params.get("product_id")
        if not product_id:
            raise ValidationError({"product_id": "This query parameter is required."})
        try:
            product_id = UUID(product_id)
        except ValueError as exc:
            raise ValidationError({"product_id": "Must be a valid UUID."}) from exc

        queryset = self._ledger.list_by_product(product_id)
        page = self.paginate_queryset(queryset)
        serializer = StockMovementSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    @action(detail=False, methods=["post"])
    def adjust(self, request: Request) -> Response:
        """POST /api/v1/admin/stock-movements/adjust/"""
        serializer = StockAdjustmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        identity = resolve_identity(request)
        movement = self._adjustments.adjust(
            product_id=data["product_id"],
            delta=data["delta"],
            actor=identity.email if identity else "",
            note=data["note"],
        )
        return Response(
            StockMovementSerializer(movement).data,
            status=status.HTTP_201_CREATED,
        )
