"""Order API views.

Exposes ``OrderService`` via HTTP using DRF ViewSets.  Domain exceptions
propagate to the shared exception handler, which renders them with their
own status code; views never translate them.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import (
    AllowAny,
    BasePermission,
    IsAdminUser,
    IsAuthenticated,
)
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.catalog.repositories import CatalogDjangoRepository
from modules.core.identity import resolve_identity
from modules.core.pagination import StandardResultsSetPagination
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories import OrderDjangoRepository
from modules.orders.serializers import (
    CreateOrderSerializer,
    OrderListSerializer,
    OrderSerializer,
    OrderStatusUpdateSerializer,
)
from modules.orders.services import OrderService
from modules.stock.repositories import StockMovementDjangoRepository
from modules.stock.services import StockLedgerService
from modules.store_settings.repositories import SettingDjangoRepository
from modules.store_settings.services import SettingService


def build_order_service() -> OrderService:
    return OrderService(
        order_repository=OrderDjangoRepository(),
        catalog=CatalogDjangoRepository(),
        ledger=StockLedgerService(repository=StockMovementDjangoRepository()),
        settings_provider=SettingService(repository=SettingDjangoRepository()),
    )


class _ScopedThrottleMixin:
    """Pick a throttle scope per action."""

    throttle_scopes: dict[str, str] = {}

    def get_throttles(self) -> list[BaseThrottle]:
        self.throttle_scope = self.throttle_scopes.get(self.action)
        return super().get_throttles()


class OrderViewSet(_ScopedThrottleMixin, GenericViewSet):
    """Customer-facing order endpoints.

    Guests may create orders; listing and cancelling require a signed-in
    user.  All ORM access goes through the service/repository layer.
    """

    queryset = Order.objects.none()
    serializer_class = OrderSerializer
    pagination_class = StandardResultsSetPagination
    throttle_scopes = {"create": "order_creation", "my": "order_listing"}

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_order_service()

    def get_permissions(self) -> list[BasePermission]:
        if self.action == "create":
            return [AllowAny()]
        return [IsAuthenticated()]

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        create_serializer = CreateOrderSerializer(data=request.data)
        create_serializer.is_valid(raise_exception=True)
        data = create_serializer.validated_data

        dto = CreateOrderDTO(
            items=[
                CreateOrderItemDTO(
                    product_id=item.get("product_id"),
                    quantity=item.get("quantity"),
                )
                for item in data.get("items", [])
            ],
            payment_method=data.get("payment_method"),
            guest_name=data.get("guest_name"),
            guest_email=data.get("guest_email"),
            contact_phone=data.get("contact_phone"),
            delivery_address=data["delivery_address"],
            note=data["note"],
        )
        order = self._service.create_order(dto, resolve_identity(request))
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["get"])
    def my(self, request: Request) -> Response:
        """GET /api/v1/orders/my/"""
        queryset = self._service.list_customer_orders(resolve_identity(request))
        page = self.paginate_queryset(queryset)
        serializer = OrderSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/cancel/"""
        order = self._service.cancel_order(pk, resolve_identity(request))
        return Response(OrderSerializer(order).data)


class AdminOrderViewSet(_ScopedThrottleMixin, GenericViewSet):
    """Back-office order management."""

    queryset = Order.objects.none()
    serializer_class = OrderSerializer
    permission_classes = [IsAdminUser]
    pagination_class = StandardResultsSetPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = OrderFilter
    throttle_scopes = {"list": "order_listing", "retrieve": "order_listing"}

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_order_service()

    def get_queryset(self):
        return self._service.list_orders()

    def list(self, request: Request) -> Response:
        """GET /api/v1/admin/orders/?status=&id=&q="""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = OrderListSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/admin/orders/{pk}/"""
        order = self._service.get_order(pk)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["patch"], url_path="status")
    def set_status(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/admin/orders/{pk}/status/"""
        serializer = OrderStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        identity = resolve_identity(request)
        order = self._service.update_status(
            pk,
            serializer.validated_data["status"],
            actor=identity.email if identity else None,
        )
        return Response(OrderSerializer(order).data)

    @action(detail=False, methods=["get"])
    def stats(self, request: Request) -> Response:
        """GET /api/v1/admin/orders/stats/"""
        return Response(self._service.order_stats().model_dump())
