"""Settings API views (admin management and public storefront read)."""

from __future__ import annotations

from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.store_settings.repositories import SettingDjangoRepository
from modules.store_settings.serializers import (
    PublicStoreSettingsSerializer,
    StoreSettingsSerializer,
)
from modules.store_settings.services import SettingService


class _SettingsView(APIView):
    permission_classes = [IsAdminUser]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = SettingService(repository=SettingDjangoRepository())


class AdminSettingsView(_SettingsView):
    def get(self, request: Request) -> Response:
        """GET /api/v1/admin/settings/"""
        return Response(StoreSettingsSerializer(self._service.snapshot()).data)

    def patch(self, request: Request) -> Response:
        """PATCH /api/v1/admin/settings/

        Only the supplied keys are written; the response is the full,
        freshly read snapshot.
        """
        serializer = StoreSettingsSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        snapshot = self._service.update_many(serializer.validated_data)
        return Response(StoreSettingsSerializer(snapshot).data)


class ClearSettingsCacheView(_SettingsView):
    def post(self, request: Request) -> Response:
        """POST /api/v1/admin/settings/clear-cache/"""
        self._service.clear_cache()
        return Response({"detail": "Settings cache cleared."})


class PublicSettingsView(_SettingsView):
    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        """GET /api/v1/settings/"""
        return Response(PublicStoreSettingsSerializer(self._service.snapshot()).data)
