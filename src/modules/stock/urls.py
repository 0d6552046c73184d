"""Stock ledger URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.stock.views import AdminStockMovementViewSet

router = DefaultRouter(trailing_slash=True)
router.register("stock-movements", AdminStockMovementViewSet, basename="stock-movement")

urlpatterns = router.urls
