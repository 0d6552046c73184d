"""Public (storefront) settings URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.store_settings.views import PublicSettingsView

urlpatterns = [
    path("settings/", PublicSettingsView.as_view(), name="public-settings"),
]
