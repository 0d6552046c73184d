"""Settings URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.store_settings.views import AdminSettingsView, ClearSettingsCacheView

urlpatterns = [
    path("settings/", AdminSettingsView.as_view(), name="admin-settings"),
    path(
        "settings/clear-cache/",
        ClearSettingsCacheView.as_view(),
        name="admin-settings-clear-cache",
    ),
]
