"""Key/value store for store-wide configuration."""

from __future__ import annotations

from django.db import models

from modules.store_settings.constants import SettingKey


class Setting(models.Model):
    """A single configuration value, stored as text.

    One row per ``SettingKey``; a missing row means "use the default".
    """

    key = models.CharField(max_length=100, unique=True, choices=SettingKey.choices)
    value = models.TextField(blank=True, default="")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "settings"
        ordering = ["key"]

    def __str__(self) -> str:
        return f"{self.key}={self.value}"
