"""Django ORM implementation of the Setting repository."""

from __future__ import annotations

from typing import Dict, Optional

import structlog

from modules.store_settings.models import Setting
from modules.store_settings.repositories.interfaces import ISettingRepository

logger = structlog.get_logger(__name__)


class SettingDjangoRepository(ISettingRepository):
    """Concrete Setting repository backed by Django ORM."""

    def get_value(self, key: str) -> Optional[str]:
        return Setting.objects.filter(key=key).values_list("value", flat=True).first()

    def set_value(self, key: str, value: str) -> None:
        Setting.objects.update_or_create(key=key, defaults={"value": value})
        logger.info("settings.value_saved", key=key)

    def all_values(self) -> Dict[str, str]:
        return dict(Setting.objects.values_list("key", "value"))
