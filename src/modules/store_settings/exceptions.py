"""Settings domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import BusinessError


class InvalidSettingValue(BusinessError):
    """The value supplied for a setting is not acceptable."""

    code = "invalid_setting_value"
