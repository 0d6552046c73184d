"""Setting repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Optional


class ISettingRepository(ABC):
    """Raw text access to stored settings."""

    @abstractmethod
    def get_value(self, key: str) -> Optional[str]:
        """Return the stored text for *key*, ``None`` if it was never set."""

    @abstractmethod
    def set_value(self, key: str, value: str) -> None:
        """Create or overwrite the stored text for *key*."""

    @abstractmethod
    def all_values(self) -> Dict[str, str]:
        """Return every stored key/value pair."""
