from abc import ABC, abstractmethod
from typing import Dict, Optional


class SettingsRepository(ABC):
    """Repository interface for the key/value application settings store"""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Get a setting value, None when unset"""
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Insert or replace a setting value"""
        pass

    @abstractmethod
    async def get_many(self, keys: tuple) -> Dict[str, Optional[str]]:
        """Get several settings at once; missing keys map to None"""
        pass

    @abstractmethod
    async def set_default(self, key: str, value: str) -> bool:
        """Store value only if key is absent. Returns True when inserted"""
        pass
