# Standard library imports
import logging
from typing import Any

# Local application imports
from ....core.exceptions import ValidationError
from ....domain.repositories.settings_repository import SettingsRepository
from ...dto.settings_dto import SettingUpdateResponse

logger = logging.getLogger(__name__)


def stringify_setting(value: Any) -> str:
    """Settings are stored as strings; booleans as lower-case true/false."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class UpdateAppSettingUseCase:
    """Use case for storing one application setting"""

    def __init__(self, settings_repository: SettingsRepository) -> None:
        self.settings_repository = settings_repository

    async def execute(self, key: str, value: Any) -> SettingUpdateResponse:
        """
        Raises:
            ValidationError: key empty or value missing
        """
        if not key or not key.strip():
            raise ValidationError("Setting key is required", user_message="Key is required.")
        if value is None:
            raise ValidationError(f"No value for setting {key}", user_message="Value is required.")

        stored = stringify_setting(value)
        await self.settings_repository.set(key, stored)
        logger.info(f"Setting '{key}' updated")
        return SettingUpdateResponse(message=f"Setting '{key}' updated successfully.", key=key, value=stored)
