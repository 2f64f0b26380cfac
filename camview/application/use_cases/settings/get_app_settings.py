# Local application imports
from ....domain.constants.settings_keys import SettingsKeys
from ....domain.repositories.settings_repository import SettingsRepository
from ...dto.settings_dto import AppSettingsResponse


class GetAppSettingsUseCase:
    """Use case for reading the public application settings"""

    def __init__(self, settings_repository: SettingsRepository) -> None:
        self.settings_repository = settings_repository

    async def execute(self) -> AppSettingsResponse:
        values = await self.settings_repository.get_many(SettingsKeys.PUBLIC_KEYS)
        return AppSettingsResponse(**values)
