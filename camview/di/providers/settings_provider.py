from typing import TYPE_CHECKING
from ...domain.repositories.settings_repository import SettingsRepository
from ...application.use_cases.settings import GetAppSettingsUseCase, UpdateAppSettingUseCase

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class SettingsProvider:
    """Settings use case provider"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        container.register_factory(
            GetAppSettingsUseCase,
            lambda: GetAppSettingsUseCase(
                settings_repository=container.get(SettingsRepository)
            )
        )

        container.register_factory(
            UpdateAppSettingUseCase,
            lambda: UpdateAppSettingUseCase(
                settings_repository=container.get(SettingsRepository)
            )
        )
