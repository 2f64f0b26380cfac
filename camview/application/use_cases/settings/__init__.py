from .get_app_settings import GetAppSettingsUseCase
from .update_app_setting import UpdateAppSettingUseCase, stringify_setting

__all__ = ["GetAppSettingsUseCase", "UpdateAppSettingUseCase", "stringify_setting"]
