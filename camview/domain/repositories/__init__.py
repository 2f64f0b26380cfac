from .camera_repository import CameraRepository
from .settings_repository import SettingsRepository

__all__ = ["CameraRepository", "SettingsRepository"]
