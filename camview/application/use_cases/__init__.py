from .camera import (
    CreateCameraUseCase,
    ListCamerasUseCase,
    GetCameraUseCase,
    UpdateCameraUseCase,
    DeleteCameraUseCase,
)
from .onvif import (
    DiscoverDevicesUseCase,
    ControlPtzUseCase,
)
from .settings import (
    GetAppSettingsUseCase,
    UpdateAppSettingUseCase,
)
from .vision import QueryVisionUseCase

__all__ = [
    "CreateCameraUseCase",
    "ListCamerasUseCase",
    "GetCameraUseCase",
    "UpdateCameraUseCase",
    "DeleteCameraUseCase",
    "DiscoverDevicesUseCase",
    "ControlPtzUseCase",
    "GetAppSettingsUseCase",
    "UpdateAppSettingUseCase",
    "QueryVisionUseCase",
]
