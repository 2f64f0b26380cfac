from .camera_dto import (
    CameraCreateRequest,
    CameraUpdateRequest,
    CameraResponse,
    MessageResponse,
)
from .onvif_dto import DiscoveredDeviceResponse, PtzCommandRequest
from .settings_dto import AppSettingsResponse, SettingUpdateRequest, SettingUpdateResponse
from .vision_dto import VisionQueryRequest

__all__ = [
    "CameraCreateRequest",
    "CameraUpdateRequest",
    "CameraResponse",
    "MessageResponse",
    "DiscoveredDeviceResponse",
    "PtzCommandRequest",
    "AppSettingsResponse",
    "SettingUpdateRequest",
    "SettingUpdateResponse",
    "VisionQueryRequest",
]
