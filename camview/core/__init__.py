from .config import Settings, get_settings
from .exceptions import (
    CamviewError,
    NotFoundError,
    CameraNotFoundError,
    ValidationError,
    ConfigurationError,
    UpstreamConnectionError,
    TranscoderError,
    VisionServiceError,
    get_user_message,
)

__all__ = [
    "Settings",
    "get_settings",
    "CamviewError",
    "NotFoundError",
    "CameraNotFoundError",
    "ValidationError",
    "ConfigurationError",
    "UpstreamConnectionError",
    "TranscoderError",
    "VisionServiceError",
    "get_user_message",
]
