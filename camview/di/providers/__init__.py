from .database_provider import DatabaseProvider
from .repository_provider import RepositoryProvider
from .onvif_provider import OnvifProvider
from .streaming_provider import StreamingProvider
from .camera_provider import CameraProvider
from .settings_provider import SettingsProvider
from .vision_provider import VisionProvider


__all__ = [
    "DatabaseProvider",
    "RepositoryProvider",
    "OnvifProvider",
    "StreamingProvider",
    "CameraProvider",
    "SettingsProvider",
    "VisionProvider",
]
