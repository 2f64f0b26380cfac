"""Constants for domain model field names"""

from .camera_fields import CameraFields
from .settings_keys import SettingsKeys, parse_bool_setting

__all__ = [
    "CameraFields",
    "SettingsKeys",
    "parse_bool_setting",
]
