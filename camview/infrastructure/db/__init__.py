from .mongo_connection import (
    get_database,
    get_camera_collection,
    get_settings_collection,
    ensure_indexes,
    close_database,
)
from .mongo_camera_repository import MongoCameraRepository
from .mongo_settings_repository import MongoSettingsRepository

__all__ = [
    "get_database",
    "get_camera_collection",
    "get_settings_collection",
    "ensure_indexes",
    "close_database",
    "MongoCameraRepository",
    "MongoSettingsRepository",
]
