"""
MongoDB (motor) client and collection accessors.

One client per process, created lazily on first use and closed from the
application lifespan.
"""
# Standard library imports
import logging
from typing import Optional

# External package imports
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase

# Local application imports
from ...core.config import get_settings
from ...domain.constants import CameraFields, SettingsKeys

logger = logging.getLogger(__name__)

CAMERAS_COLLECTION = "cameras"
SETTINGS_COLLECTION = "app_settings"

_client: Optional[AsyncIOMotorClient] = None
_database: Optional[AsyncIOMotorDatabase] = None


def get_database() -> AsyncIOMotorDatabase:
    """Return the configured database, connecting on first call."""
    global _client, _database

    if _database is None:
        settings = get_settings()
        _client = AsyncIOMotorClient(settings.mongo_uri)
        _database = _client[settings.mongo_database_name]
    return _database


def get_camera_collection() -> AsyncIOMotorCollection:
    return get_database()[CAMERAS_COLLECTION]


def get_settings_collection() -> AsyncIOMotorCollection:
    """Key/value application settings, one document per key."""
    return get_database()[SETTINGS_COLLECTION]


async def ensure_indexes() -> None:
    """Unique indexes backing camera id lookups and settings upserts."""
    await get_camera_collection().create_index(CameraFields.ID, unique=True, sparse=True)
    await get_settings_collection().create_index(SettingsKeys.FIELD_KEY, unique=True)
    logger.info("MongoDB indexes ensured")


def close_database() -> None:
    global _client, _database

    if _client is not None:
        _client.close()
    _client = None
    _database = None
