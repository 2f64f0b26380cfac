# Standard library imports
from typing import Dict, Optional

# External package imports
from motor.motor_asyncio import AsyncIOMotorCollection

# Local application imports
from ...domain.repositories.settings_repository import SettingsRepository
from ...domain.constants import SettingsKeys
from .mongo_connection import get_settings_collection


class MongoSettingsRepository(SettingsRepository):
    """MongoDB implementation of the key/value settings store"""

    def __init__(self, settings_collection: Optional[AsyncIOMotorCollection] = None) -> None:
        self.settings_collection = (
            settings_collection if settings_collection is not None else get_settings_collection()
        )

    async def get(self, key: str) -> Optional[str]:
        if not key:
            return None
        try:
            document = await self.settings_collection.find_one({SettingsKeys.FIELD_KEY: key})
            if document is None:
                return None
            return document.get(SettingsKeys.FIELD_VALUE)
        except Exception as e:
            raise RuntimeError(f"Error reading setting '{key}': {str(e)}")

    async def set(self, key: str, value: str) -> None:
        try:
            await self.settings_collection.update_one(
                {SettingsKeys.FIELD_KEY: key},
                {"$set": {SettingsKeys.FIELD_VALUE: value}},
                upsert=True,
            )
        except Exception as e:
            raise RuntimeError(f"Error writing setting '{key}': {str(e)}")

    async def get_many(self, keys: tuple) -> Dict[str, Optional[str]]:
        result: Dict[str, Optional[str]] = {key: None for key in keys}
        try:
            cursor = self.settings_collection.find({SettingsKeys.FIELD_KEY: {"$in": list(keys)}})
            async for document in cursor:
                result[document[SettingsKeys.FIELD_KEY]] = document.get(SettingsKeys.FIELD_VALUE)
            return result
        except Exception as e:
            raise RuntimeError(f"Error reading settings: {str(e)}")

    async def set_default(self, key: str, value: str) -> bool:
        """Insert-if-absent via $setOnInsert so existing values are never overwritten."""
        try:
            result = await self.settings_collection.update_one(
                {SettingsKeys.FIELD_KEY: key},
                {"$setOnInsert": {SettingsKeys.FIELD_VALUE: value}},
                upsert=True,
            )
            return result.upserted_id is not None
        except Exception as e:
            raise RuntimeError(f"Error seeding setting '{key}': {str(e)}")
