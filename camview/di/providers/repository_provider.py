from typing import TYPE_CHECKING
from ...domain.repositories.camera_repository import CameraRepository
from ...domain.repositories.settings_repository import SettingsRepository
from ...infrastructure.db.mongo_camera_repository import MongoCameraRepository
from ...infrastructure.db.mongo_settings_repository import MongoSettingsRepository

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class RepositoryProvider:
    """Repository registration provider - wires domain interfaces to infrastructure implementations"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        camera_collection = container.get("camera_collection")
        settings_collection = container.get("settings_collection")

        # Domain interfaces -> Infrastructure implementations
        container.register_singleton(
            CameraRepository,
            MongoCameraRepository(camera_collection=camera_collection)
        )

        container.register_singleton(
            SettingsRepository,
            MongoSettingsRepository(settings_collection=settings_collection)
        )
