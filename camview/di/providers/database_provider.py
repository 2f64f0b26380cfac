from typing import TYPE_CHECKING
from ...infrastructure.db.mongo_connection import (
    get_database,
    get_camera_collection,
    get_settings_collection,
)

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class DatabaseProvider:
    """Centralized database connection provider - single source of truth for all DB connections"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register all database collections in the container.
        Repositories receive their collection from here.
        """
        database = get_database()

        container.register_singleton("database", database)
        container.register_singleton("camera_collection", get_camera_collection())
        container.register_singleton("settings_collection", get_settings_collection())
