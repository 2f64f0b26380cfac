# Standard library imports
import logging

# Local application imports
from ....core.exceptions import CameraNotFoundError
from ....domain.repositories.camera_repository import CameraRepository
from ....infrastructure.onvif.device_cache import DeviceConnectionCache

logger = logging.getLogger(__name__)


class DeleteCameraUseCase:
    """Use case for removing a camera"""

    def __init__(self, camera_repository: CameraRepository, device_cache: DeviceConnectionCache) -> None:
        self.camera_repository = camera_repository
        self.device_cache = device_cache

    async def execute(self, camera_id: str) -> None:
        """
        Raises:
            CameraNotFoundError: camera does not exist
        """
        camera = await self.camera_repository.find_by_id(camera_id)
        if camera is None:
            raise CameraNotFoundError(camera_id)

        deleted = await self.camera_repository.delete(camera_id)
        if not deleted:
            raise CameraNotFoundError(camera_id)

        await self.device_cache.invalidate(camera.connection_cache_key)
        logger.info(f"Camera {camera_id} deleted successfully")
