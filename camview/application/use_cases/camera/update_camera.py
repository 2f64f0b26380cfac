# Standard library imports
import logging

# Local application imports
from ....core.exceptions import CameraNotFoundError, ValidationError
from ....domain.repositories.camera_repository import CameraRepository
from ....domain.models.camera import Camera
from ....infrastructure.onvif.device_cache import DeviceConnectionCache
from ...dto.camera_dto import CameraUpdateRequest, CameraResponse

logger = logging.getLogger(__name__)


class UpdateCameraUseCase:
    """Use case for editing a registered camera"""

    def __init__(self, camera_repository: CameraRepository, device_cache: DeviceConnectionCache) -> None:
        self.camera_repository = camera_repository
        self.device_cache = device_cache

    async def execute(self, camera_id: str, request: CameraUpdateRequest) -> CameraResponse:
        """
        Replace the camera's name, addresses and credentials.

        The cached ONVIF session (keyed by the old name) is dropped so the next
        control request reconnects with the new details.

        Raises:
            ValidationError: name or stream URL missing
            CameraNotFoundError: camera does not exist
        """
        if not request.name or not request.name.strip() or not request.stream_url or not request.stream_url.strip():
            raise ValidationError(
                "Name and stream URL are required",
                user_message="Name and RTSP URL are required.",
            )

        existing = await self.camera_repository.find_by_id(camera_id)
        if existing is None:
            raise CameraNotFoundError(camera_id)

        updated = Camera(
            id=existing.id,
            name=request.name.strip(),
            stream_url=request.stream_url.strip(),
            onvif_url=request.onvif_url or None,
            username=request.username,
            password=request.password if request.password is not None else existing.password,
        )
        saved = await self.camera_repository.save(updated)

        await self.device_cache.invalidate(existing.connection_cache_key)
        if saved.connection_cache_key != existing.connection_cache_key:
            await self.device_cache.invalidate(saved.connection_cache_key)

        logger.info(f"Camera {camera_id} updated successfully")
        return CameraResponse.from_domain(saved)
