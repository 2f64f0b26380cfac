# Standard library imports
import logging
from typing import Dict, Tuple

# Local application imports
from ....core.exceptions import CameraNotFoundError, ValidationError
from ....domain.repositories.camera_repository import CameraRepository
from ....infrastructure.onvif.device_cache import DeviceConnectionCache
from ...dto.camera_dto import MessageResponse
from ...dto.onvif_dto import PtzCommandRequest

logger = logging.getLogger(__name__)

# command -> (x, y, zoom) direction multipliers
PTZ_DIRECTIONS: Dict[str, Tuple[int, int, int]] = {
    "moveUp": (0, 1, 0),
    "moveDown": (0, -1, 0),
    "moveLeft": (-1, 0, 0),
    "moveRight": (1, 0, 0),
    "zoomIn": (0, 0, 1),
    "zoomOut": (0, 0, -1),
}
STOP_COMMAND = "stop"


class ControlPtzUseCase:
    """Use case for sending a pan/tilt/zoom command to a registered camera"""

    def __init__(self, camera_repository: CameraRepository, device_cache: DeviceConnectionCache) -> None:
        self.camera_repository = camera_repository
        self.device_cache = device_cache

    async def execute(self, camera_id: str, request: PtzCommandRequest) -> MessageResponse:
        """
        Send a continuous move (or stop) through the camera's cached ONVIF session.

        Raises:
            CameraNotFoundError: camera does not exist
            ValidationError: unknown command or camera has no control URL
            UpstreamConnectionError: session could not be opened or the command failed
        """
        command = request.command
        if command != STOP_COMMAND and command not in PTZ_DIRECTIONS:
            raise ValidationError(f"Invalid PTZ command: {command}", user_message="Invalid PTZ command.")

        camera = await self.camera_repository.find_by_id(camera_id)
        if camera is None:
            raise CameraNotFoundError(camera_id)
        if not camera.onvif_url:
            raise ValidationError(
                f"Camera {camera_id} has no ONVIF URL",
                user_message="ONVIF URL is required for control.",
            )

        device = await self.device_cache.get_device(
            camera.onvif_url,
            camera.username,
            camera.password,
            camera.connection_cache_key,
        )

        if command == STOP_COMMAND:
            await device.stop()
            return MessageResponse(message=f"PTZ stop command sent to camera {camera_id}.")

        x, y, zoom = (direction * request.speed for direction in PTZ_DIRECTIONS[command])
        await device.continuous_move(x=x, y=y, zoom=zoom)
        logger.debug(f"PTZ {command} (speed={request.speed}) sent to camera {camera_id}")
        return MessageResponse(message=f"PTZ {command} command sent to camera {camera_id}.")
