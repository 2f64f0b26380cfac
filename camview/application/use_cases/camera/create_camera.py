# Standard library imports
import secrets
import logging
from typing import Optional

# Local application imports
from ....core.config import get_settings
from ....core.exceptions import ValidationError
from ....domain.repositories.camera_repository import CameraRepository
from ....domain.models.camera import Camera
from ....infrastructure.onvif.device_cache import DeviceConnectionCache
from ....utils.url_utils import fallback_rtsp_url, onvif_device_service_url
from ...dto.camera_dto import CameraCreateRequest, CameraResponse

logger = logging.getLogger(__name__)


class CreateCameraUseCase:
    """Use case for registering a new camera through its ONVIF endpoint"""

    def __init__(
        self,
        camera_repository: CameraRepository,
        device_cache: DeviceConnectionCache,
        default_onvif_port: Optional[int] = None,
    ) -> None:
        self.camera_repository = camera_repository
        self.device_cache = device_cache
        self.default_onvif_port = default_onvif_port or get_settings().onvif_default_port

    def _generate_camera_id(self) -> str:
        """
        Generate a unique camera ID

        Returns:
            Unique camera ID string in format CAM-XXXXXXXXXXXX
        """
        return f"CAM-{secrets.token_hex(6).upper()}"

    async def execute(self, request: CameraCreateRequest) -> CameraResponse:
        """
        Connect to the camera, discover its RTSP and PTZ addresses and persist it.

        Args:
            request: Camera registration request

        Returns:
            CameraResponse with created camera information

        Raises:
            ValidationError: name or host missing
            UpstreamConnectionError: ONVIF handshake failed (camera is not saved)
        """
        name = request.name.strip()
        host = request.host.strip()
        if not name or not host:
            raise ValidationError("Name and host are required", user_message="Name and Host are required.")

        port = request.port or self.default_onvif_port
        device_url = onvif_device_service_url(host, port)
        logger.info(f"Attempting to connect to ONVIF device at host: {host}:{port}")

        # Cache key follows the camera name so PTZ requests reuse this session
        device = await self.device_cache.get_device(
            device_url,
            request.username,
            request.password,
            f"camera-{name}",
        )
        logger.info(f"CONNECTED to camera: {host}")

        stream_url = await device.get_stream_uri()
        if not stream_url:
            stream_url = fallback_rtsp_url(host)
            logger.warning(f"Using fallback RTSP URL for {host}: {stream_url}")

        onvif_url = device.ptz_xaddr or device_url

        new_camera = Camera(
            id=self._generate_camera_id(),
            name=name,
            stream_url=stream_url,
            onvif_url=onvif_url,
            username=request.username,
            password=request.password,
        )
        saved_camera = await self.camera_repository.save(new_camera)
        logger.info(f"Camera {saved_camera.id} ({saved_camera.name}) registered")

        return CameraResponse.from_domain(saved_camera)
