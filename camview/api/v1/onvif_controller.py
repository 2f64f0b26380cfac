# Standard library imports
import logging
from typing import List

# External package imports
from fastapi import APIRouter

# Local application imports
from ...application.dto.camera_dto import MessageResponse
from ...application.dto.onvif_dto import DiscoveredDeviceResponse, PtzCommandRequest
from ...application.use_cases.onvif import ControlPtzUseCase, DiscoverDevicesUseCase
from ...core.exceptions import CamviewError
from ...di.container import get_container
from .errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["onvif"])


@router.get("/discover", response_model=List[DiscoveredDeviceResponse])
async def discover_devices() -> List[DiscoveredDeviceResponse]:
    """
    Probe the local network for ONVIF cameras (WS-Discovery).

    Blocks for the configured discovery window before answering.
    """
    container = get_container()
    discover_use_case = container.get(DiscoverDevicesUseCase)
    return await discover_use_case.execute()


@router.post("/control/{camera_id}", response_model=MessageResponse)
async def control_ptz(camera_id: str, request: PtzCommandRequest) -> MessageResponse:
    container = get_container()
    control_use_case = container.get(ControlPtzUseCase)

    try:
        return await control_use_case.execute(camera_id=camera_id, request=request)
    except CamviewError as exception:
        logger.error(f"Error sending PTZ command to camera {camera_id}: {exception.message}")
        raise to_http_exception(exception)
