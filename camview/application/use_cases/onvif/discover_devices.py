# Standard library imports
import logging
from typing import List, Optional

# Local application imports
from ....core.config import get_settings
from ....infrastructure.onvif.discovery import OnvifDiscovery
from ...dto.onvif_dto import DiscoveredDeviceResponse

logger = logging.getLogger(__name__)


class DiscoverDevicesUseCase:
    """Use case for finding ONVIF cameras on the local network"""

    def __init__(self, discovery: OnvifDiscovery, timeout_sec: Optional[float] = None) -> None:
        self.discovery = discovery
        self.timeout_sec = timeout_sec if timeout_sec is not None else get_settings().onvif_discovery_timeout_sec

    async def execute(self) -> List[DiscoveredDeviceResponse]:
        devices = await self.discovery.discover(self.timeout_sec)
        logger.info(f"ONVIF discovery finished. Found devices: {len(devices)}")
        return [DiscoveredDeviceResponse(**device) for device in devices]
