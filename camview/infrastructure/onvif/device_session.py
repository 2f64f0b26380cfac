"""
ONVIF control session for a single camera (onvif-zeep-async).

Wraps ONVIFCamera with the handful of operations the backend needs:
stream URI discovery, PTZ continuous move and stop.
"""

# Standard library imports
import logging
from typing import Any, Optional

# External package imports
from onvif import ONVIFCamera

# Local application imports
from ...core.exceptions import UpstreamConnectionError
from ...utils.url_utils import host_port_from_url

logger = logging.getLogger(__name__)

PTZ_NAMESPACE = "http://www.onvif.org/ver20/ptz/wsdl"


class OnvifDeviceSession:
    """Initialized control session for one ONVIF device."""

    def __init__(self, control_address: str, username: str = "", password: str = "") -> None:
        host, port = host_port_from_url(control_address)
        self.control_address = control_address
        self.host = host
        self.port = port
        self._camera = ONVIFCamera(host, port, username or "", password or "")
        self._media_service: Any = None
        self._ptz_service: Any = None
        self._profile: Any = None
        self.initialized = False

    async def init(self) -> None:
        """
        Handshake with the device: resolve service addresses, create the media
        service, load the first media profile and (when supported) the PTZ service.

        Raises:
            UpstreamConnectionError: device unreachable or rejected the credentials
        """
        try:
            await self._camera.update_xaddrs()
            self._media_service = await self._camera.create_media_service()
            profiles = await self._media_service.GetProfiles()
            self._profile = profiles[0] if profiles else None
            if PTZ_NAMESPACE in (self._camera.xaddrs or {}):
                self._ptz_service = await self._camera.create_ptz_service()
        except Exception as e:
            await self.close()
            raise UpstreamConnectionError(
                f"Failed to initialize ONVIF device at {self.host}:{self.port}: {e}",
                user_message=f"Failed to connect to camera or initialize: {e}",
                details={"host": self.host, "port": self.port},
            ) from e
        self.initialized = True
        logger.info("ONVIF session initialized for %s:%s", self.host, self.port)

    @property
    def profile_token(self) -> Optional[str]:
        return getattr(self._profile, "token", None) if self._profile is not None else None

    @property
    def ptz_xaddr(self) -> Optional[str]:
        return (self._camera.xaddrs or {}).get(PTZ_NAMESPACE)

    @property
    def has_ptz(self) -> bool:
        return self._ptz_service is not None

    async def get_stream_uri(self) -> Optional[str]:
        """RTSP URI of the first media profile, None if the device does not report one."""
        if self._media_service is None or self.profile_token is None:
            return None
        try:
            request = self._media_service.create_type("GetStreamUri")
            request.ProfileToken = self.profile_token
            request.StreamSetup = {"Stream": "RTP-Unicast", "Transport": {"Protocol": "RTSP"}}
            response = await self._media_service.GetStreamUri(request)
            return getattr(response, "Uri", None)
        except Exception as e:
            logger.warning("Could not get RTSP stream URI from %s: %s", self.host, e)
            return None

    def _require_ptz(self) -> Any:
        if self._ptz_service is None or self.profile_token is None:
            raise UpstreamConnectionError(
                f"PTZ service not available on {self.host}",
                user_message="PTZ service not available for this device.",
            )
        return self._ptz_service

    async def continuous_move(self, x: float = 0.0, y: float = 0.0, zoom: float = 0.0) -> None:
        ptz = self._require_ptz()
        request = ptz.create_type("ContinuousMove")
        request.ProfileToken = self.profile_token
        request.Velocity = {"PanTilt": {"x": x, "y": y}, "Zoom": {"x": zoom}}
        try:
            await ptz.ContinuousMove(request)
        except Exception as e:
            raise UpstreamConnectionError(
                f"ContinuousMove failed on {self.host}: {e}",
                user_message=f"Failed to send PTZ command: {e}",
            ) from e

    async def stop(self) -> None:
        ptz = self._require_ptz()
        request = ptz.create_type("Stop")
        request.ProfileToken = self.profile_token
        request.PanTilt = True
        request.Zoom = True
        try:
            await ptz.Stop(request)
        except Exception as e:
            raise UpstreamConnectionError(
                f"PTZ stop failed on {self.host}: {e}",
                user_message=f"Failed to send PTZ command: {e}",
            ) from e

    async def close(self) -> None:
        try:
            await self._camera.close()
        except Exception:
            logger.debug("Error closing ONVIF session for %s", self.host, exc_info=True)
