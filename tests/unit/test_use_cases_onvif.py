"""
Unit tests for ONVIF use cases (DiscoverDevices, ControlPtz).
"""
from unittest.mock import AsyncMock, MagicMock

import pytest
from camview.application.dto.onvif_dto import PtzCommandRequest
from camview.application.use_cases.onvif import ControlPtzUseCase, DiscoverDevicesUseCase
from camview.core.exceptions import CameraNotFoundError, ValidationError
from camview.domain.models.camera import Camera

CONTROL_URL = "http://10.0.0.5:8899/onvif/ptz_service"


def _camera(onvif_url=CONTROL_URL) -> Camera:
    return Camera(
        id="CAM-1",
        name="Porch",
        stream_url="rtsp://10.0.0.5/stream",
        onvif_url=onvif_url,
        username="admin",
        password="pw",
    )


@pytest.fixture
def device():
    device = MagicMock()
    device.continuous_move = AsyncMock()
    device.stop = AsyncMock()
    return device


@pytest.fixture
def use_case(device):
    repo = AsyncMock()
    repo.find_by_id.return_value = _camera()
    cache = AsyncMock()
    cache.get_device.return_value = device
    return ControlPtzUseCase(repo, cache)


class TestControlPtzUseCase:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "command,expected",
        [
            ("moveUp", (0, 0.4, 0)),
            ("moveDown", (0, -0.4, 0)),
            ("moveLeft", (-0.4, 0, 0)),
            ("moveRight", (0.4, 0, 0)),
            ("zoomIn", (0, 0, 0.4)),
            ("zoomOut", (0, 0, -0.4)),
        ],
    )
    async def test_move_commands(self, use_case, device, command, expected):
        result = await use_case.execute("CAM-1", PtzCommandRequest(command=command, speed=0.4))

        x, y, zoom = expected
        device.continuous_move.assert_awaited_once_with(x=x, y=y, zoom=zoom)
        assert result.message == f"PTZ {command} command sent to camera CAM-1."

    @pytest.mark.asyncio
    async def test_stop(self, use_case, device):
        result = await use_case.execute("CAM-1", PtzCommandRequest(command="stop"))

        device.stop.assert_awaited_once()
        device.continuous_move.assert_not_awaited()
        assert result.message == "PTZ stop command sent to camera CAM-1."

    @pytest.mark.asyncio
    async def test_uses_cached_connection_key(self, use_case):
        await use_case.execute("CAM-1", PtzCommandRequest(command="stop"))

        use_case.device_cache.get_device.assert_awaited_once_with(CONTROL_URL, "admin", "pw", "camera-Porch")

    @pytest.mark.asyncio
    async def test_invalid_command(self, use_case):
        with pytest.raises(ValidationError, match="Invalid PTZ command"):
            await use_case.execute("CAM-1", PtzCommandRequest(command="spin"))

    @pytest.mark.asyncio
    async def test_camera_without_control_url(self, use_case):
        use_case.camera_repository.find_by_id.return_value = _camera(onvif_url=None)

        with pytest.raises(ValidationError) as exc_info:
            await use_case.execute("CAM-1", PtzCommandRequest(command="moveUp"))
        assert exc_info.value.user_message == "ONVIF URL is required for control."

    @pytest.mark.asyncio
    async def test_unknown_camera(self, use_case):
        use_case.camera_repository.find_by_id.return_value = None

        with pytest.raises(CameraNotFoundError):
            await use_case.execute("CAM-9", PtzCommandRequest(command="moveUp"))


@pytest.mark.asyncio
async def test_discover_devices():
    discovery = AsyncMock()
    discovery.discover.return_value = [
        {"urn": "urn:uuid:1", "name": "Porch", "xaddrs": ["http://10.0.0.5/onvif"], "scopes": []}
    ]

    result = await DiscoverDevicesUseCase(discovery, timeout_sec=2.0).execute()

    discovery.discover.assert_awaited_once_with(2.0)
    assert result[0].name == "Porch"
    assert result[0].xaddrs == ["http://10.0.0.5/onvif"]
