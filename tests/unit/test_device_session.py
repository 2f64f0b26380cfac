"""
Unit tests for OnvifDeviceSession (ONVIFCamera patched).
"""
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from camview.core.exceptions import UpstreamConnectionError
from camview.infrastructure.onvif.device_session import PTZ_NAMESPACE, OnvifDeviceSession

ONVIF_CAMERA = "camview.infrastructure.onvif.device_session.ONVIFCamera"
PTZ_XADDR = "http://10.0.0.5:8899/onvif/ptz_service"


def _onvif_camera(with_ptz: bool = True):
    media = MagicMock()
    media.GetProfiles = AsyncMock(return_value=[SimpleNamespace(token="profile_1")])
    media.GetStreamUri = AsyncMock(return_value=SimpleNamespace(Uri="rtsp://10.0.0.5:554/h264"))
    media.create_type.side_effect = lambda name: SimpleNamespace()

    ptz = MagicMock()
    ptz.ContinuousMove = AsyncMock()
    ptz.Stop = AsyncMock()
    ptz.create_type.side_effect = lambda name: SimpleNamespace()

    camera = MagicMock()
    camera.xaddrs = {PTZ_NAMESPACE: PTZ_XADDR} if with_ptz else {}
    camera.update_xaddrs = AsyncMock()
    camera.create_media_service = AsyncMock(return_value=media)
    camera.create_ptz_service = AsyncMock(return_value=ptz)
    camera.close = AsyncMock()
    return camera, media, ptz


@pytest.mark.asyncio
async def test_init_loads_profile_and_ptz():
    camera, media, ptz = _onvif_camera()
    with patch(ONVIF_CAMERA, return_value=camera) as factory:
        session = OnvifDeviceSession("http://10.0.0.5:8899/onvif/device_service", "admin", "pw")
        await session.init()

    factory.assert_called_once_with("10.0.0.5", 8899, "admin", "pw")
    assert session.profile_token == "profile_1"
    assert session.ptz_xaddr == PTZ_XADDR
    assert session.has_ptz
    assert await session.get_stream_uri() == "rtsp://10.0.0.5:554/h264"


@pytest.mark.asyncio
async def test_init_failure_raises_and_closes():
    camera, _, _ = _onvif_camera()
    camera.update_xaddrs.side_effect = ConnectionRefusedError("refused")
    with patch(ONVIF_CAMERA, return_value=camera):
        session = OnvifDeviceSession("http://10.0.0.5:8899/onvif/device_service")
        with pytest.raises(UpstreamConnectionError):
            await session.init()

    camera.close.assert_awaited()
    assert not session.initialized


@pytest.mark.asyncio
async def test_stream_uri_none_when_device_errors():
    camera, media, _ = _onvif_camera()
    media.GetStreamUri.side_effect = RuntimeError("not supported")
    with patch(ONVIF_CAMERA, return_value=camera):
        session = OnvifDeviceSession("http://10.0.0.5:8899/onvif/device_service")
        await session.init()

    assert await session.get_stream_uri() is None


@pytest.mark.asyncio
async def test_continuous_move_sends_velocity():
    camera, _, ptz = _onvif_camera()
    with patch(ONVIF_CAMERA, return_value=camera):
        session = OnvifDeviceSession("http://10.0.0.5:8899/onvif/device_service")
        await session.init()
        await session.continuous_move(x=0.5, y=0.0, zoom=0.0)
        await session.stop()

    request = ptz.ContinuousMove.await_args.args[0]
    assert request.ProfileToken == "profile_1"
    assert request.Velocity == {"PanTilt": {"x": 0.5, "y": 0.0}, "Zoom": {"x": 0.0}}
    ptz.Stop.assert_awaited_once()


@pytest.mark.asyncio
async def test_ptz_unavailable_raises():
    camera, _, _ = _onvif_camera(with_ptz=False)
    with patch(ONVIF_CAMERA, return_value=camera):
        session = OnvifDeviceSession("http://10.0.0.5:8899/onvif/device_service")
        await session.init()

    assert session.ptz_xaddr is None
    with pytest.raises(UpstreamConnectionError, match="PTZ service not available"):
        await session.continuous_move(y=0.5)
