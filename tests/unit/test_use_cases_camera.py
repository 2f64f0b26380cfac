"""
Unit tests for camera use cases (Create, List, Get, Update, Delete).
"""
from unittest.mock import AsyncMock, MagicMock

import pytest
from camview.application.dto.camera_dto import CameraCreateRequest, CameraUpdateRequest
from camview.application.use_cases.camera.create_camera import CreateCameraUseCase
from camview.application.use_cases.camera.delete_camera import DeleteCameraUseCase
from camview.application.use_cases.camera.get_camera import GetCameraUseCase
from camview.application.use_cases.camera.list_cameras import ListCamerasUseCase
from camview.application.use_cases.camera.update_camera import UpdateCameraUseCase
from camview.core.exceptions import CameraNotFoundError, UpstreamConnectionError, ValidationError
from camview.domain.models.camera import Camera


def _make_camera(cam_id: str, name: str = "Cam 1", **kwargs) -> Camera:
    return Camera(
        id=cam_id,
        name=name,
        stream_url="rtsp://localhost/stream",
        **kwargs,
    )


def _saving_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.save.side_effect = lambda camera: camera
    return repo


def _device(stream_uri="rtsp://10.0.0.5:554/h264", ptz_xaddr="http://10.0.0.5:8899/onvif/ptz_service"):
    device = MagicMock()
    device.get_stream_uri = AsyncMock(return_value=stream_uri)
    device.ptz_xaddr = ptz_xaddr
    return device


class TestCreateCameraUseCase:
    """Tests for CreateCameraUseCase"""

    @pytest.mark.asyncio
    async def test_create_uses_discovered_addresses(self):
        repo = _saving_repo()
        cache = AsyncMock()
        cache.get_device.return_value = _device()
        use_case = CreateCameraUseCase(repo, cache, default_onvif_port=8899)

        result = await use_case.execute(
            CameraCreateRequest(name="Porch", host="10.0.0.5", username="admin", password="pw")
        )

        cache.get_device.assert_awaited_once_with(
            "http://10.0.0.5:8899/onvif/device_service", "admin", "pw", "camera-Porch"
        )
        assert result.id.startswith("CAM-")
        assert result.stream_url == "rtsp://10.0.0.5:554/h264"
        assert result.onvif_url == "http://10.0.0.5:8899/onvif/ptz_service"
        assert result.has_password is True
        saved = repo.save.await_args.args[0]
        assert saved.password == "pw"

    @pytest.mark.asyncio
    async def test_create_falls_back_when_device_reports_nothing(self):
        repo = _saving_repo()
        cache = AsyncMock()
        cache.get_device.return_value = _device(stream_uri=None, ptz_xaddr=None)
        use_case = CreateCameraUseCase(repo, cache, default_onvif_port=8899)

        result = await use_case.execute(CameraCreateRequest(name="Yard", host="10.0.0.6", port=2020))

        assert result.stream_url == "rtsp://10.0.0.6:554/stream"
        assert result.onvif_url == "http://10.0.0.6:2020/onvif/device_service"

    @pytest.mark.asyncio
    async def test_create_handshake_failure_saves_nothing(self):
        repo = _saving_repo()
        cache = AsyncMock()
        cache.get_device.side_effect = UpstreamConnectionError("unreachable")
        use_case = CreateCameraUseCase(repo, cache, default_onvif_port=8899)

        with pytest.raises(UpstreamConnectionError):
            await use_case.execute(CameraCreateRequest(name="Yard", host="10.0.0.6"))
        repo.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_blank_name_rejected(self):
        use_case = CreateCameraUseCase(_saving_repo(), AsyncMock(), default_onvif_port=8899)
        with pytest.raises(ValidationError):
            await use_case.execute(CameraCreateRequest(name="   ", host="10.0.0.6"))


class TestListCamerasUseCase:
    """Tests for ListCamerasUseCase"""

    @pytest.mark.asyncio
    async def test_list_empty(self):
        repo = AsyncMock()
        repo.find_all.return_value = []
        use_case = ListCamerasUseCase(repo)
        result = await use_case.execute()
        assert result == []

    @pytest.mark.asyncio
    async def test_list_returns_cameras_without_passwords(self):
        repo = AsyncMock()
        repo.find_all.return_value = [
            _make_camera("cam-1", "Front Door", username="admin", password="secret"),
            _make_camera("cam-2", "Backyard"),
        ]
        use_case = ListCamerasUseCase(repo)
        result = await use_case.execute()
        assert len(result) == 2
        assert result[0].id == "cam-1"
        assert result[0].name == "Front Door"
        assert result[0].has_password is True
        assert "password" not in result[0].model_dump()
        assert result[1].has_password is False


class TestGetCameraUseCase:
    """Tests for GetCameraUseCase"""

    @pytest.mark.asyncio
    async def test_get_found(self):
        repo = AsyncMock()
        repo.find_by_id.return_value = _make_camera("cam-1", "My Camera")
        use_case = GetCameraUseCase(repo)
        result = await use_case.execute("cam-1")
        assert result.id == "cam-1"
        assert result.name == "My Camera"

    @pytest.mark.asyncio
    async def test_get_not_found_raises(self):
        repo = AsyncMock()
        repo.find_by_id.return_value = None
        use_case = GetCameraUseCase(repo)
        with pytest.raises(CameraNotFoundError, match="Camera not found"):
            await use_case.execute("nonexistent")


class TestUpdateCameraUseCase:
    """Tests for UpdateCameraUseCase"""

    @pytest.mark.asyncio
    async def test_update_keeps_password_when_omitted(self):
        repo = _saving_repo()
        repo.find_by_id.return_value = _make_camera("cam-1", "Old", username="admin", password="secret")
        cache = AsyncMock()
        use_case = UpdateCameraUseCase(repo, cache)

        result = await use_case.execute(
            "cam-1",
            CameraUpdateRequest(name="New", stream_url="rtsp://10.0.0.9/live", username="admin"),
        )

        saved = repo.save.await_args.args[0]
        assert saved.password == "secret"
        assert result.name == "New"
        assert result.stream_url == "rtsp://10.0.0.9/live"
        invalidated = {call.args[0] for call in cache.invalidate.await_args_list}
        assert invalidated == {"camera-Old", "camera-New"}

    @pytest.mark.asyncio
    async def test_update_missing_camera_raises(self):
        repo = _saving_repo()
        repo.find_by_id.return_value = None
        use_case = UpdateCameraUseCase(repo, AsyncMock())

        with pytest.raises(CameraNotFoundError):
            await use_case.execute("nope", CameraUpdateRequest(name="X", stream_url="rtsp://x/s"))

    @pytest.mark.asyncio
    async def test_update_requires_stream_url(self):
        use_case = UpdateCameraUseCase(_saving_repo(), AsyncMock())

        with pytest.raises(ValidationError):
            await use_case.execute("cam-1", CameraUpdateRequest(name="X", stream_url=" "))


class TestDeleteCameraUseCase:
    """Tests for DeleteCameraUseCase"""

    @pytest.mark.asyncio
    async def test_delete_invalidates_connection(self):
        repo = AsyncMock()
        repo.find_by_id.return_value = _make_camera("cam-1", "Porch")
        repo.delete.return_value = True
        cache = AsyncMock()

        await DeleteCameraUseCase(repo, cache).execute("cam-1")

        repo.delete.assert_awaited_once_with("cam-1")
        cache.invalidate.assert_awaited_once_with("camera-Porch")

    @pytest.mark.asyncio
    async def test_delete_missing_raises(self):
        repo = AsyncMock()
        repo.find_by_id.return_value = None

        with pytest.raises(CameraNotFoundError):
            await DeleteCameraUseCase(repo, AsyncMock()).execute("cam-1")
        repo.delete.assert_not_awaited()
