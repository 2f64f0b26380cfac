from typing import TYPE_CHECKING
from ...domain.repositories.camera_repository import CameraRepository
from ...application.use_cases.camera import (
    CreateCameraUseCase,
    ListCamerasUseCase,
    GetCameraUseCase,
    UpdateCameraUseCase,
    DeleteCameraUseCase,
)
from ...application.use_cases.onvif import DiscoverDevicesUseCase, ControlPtzUseCase
from ...infrastructure.onvif import DeviceConnectionCache, OnvifDiscovery

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class CameraProvider:
    """Camera use case provider - registers camera CRUD, discovery and PTZ use cases"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register all camera use cases.
        Use cases are created on-demand via factories.
        """
        container.register_factory(
            CreateCameraUseCase,
            lambda: CreateCameraUseCase(
                camera_repository=container.get(CameraRepository),
                device_cache=container.get(DeviceConnectionCache),
            )
        )

        container.register_factory(
            ListCamerasUseCase,
            lambda: ListCamerasUseCase(
                camera_repository=container.get(CameraRepository)
            )
        )

        container.register_factory(
            GetCameraUseCase,
            lambda: GetCameraUseCase(
                camera_repository=container.get(CameraRepository)
            )
        )

        container.register_factory(
            UpdateCameraUseCase,
            lambda: UpdateCameraUseCase(
                camera_repository=container.get(CameraRepository),
                device_cache=container.get(DeviceConnectionCache),
            )
        )

        container.register_factory(
            DeleteCameraUseCase,
            lambda: DeleteCameraUseCase(
                camera_repository=container.get(CameraRepository),
                device_cache=container.get(DeviceConnectionCache),
            )
        )

        container.register_factory(
            DiscoverDevicesUseCase,
            lambda: DiscoverDevicesUseCase(
                discovery=container.get(OnvifDiscovery)
            )
        )

        container.register_factory(
            ControlPtzUseCase,
            lambda: ControlPtzUseCase(
                camera_repository=container.get(CameraRepository),
                device_cache=container.get(DeviceConnectionCache),
            )
        )
