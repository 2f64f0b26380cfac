from typing import TYPE_CHECKING
from ...infrastructure.onvif import DeviceConnectionCache, OnvifDiscovery

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class OnvifProvider:
    """ONVIF provider - registers the shared device connection cache and discovery."""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        # One cache per application so every request reuses the same sessions
        try:
            container.get(DeviceConnectionCache)
        except ValueError:
            container.register_singleton(DeviceConnectionCache, DeviceConnectionCache())

        try:
            container.get(OnvifDiscovery)
        except ValueError:
            container.register_singleton(OnvifDiscovery, OnvifDiscovery())
