from .discover_devices import DiscoverDevicesUseCase
from .control_ptz import ControlPtzUseCase, PTZ_DIRECTIONS

__all__ = ["DiscoverDevicesUseCase", "ControlPtzUseCase", "PTZ_DIRECTIONS"]
