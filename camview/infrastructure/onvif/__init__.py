# ONVIF infrastructure exports
from .device_cache import DeviceConnectionCache
from .device_session import OnvifDeviceSession
from .discovery import OnvifDiscovery

__all__ = ["DeviceConnectionCache", "OnvifDeviceSession", "OnvifDiscovery"]
