from .camera_controller import router as camera_router
from .onvif_controller import router as onvif_router
from .settings_controller import router as settings_router
from .streaming_controller import router as streaming_router
from .vision_controller import router as vision_router


__all__ = ["camera_router", "onvif_router", "settings_router", "streaming_router", "vision_router"]
