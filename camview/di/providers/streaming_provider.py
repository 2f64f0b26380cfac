from typing import TYPE_CHECKING
from ...domain.repositories.camera_repository import CameraRepository
from ...domain.repositories.settings_repository import SettingsRepository
from ...infrastructure.streaming import FfmpegTranscoder, FrameCaptureService, StreamRelay

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class StreamingProvider:
    """Streaming service provider - registers the live relay and frame capture."""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register streaming services.
        All are singletons: the relay owns the per-camera FFmpeg processes for
        the lifetime of the application.
        """
        try:
            container.get(FfmpegTranscoder)
        except ValueError:
            container.register_singleton(FfmpegTranscoder, FfmpegTranscoder())

        try:
            container.get(StreamRelay)
        except ValueError:
            container.register_singleton(
                StreamRelay,
                StreamRelay(
                    camera_repository=container.get(CameraRepository),
                    settings_repository=container.get(SettingsRepository),
                    transcoder=container.get(FfmpegTranscoder),
                ),
            )

        try:
            container.get(FrameCaptureService)
        except ValueError:
            container.register_singleton(
                FrameCaptureService,
                FrameCaptureService(
                    camera_repository=container.get(CameraRepository),
                    transcoder=container.get(FfmpegTranscoder),
                ),
            )
