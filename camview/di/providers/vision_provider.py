from typing import TYPE_CHECKING
from ...domain.repositories.settings_repository import SettingsRepository
from ...application.use_cases.vision import QueryVisionUseCase
from ...infrastructure.external import OllamaVisionService
from ...infrastructure.streaming import FrameCaptureService

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class VisionProvider:
    """Vision query provider - registers the Ollama client and query use case"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        try:
            container.get(OllamaVisionService)
        except ValueError:
            container.register_singleton(OllamaVisionService, OllamaVisionService())

        container.register_factory(
            QueryVisionUseCase,
            lambda: QueryVisionUseCase(
                settings_repository=container.get(SettingsRepository),
                frame_capture=container.get(FrameCaptureService),
                vision_service=container.get(OllamaVisionService),
            )
        )
