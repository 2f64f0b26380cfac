# Standard library imports
import logging
from typing import AsyncIterator, List

# Local application imports
from ....core.exceptions import ConfigurationError, ValidationError
from ....domain.constants.settings_keys import SettingsKeys
from ....domain.repositories.settings_repository import SettingsRepository
from ....infrastructure.external.ollama_vision_service import OllamaVisionService
from ....infrastructure.streaming.frame_capture import FrameCaptureService
from ...dto.vision_dto import VisionQueryRequest

logger = logging.getLogger(__name__)

THINK_TEMPLATE = """Please analyze this image and provide your reasoning.
First, think step by step about what you see to improve your response, and share your thoughts in a "thoughts" key.
Then, provide the final answer in a "value" key.
The response should be in JSON format with keys "thoughts" and "value".

{prompt}"""

ARRAY_TEMPLATE = """Please analyze this image and provide a list of items.
Return your response as a JSON object with a "value" key containing an array.

{prompt}"""

SINGLE_FRAME_TEMPLATE = """Attached is a single frame from a security camera. Assistant's task is to evaluate and respond to the following query:

{prompt}"""

MULTI_FRAME_TEMPLATE = """Attached are {count} consecutive frames from a security camera, taken {interval_ms}ms apart in chronological order. Assistant's task is to evaluate and respond to the following query:

{prompt}"""


def build_prompt(request: VisionQueryRequest, frame_count: int = 1) -> str:
    """Wrap the user prompt according to think / response_type."""
    prompt = request.prompt or ""
    if request.think:
        return THINK_TEMPLATE.format(prompt=prompt)
    if request.response_type == "array":
        return ARRAY_TEMPLATE.format(prompt=prompt)
    if frame_count > 1:
        return MULTI_FRAME_TEMPLATE.format(count=frame_count, interval_ms=request.interval_ms, prompt=prompt)
    return SINGLE_FRAME_TEMPLATE.format(prompt=prompt)


def image_line(frame_b64: str) -> str:
    return f"data:image/jpeg;base64,{frame_b64}\n"


class QueryVisionUseCase:
    """
    Use case for asking a vision-language model about live camera frames.

    execute() validates the request and captures the frames up front, so those
    failures surface before any response bytes are sent. It then returns an
    async iterator that yields one data-URI line per frame followed by the
    model's tokens.
    """

    def __init__(
        self,
        settings_repository: SettingsRepository,
        frame_capture: FrameCaptureService,
        vision_service: OllamaVisionService,
    ) -> None:
        self.settings_repository = settings_repository
        self.frame_capture = frame_capture
        self.vision_service = vision_service

    async def execute(self, request: VisionQueryRequest) -> AsyncIterator[str]:
        """
        Raises:
            ConfigurationError: Ollama host or model not configured
            ValidationError: prompt or camera id missing
            CameraNotFoundError / TranscoderError: first frame could not be captured
        """
        host = await self.settings_repository.get(SettingsKeys.OLLAMA_HOST)
        model = await self.settings_repository.get(SettingsKeys.OLLAMA_MODEL)
        if not host:
            raise ConfigurationError(SettingsKeys.OLLAMA_HOST, user_message="Ollama Host is not configured.")
        if not model:
            raise ConfigurationError(SettingsKeys.OLLAMA_MODEL, user_message="Ollama Model is not configured.")
        if not request.prompt:
            raise ValidationError("Prompt is required", user_message="Prompt is required.")
        if not request.camera_id:
            raise ValidationError("Camera ID is required", user_message="Camera ID is required.")

        frames = await self.frame_capture.capture_frames(
            request.camera_id,
            request.frame_count,
            request.interval_ms,
        )
        prompt = build_prompt(request, len(frames))
        logger.info(
            f"Vision query on camera {request.camera_id} with model {model} ({len(frames)} frame(s))"
        )
        return self._stream(host, model, prompt, frames, not request.is_custom)

    async def _stream(
        self,
        host: str,
        model: str,
        prompt: str,
        frames: List[str],
        json_format: bool,
    ) -> AsyncIterator[str]:
        for frame in frames:
            yield image_line(frame)

        last_chunk = None
        async for chunk in self.vision_service.generate_stream(host, model, prompt, frames, json_format):
            if chunk.text:
                yield chunk.text
            last_chunk = chunk

        if last_chunk is not None and last_chunk.total_tokens is not None:
            logger.info(f"Total tokens: {last_chunk.total_tokens}")
