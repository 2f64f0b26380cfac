"""External service clients for communicating with external systems"""

from .ollama_vision_service import OllamaVisionService, VisionChunk

__all__ = [
    "OllamaVisionService",
    "VisionChunk",
]
