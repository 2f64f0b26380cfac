from .query_vision import QueryVisionUseCase, build_prompt, image_line

__all__ = ["QueryVisionUseCase", "build_prompt", "image_line"]
