from typing import Literal, Optional
from pydantic import BaseModel, Field


class VisionQueryRequest(BaseModel):
    """DTO for a vision-model query against live camera frames"""
    prompt: Optional[str] = None
    camera_id: Optional[str] = None
    response_type: Literal["string", "array"] = "string"
    think: bool = False
    is_custom: bool = False
    frame_count: int = 1  # clamped by FrameCaptureService
    interval_ms: int = Field(default=1000, ge=0, le=60_000)
