from typing import Optional
from pydantic import BaseModel, Field

from ...domain.models.camera import Camera


class CameraCreateRequest(BaseModel):
    """DTO for camera registration request (camera is reached over ONVIF)"""
    name: str = Field(min_length=1, max_length=200)
    host: str = Field(min_length=1, max_length=255)
    port: Optional[int] = Field(default=None, ge=1, le=65535)
    username: Optional[str] = None
    password: Optional[str] = None


class CameraUpdateRequest(BaseModel):
    """DTO for camera update request. A None password keeps the stored one."""
    name: str
    stream_url: str
    onvif_url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None


class CameraResponse(BaseModel):
    """DTO for camera response (password is never returned)"""
    id: str
    name: str
    stream_url: str
    onvif_url: Optional[str] = None
    username: Optional[str] = None
    has_password: bool = False

    @classmethod
    def from_domain(cls, camera: Camera) -> "CameraResponse":
        return cls(
            id=camera.id or "",
            name=camera.name,
            stream_url=camera.stream_url,
            onvif_url=camera.onvif_url,
            username=camera.username,
            has_password=bool(camera.password),
        )


class MessageResponse(BaseModel):
    """Generic acknowledgement"""
    message: str
