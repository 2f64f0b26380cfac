from typing import List, Literal
from pydantic import BaseModel, Field


PtzCommand = Literal["moveUp", "moveDown", "moveLeft", "moveRight", "zoomIn", "zoomOut", "stop"]


class DiscoveredDeviceResponse(BaseModel):
    """ONVIF device found by WS-Discovery"""
    urn: str
    name: str
    xaddrs: List[str] = Field(default_factory=list)
    scopes: List[str] = Field(default_factory=list)


class PtzCommandRequest(BaseModel):
    """DTO for a PTZ control command"""
    command: str
    speed: float = Field(default=0.5, ge=0.0, le=1.0)
