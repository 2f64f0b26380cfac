# Standard library imports
from dataclasses import dataclass
from typing import Optional


@dataclass
class Camera:
    """
    Pure domain model for Camera entity - no external dependencies.

    stream_url is the feed address consumed by the transcoder; onvif_url is
    the device-management (control) address used for PTZ.
    """
    id: Optional[str]
    name: str
    stream_url: str
    onvif_url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    def __post_init__(self) -> None:
        """Business validations"""
        if not self.name or len(self.name.strip()) < 1:
            raise ValueError("Camera name is required")
        if not self.stream_url or len(self.stream_url.strip()) < 1:
            raise ValueError("Stream URL is required")

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.password)

    @property
    def connection_cache_key(self) -> str:
        """Stable key for the ONVIF connection cache."""
        return f"camera-{self.name}"
