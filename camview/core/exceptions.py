"""
Exception hierarchy for the camview backend.

Raised by use cases, the stream relay, frame capture and the ONVIF layer.
Controllers translate them into HTTP errors; the relay delivers them to the
viewer connection as an {"error": ...} message before closing it.
"""

# -----------------------------------------------------------------------------
# Standard library
# -----------------------------------------------------------------------------
from typing import Any, Dict, Optional


# -----------------------------------------------------------------------------
# Base
# -----------------------------------------------------------------------------


class CamviewError(Exception):
    """Base exception for all camview errors."""

    def __init__(
        self,
        message: str,
        user_message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.user_message = user_message or message
        self.details = details or {}


# -----------------------------------------------------------------------------
# Lookup / validation
# -----------------------------------------------------------------------------


class NotFoundError(CamviewError):
    """Raised when a camera or other record does not exist."""
    pass


class CameraNotFoundError(NotFoundError):
    """Raised when a camera id does not resolve to a registered camera."""

    def __init__(self, camera_id: str):
        super().__init__(
            f"Camera not found: {camera_id}",
            user_message="Camera not found.",
            details={"camera_id": camera_id},
        )
        self.camera_id = camera_id


class ValidationError(CamviewError):
    """Raised when a required field is missing or invalid."""
    pass


class ConfigurationError(CamviewError):
    """Raised when a setting required for an operation is not configured."""

    def __init__(self, setting_key: str, user_message: Optional[str] = None):
        super().__init__(
            f"Setting '{setting_key}' is not configured",
            user_message=user_message or f"{setting_key} is not configured.",
            details={"setting": setting_key},
        )
        self.setting_key = setting_key


# -----------------------------------------------------------------------------
# External collaborators
# -----------------------------------------------------------------------------


class UpstreamConnectionError(CamviewError):
    """Raised when a camera control session or feed cannot be reached."""
    pass


class TranscoderError(CamviewError):
    """Raised when the FFmpeg subprocess cannot be started or fails."""

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        stderr_tail: str = "",
        timed_out: bool = False,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.returncode = returncode
        self.stderr_tail = stderr_tail
        self.timed_out = timed_out


class VisionServiceError(CamviewError):
    """Raised when the vision model service returns an error."""
    pass


# -----------------------------------------------------------------------------
# Safe user-facing message
# -----------------------------------------------------------------------------

def get_user_message(exc: BaseException) -> str:
    """
    Return a user-facing message for any exception.
    Use this at API boundaries so internal details are never exposed.
    """
    if isinstance(exc, CamviewError) and getattr(exc, "user_message", None):
        return exc.user_message
    return "Something went wrong. Please try again."
