# External package imports
from fastapi import HTTPException, status

# Local application imports
from ...core.exceptions import (
    CamviewError,
    ConfigurationError,
    NotFoundError,
    TranscoderError,
    UpstreamConnectionError,
    ValidationError,
    VisionServiceError,
)


def status_code_for(exc: CamviewError) -> int:
    """HTTP status for a domain error."""
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, (ValidationError, ConfigurationError)):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, TranscoderError):
        return status.HTTP_504_GATEWAY_TIMEOUT if exc.timed_out else status.HTTP_502_BAD_GATEWAY
    if isinstance(exc, (UpstreamConnectionError, VisionServiceError)):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def to_http_exception(exc: CamviewError) -> HTTPException:
    return HTTPException(status_code=status_code_for(exc), detail=exc.user_message)
