# Standard library imports
import logging
from typing import AsyncIterator

# External package imports
from fastapi import APIRouter
from fastapi.responses import StreamingResponse

# Local application imports
from ...application.dto.vision_dto import VisionQueryRequest
from ...application.use_cases.vision import QueryVisionUseCase
from ...core.exceptions import CamviewError, get_user_message
from ...di.container import get_container
from .errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["vision"])


async def _guarded(chunks: AsyncIterator[str]) -> AsyncIterator[str]:
    """Headers are already sent once streaming starts; report failures inline."""
    try:
        async for chunk in chunks:
            yield chunk
    except CamviewError as exception:
        logger.error(f"Vision query failed mid-stream: {exception.message}")
        yield f"\n{get_user_message(exception)}"


@router.post("/query")
async def query_vision(request: VisionQueryRequest) -> StreamingResponse:
    """
    Ask the configured vision model about live frames from a camera.

    Response body (text/plain, chunked):
    - one "data:image/jpeg;base64,..." line per captured frame
    - then the model's streamed tokens
    """
    container = get_container()
    query_use_case = container.get(QueryVisionUseCase)

    try:
        chunks = await query_use_case.execute(request)
    except CamviewError as exception:
        logger.error(f"Error querying vision model: {exception.message}")
        raise to_http_exception(exception)

    return StreamingResponse(_guarded(chunks), media_type="text/plain")
