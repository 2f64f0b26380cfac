"""
Streaming API: live camera stream (WebSocket MJPEG relay), stream status, snapshot.
"""

# -----------------------------------------------------------------------------
# Standard library
# -----------------------------------------------------------------------------
import logging

# -----------------------------------------------------------------------------
# Third-party
# -----------------------------------------------------------------------------
from fastapi import APIRouter, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import Response

# -----------------------------------------------------------------------------
# Application
# -----------------------------------------------------------------------------
from ...application.use_cases.camera.get_camera import GetCameraUseCase
from ...core.exceptions import CamviewError
from ...di.container import get_container
from ...infrastructure.streaming import FrameCaptureService, StreamRelay
from .errors import to_http_exception

# -----------------------------------------------------------------------------
# Logging and router
# -----------------------------------------------------------------------------
logger = logging.getLogger(__name__)

router = APIRouter(tags=["streaming"])


@router.get("/{camera_id}/status")
async def get_stream_status(camera_id: str, request: Request) -> dict:
    """
    Get status of the WebSocket live stream for a camera.

    Returns:
        Live stream status information

    Raises:
        HTTPException: If camera not found
    """
    container = get_container()
    try:
        await container.get(GetCameraUseCase).execute(camera_id=camera_id)
    except CamviewError as e:
        raise to_http_exception(e)

    relay: StreamRelay = container.get(StreamRelay)

    ws_scheme = "wss" if request.url.scheme == "https" else "ws"
    host = request.headers.get("host", "localhost")
    ws_url = f"{ws_scheme}://{host}/api/v1/streams/{camera_id}/ws"

    return {
        "camera_id": camera_id,
        "is_streaming": relay.is_streaming(camera_id),
        "ws_url": ws_url,
        "viewers": relay.get_viewer_count(camera_id),
        "buffered_chunks": relay.get_buffered_chunk_count(camera_id),
        "last_error": relay.get_last_error(camera_id),
    }


@router.get("/{camera_id}/snapshot.jpg")
async def get_camera_snapshot(camera_id: str) -> Response:
    """Return a single JPEG snapshot for the given camera."""
    container = get_container()
    frame_capture: FrameCaptureService = container.get(FrameCaptureService)

    try:
        jpeg = await frame_capture.capture_jpeg(camera_id)
    except CamviewError as e:
        logger.warning("Snapshot failed for camera %s: %s", camera_id, e.message)
        raise to_http_exception(e)

    return Response(
        content=jpeg,
        media_type="image/jpeg",
        headers={
            "Cache-Control": "no-store, max-age=0",
            "Pragma": "no-cache",
        },
    )


@router.websocket("/{camera_id}/ws")
async def websocket_live_stream(websocket: WebSocket, camera_id: str) -> None:
    """
    WebSocket live stream endpoint.

    Streaming:
    - Server pushes MJPEG bytes as binary frames.
    - 1 FFmpeg process per camera; shared across viewers when keep_streams_open is on.
    - Failures arrive as a text frame {"error": "..."} before the socket closes.
    """
    await websocket.accept()

    container = get_container()
    relay: StreamRelay = container.get(StreamRelay)

    if not await relay.attach(camera_id, websocket):
        return

    try:
        # Keep the connection open; client messages are ignored.
        # After client disconnect, receive() can raise RuntimeError if called again, so check message type and break.
        while True:
            msg = await websocket.receive()
            if msg.get("type") == "websocket.disconnect":
                break
    except WebSocketDisconnect:
        pass
    except RuntimeError as e:
        if "disconnect" not in str(e).lower():
            logger.error("WebSocket error for camera %s: %s", camera_id, e, exc_info=True)
    except Exception as e:
        logger.error("WebSocket error for camera %s: %s", camera_id, e, exc_info=True)
    finally:
        await relay.detach(camera_id, websocket)
