"""
One-shot frame capture: RTSP -> FFmpeg (single JPEG) -> base64.

Feeds vision queries and the snapshot endpoint. Every capture spawns its own
short-lived FFmpeg process; nothing is shared with the live stream relay.
"""

import asyncio
import base64
import logging
import time
from typing import List, Optional

from ...core.config import Settings, get_settings
from ...core.exceptions import CameraNotFoundError, ValidationError
from ...domain.models.camera import Camera
from ...domain.repositories.camera_repository import CameraRepository
from ...utils.url_utils import with_credentials
from .ffmpeg_transcoder import FfmpegTranscoder

logger = logging.getLogger(__name__)


class FrameCaptureService:
    """Single and multi-frame JPEG capture from a registered camera."""

    def __init__(
        self,
        camera_repository: CameraRepository,
        transcoder: Optional[FfmpegTranscoder] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        settings = settings or get_settings()
        self._camera_repository = camera_repository
        self._transcoder = transcoder or FfmpegTranscoder(settings)
        self._timeout_sec: float = settings.frame_capture_timeout_sec
        self._min_frames: int = settings.frame_capture_min
        self._max_frames: int = settings.frame_capture_max

    async def _feed_url(self, camera_id: str) -> str:
        camera: Optional[Camera] = await self._camera_repository.find_by_id(camera_id)
        if camera is None:
            raise CameraNotFoundError(camera_id)
        if not camera.stream_url:
            raise ValidationError(
                f"Camera {camera_id} has no stream URL",
                user_message="RTSP URL not available for this camera.",
            )
        return with_credentials(camera.stream_url, camera.username, camera.password)

    async def capture_jpeg(self, camera_id: str) -> bytes:
        """
        Capture one frame as raw JPEG bytes.

        Raises:
            CameraNotFoundError: camera does not exist
            ValidationError: camera has no stream URL
            TranscoderError: FFmpeg failed or timed out
        """
        feed_url = await self._feed_url(camera_id)
        return await self._transcoder.capture_still(feed_url, timeout=self._timeout_sec)

    async def capture_frame(self, camera_id: str) -> str:
        """Capture one frame and return it base64-encoded."""
        jpeg = await self.capture_jpeg(camera_id)
        return base64.b64encode(jpeg).decode("ascii")

    def clamp_count(self, count: Optional[int]) -> int:
        if count is None:
            return self._min_frames
        return max(self._min_frames, min(self._max_frames, int(count)))

    async def capture_frames(self, camera_id: str, count: int, interval_ms: int) -> List[str]:
        """
        Capture up to count frames sequentially, sleeping interval_ms between them.

        count is clamped to the configured [min, max]. A failure on the first
        frame propagates; a later failure returns the frames captured so far.
        """
        count = self.clamp_count(count)
        interval_sec = max(0, interval_ms) / 1000.0
        frames: List[str] = []

        for index in range(count):
            if index > 0 and interval_sec:
                await asyncio.sleep(interval_sec)
            started = time.monotonic()
            try:
                frames.append(await self.capture_frame(camera_id))
            except Exception as e:
                if not frames:
                    raise
                logger.warning(
                    "Frame %d/%d for camera %s failed, returning %d frame(s): %s",
                    index + 1,
                    count,
                    camera_id,
                    len(frames),
                    e,
                )
                break
            logger.debug(
                "Captured frame %d/%d for camera %s in %.0fms",
                index + 1,
                count,
                camera_id,
                (time.monotonic() - started) * 1000,
            )

        return frames
