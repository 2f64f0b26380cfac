import asyncio
import logging
import subprocess
from collections import deque
from typing import Deque, List, Optional

from ...core.config import Settings, get_settings
from ...core.exceptions import TranscoderError
from ...utils.url_utils import redact_credentials

logger = logging.getLogger(__name__)

_STDERR_TAIL_LINES = 20


class TranscodeProcess:
    """
    A running FFmpeg process writing the transcoded stream to stdout.

    stderr is drained continuously into a short tail so a full pipe never
    stalls FFmpeg and the last lines are available as a diagnostic.
    """

    def __init__(self, process: asyncio.subprocess.Process) -> None:
        self._process = process
        self._stderr_tail: Deque[str] = deque(maxlen=_STDERR_TAIL_LINES)
        self._stderr_task: Optional[asyncio.Task] = None
        if process.stderr is not None:
            self._stderr_task = asyncio.create_task(self._drain_stderr())

    @property
    def pid(self) -> Optional[int]:
        return self._process.pid

    @property
    def returncode(self) -> Optional[int]:
        return self._process.returncode

    async def read(self, size: int) -> bytes:
        """Read up to size bytes of output; b"" at EOF."""
        if self._process.stdout is None:
            return b""
        return await self._process.stdout.read(size)

    async def wait(self) -> int:
        returncode = await self._process.wait()
        if self._stderr_task is not None:
            try:
                await asyncio.wait_for(self._stderr_task, timeout=1.0)
            except (asyncio.TimeoutError, asyncio.CancelledError):
                pass
        return returncode

    def kill(self) -> None:
        """SIGKILL the process; no graceful drain."""
        if self._process.returncode is None:
            try:
                self._process.kill()
            except ProcessLookupError:
                pass

    def stderr_tail(self) -> str:
        return "\n".join(self._stderr_tail)

    async def _drain_stderr(self) -> None:
        try:
            while True:
                line = await self._process.stderr.readline()
                if not line:
                    return
                text = line.decode("utf-8", errors="ignore").rstrip()
                if text:
                    self._stderr_tail.append(text)
                    logger.debug("ffmpeg[%s]: %s", self._process.pid, text)
        except asyncio.CancelledError:
            return
        except Exception:
            logger.debug("stderr drain stopped for ffmpeg[%s]", self._process.pid, exc_info=True)


class FfmpegTranscoder:
    """
    Builds and launches FFmpeg invocations.

    - spawn_stream(): long-running RTSP -> MJPEG (fixed profile) to stdout
    - capture_still(): one-shot single JPEG frame to stdout
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()

    def build_stream_cmd(self, feed_url: str) -> List[str]:
        s = self._settings
        return [
            s.ffmpeg_path,
            "-hide_banner",
            "-loglevel",
            "warning",
            # RTSP input stability
            "-rtsp_transport",
            "tcp",
            "-buffer_size",
            str(s.stream_buffer_size),
            "-i",
            feed_url,
            "-an",
            "-f",
            s.stream_format,
            "-q:v",
            str(s.stream_quality),
            "-r",
            str(s.stream_fps),
            "-s",
            s.stream_resolution,
            "pipe:1",
        ]

    def build_capture_cmd(self, feed_url: str) -> List[str]:
        return [
            self._settings.ffmpeg_path,
            "-hide_banner",
            "-loglevel",
            "error",
            "-rtsp_transport",
            "tcp",
            "-i",
            feed_url,
            "-an",
            "-frames:v",
            "1",
            "-f",
            "image2pipe",
            "-vcodec",
            "mjpeg",
            "pipe:1",
        ]

    async def spawn_stream(self, feed_url: str) -> TranscodeProcess:
        """
        Start the streaming transcoder for feed_url.

        Raises:
            TranscoderError: if ffmpeg cannot be started
        """
        cmd = self.build_stream_cmd(feed_url)
        logger.info("Starting ffmpeg stream for %s", redact_credentials(feed_url))
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except FileNotFoundError:
            raise TranscoderError(
                f"ffmpeg executable not found: {self._settings.ffmpeg_path}",
                user_message="ffmpeg not found on server.",
            )
        except OSError as e:
            raise TranscoderError(f"Failed to start ffmpeg: {e}", user_message=f"FFmpeg error: {e}")

        logger.debug("ffmpeg started: pid=%s", process.pid)
        return TranscodeProcess(process)

    async def capture_still(self, feed_url: str, timeout: Optional[float] = None) -> bytes:
        """
        Grab exactly one JPEG frame from feed_url.

        Raises:
            TranscoderError: on spawn failure, non-zero exit, empty output or timeout
        """
        timeout = timeout if timeout is not None else self._settings.frame_capture_timeout_sec
        cmd = self.build_capture_cmd(feed_url)
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except FileNotFoundError:
            raise TranscoderError(
                f"ffmpeg executable not found: {self._settings.ffmpeg_path}",
                user_message="ffmpeg not found on server.",
            )
        except OSError as e:
            raise TranscoderError(f"Failed to start ffmpeg: {e}", user_message=f"FFmpeg error: {e}")

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            if process.returncode is None:
                try:
                    process.kill()
                except ProcessLookupError:
                    pass
                await process.wait()
            raise TranscoderError(
                f"Frame capture timed out after {timeout}s",
                user_message="Frame capture timed out.",
                timed_out=True,
            )

        if process.returncode != 0 or not stdout:
            err = (stderr or b"").decode("utf-8", errors="ignore")[-500:]
            logger.warning(
                "Frame capture failed for %s (code %s): %s",
                redact_credentials(feed_url),
                process.returncode,
                err,
            )
            raise TranscoderError(
                f"ffmpeg exited with code {process.returncode}",
                user_message=f"FFmpeg error: {err.strip() or 'no frame captured'}",
                returncode=process.returncode,
                stderr_tail=err,
            )

        return stdout
