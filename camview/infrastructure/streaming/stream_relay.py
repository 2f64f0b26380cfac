import asyncio
import json
import logging
import time
from contextlib import asynccontextmanager
from collections import deque
from dataclasses import dataclass, field
from typing import AsyncIterator, Callable, Deque, Dict, List, Optional, Set

from fastapi import WebSocket
from fastapi.websockets import WebSocketState

from ...core.config import Settings, get_settings
from ...core.exceptions import CameraNotFoundError, CamviewError, ValidationError
from ...domain.constants import SettingsKeys, parse_bool_setting
from ...domain.models.camera import Camera
from ...domain.repositories.camera_repository import CameraRepository
from ...domain.repositories.settings_repository import SettingsRepository
from ...utils.url_utils import with_credentials
from .ffmpeg_transcoder import FfmpegTranscoder, TranscodeProcess

logger = logging.getLogger(__name__)

SLOW_VIEWER_MESSAGE = "Viewer too slow; disconnected."


@dataclass
class RelayEntry:
    camera_id: str
    process: TranscodeProcess
    replay_buffer: Deque[bytes]
    viewers: Set[WebSocket] = field(default_factory=set)
    # Viewers removed by the pump after a failed send; still count as owners for detach()
    dropped: Set[WebSocket] = field(default_factory=set)
    last_activity: float = 0.0
    pump_task: Optional[asyncio.Task] = None
    delivery_lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    closed: bool = False


class StreamRelay:
    """
    Live streaming relay: RTSP -> FFmpeg (MJPEG) -> WebSocket viewers.

    - At most 1 FFmpeg process per camera id (attach/detach serialized per camera)
    - N viewers per camera when keep_streams_open is enabled, each new viewer
      first receives the replay buffer, then live chunks
    - keep_streams_open disabled: one viewer per stream, detach kills FFmpeg
    - Entries with no viewers are killed by the idle sweep
    """

    def __init__(
        self,
        camera_repository: CameraRepository,
        settings_repository: SettingsRepository,
        transcoder: Optional[FfmpegTranscoder] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        settings = settings or get_settings()
        self._camera_repository = camera_repository
        self._settings_repository = settings_repository
        self._transcoder = transcoder or FfmpegTranscoder(settings)
        self._clock = clock

        self._read_chunk_size: int = settings.stream_read_chunk_size
        self._replay_chunks: int = settings.stream_replay_chunks
        self._idle_timeout_sec: float = settings.stream_idle_timeout_sec
        self._sweep_interval_sec: float = settings.stream_sweep_interval_sec
        self._send_timeout_sec: float = settings.ws_send_timeout_sec

        self._entries: Dict[str, RelayEntry] = {}
        self._camera_locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}
        self._closing_tasks: Set[asyncio.Task] = set()
        self._last_errors: Dict[str, str] = {}
        self._sweep_task: Optional[asyncio.Task] = None

        logger.info("StreamRelay initialized")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def attach(self, camera_id: str, viewer: WebSocket) -> bool:
        """
        Attach an accepted websocket to the camera's stream.

        Returns True when the viewer is attached. On failure the error is sent
        to the viewer as {"error": ...}, the connection is closed and False is
        returned.
        """
        try:
            keep_open = await self._keep_streams_open()
            async with self._camera_lock(camera_id):
                entry = self._entries.get(camera_id)
                joining = keep_open and entry is not None and not entry.closed
                if joining:
                    joined = await self._join_existing(entry, viewer)
                else:
                    camera = await self._resolve_camera(camera_id)
                    feed_url = with_credentials(camera.stream_url, camera.username, camera.password)

                    if entry is not None:
                        await self._terminate(entry, notice="Stream taken over by another viewer.")

                    process = await self._transcoder.spawn_stream(feed_url)
                    entry = RelayEntry(
                        camera_id=camera_id,
                        process=process,
                        replay_buffer=deque(maxlen=self._replay_chunks),
                        last_activity=self._clock(),
                    )
                    entry.viewers.add(viewer)
                    self._entries[camera_id] = entry
                    self._last_errors.pop(camera_id, None)
                    entry.pump_task = asyncio.create_task(self._pump(entry))
        except CamviewError as e:
            logger.warning("Stream attach rejected for camera %s: %s", camera_id, e.message)
            await self._reject(viewer, e.user_message)
            return False
        except Exception as e:
            logger.error("Error attaching viewer to camera %s: %s", camera_id, e, exc_info=True)
            await self._reject(viewer, "Failed to fetch camera details.")
            return False

        if joining:
            if not joined:
                logger.warning("Viewer could not keep up with replay for camera %s", camera_id)
                await self._close_viewers([viewer], {"error": SLOW_VIEWER_MESSAGE})
                return False
            logger.info("Viewer joined shared stream for camera %s. viewers=%d", camera_id, len(entry.viewers))
            return True

        logger.info("Stream started for camera %s (pid=%s)", camera_id, entry.process.pid)
        return True

    async def detach(self, camera_id: str, viewer: WebSocket) -> None:
        """
        Detach a viewer.

        keep_streams_open disabled: the FFmpeg process is killed right away,
        whatever other viewers remain. Enabled: the process keeps running and
        becomes eligible for the idle sweep once no viewers are left.
        """
        try:
            keep_open = await self._keep_streams_open()
        except Exception:
            logger.error("Could not read keep_streams_open; treating as disabled", exc_info=True)
            keep_open = False

        async with self._camera_lock(camera_id):
            entry = self._entries.get(camera_id)
            if entry is None:
                return
            if viewer not in entry.viewers and viewer not in entry.dropped:
                # Viewer belonged to an entry that has already been replaced
                return

            entry.viewers.discard(viewer)
            entry.dropped.discard(viewer)

            if not keep_open:
                await self._terminate(entry, notice="Stream closed.")
                logger.info("Viewer detached; stream for camera %s stopped", camera_id)
                return

            if not entry.viewers:
                entry.last_activity = self._clock()

        logger.info("Viewer detached from camera %s. viewers=%d", camera_id, self.get_viewer_count(camera_id))

    async def sweep_idle(self) -> List[str]:
        """
        Kill every entry with no viewers whose last activity is older than the
        idle timeout. Returns the camera ids that were stopped.
        """
        stopped: List[str] = []
        for camera_id in list(self._entries.keys()):
            if not self._is_idle(self._entries.get(camera_id)):
                continue
            async with self._camera_lock(camera_id):
                entry = self._entries.get(camera_id)
                if not self._is_idle(entry):
                    continue
                await self._terminate(entry)
                stopped.append(camera_id)
                logger.info("Idle stream for camera %s stopped", camera_id)
        return stopped

    def start(self) -> None:
        """Start the background idle sweep (call from the running event loop)."""
        if self._sweep_task is None or self._sweep_task.done():
            self._sweep_task = asyncio.create_task(self._sweep_loop())
            logger.info(
                "Idle sweep started (interval=%ss, idle_timeout=%ss)",
                self._sweep_interval_sec,
                self._idle_timeout_sec,
            )

    async def shutdown(self) -> None:
        """Stop the sweep and kill every stream."""
        if self._sweep_task is not None and not self._sweep_task.done():
            self._sweep_task.cancel()
            try:
                await self._sweep_task
            except asyncio.CancelledError:
                pass
        self._sweep_task = None

        for camera_id in list(self._entries.keys()):
            try:
                async with self._camera_lock(camera_id):
                    entry = self._entries.get(camera_id)
                    if entry is not None:
                        await self._terminate(entry, notice="Server shutting down.")
            except Exception:
                logger.exception("Error stopping stream for camera %s", camera_id)

        if self._closing_tasks:
            await asyncio.gather(*self._closing_tasks, return_exceptions=True)

    def is_streaming(self, camera_id: str) -> bool:
        entry = self._entries.get(camera_id)
        return entry is not None and not entry.closed and entry.process.returncode is None

    def get_viewer_count(self, camera_id: str) -> int:
        entry = self._entries.get(camera_id)
        return len(entry.viewers) if entry else 0

    def get_last_error(self, camera_id: str) -> Optional[str]:
        return self._last_errors.get(camera_id)

    def get_buffered_chunk_count(self, camera_id: str) -> int:
        entry = self._entries.get(camera_id)
        return len(entry.replay_buffer) if entry else 0

    def active_camera_ids(self) -> List[str]:
        return list(self._entries.keys())

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _camera_lock(self, camera_id: str) -> AsyncIterator[None]:
        """Serialize attach/detach/sweep per camera; the lock lives only while used or streaming."""
        lock = self._camera_locks.setdefault(camera_id, asyncio.Lock())
        self._lock_users[camera_id] = self._lock_users.get(camera_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[camera_id] -= 1
            self._discard_lock(camera_id)

    def _discard_lock(self, camera_id: str) -> None:
        if self._lock_users.get(camera_id, 0) == 0 and camera_id not in self._entries:
            self._lock_users.pop(camera_id, None)
            self._camera_locks.pop(camera_id, None)

    async def _keep_streams_open(self) -> bool:
        value = await self._settings_repository.get(SettingsKeys.KEEP_STREAMS_OPEN)
        return parse_bool_setting(value)

    async def _resolve_camera(self, camera_id: str) -> Camera:
        camera = await self._camera_repository.find_by_id(camera_id)
        if camera is None:
            raise CameraNotFoundError(camera_id)
        if not camera.stream_url:
            raise ValidationError(
                f"Camera {camera_id} has no stream URL",
                user_message="RTSP URL not available for this camera.",
            )
        return camera

    def _is_idle(self, entry: Optional[RelayEntry]) -> bool:
        if entry is None or entry.viewers:
            return False
        return self._clock() - entry.last_activity > self._idle_timeout_sec

    async def _join_existing(self, entry: RelayEntry, viewer: WebSocket) -> bool:
        # Live chunks wait on the delivery lock until the replay is done.
        # The whole replay shares one send timeout.
        async with entry.delivery_lock:
            if not self._is_open(viewer):
                return False
            try:
                await asyncio.wait_for(
                    self._replay(viewer, list(entry.replay_buffer)),
                    timeout=self._send_timeout_sec,
                )
            except Exception:
                return False
            entry.viewers.add(viewer)
            entry.last_activity = self._clock()
        return True

    async def _replay(self, viewer: WebSocket, chunks: List[bytes]) -> None:
        for chunk in chunks:
            await viewer.send_bytes(chunk)

    async def _pump(self, entry: RelayEntry) -> None:
        """Read FFmpeg stdout and fan every chunk out to the attached viewers."""
        error: Optional[str] = None
        try:
            while True:
                chunk = await entry.process.read(self._read_chunk_size)
                if not chunk:
                    break
                await self._fan_out(entry, chunk)

            returncode = await entry.process.wait()
            if returncode != 0:
                error = entry.process.stderr_tail() or f"ffmpeg exited with code {returncode}"
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.exception("Error relaying ffmpeg output for camera %s", entry.camera_id)
            error = str(e) or e.__class__.__name__
            entry.process.kill()
            await entry.process.wait()

        if not entry.closed:
            await self._finish(entry, error)

    async def _fan_out(self, entry: RelayEntry, chunk: bytes) -> None:
        async with entry.delivery_lock:
            entry.replay_buffer.append(chunk)
            viewers = list(entry.viewers)
            if not viewers:
                return

            results = await asyncio.gather(*(self._send_bytes(ws, chunk) for ws in viewers))
            dropped = [ws for ws, delivered in zip(viewers, results) if not delivered]
            for ws in dropped:
                entry.viewers.discard(ws)
                entry.dropped.add(ws)
            if not entry.viewers:
                entry.last_activity = self._clock()

        if dropped:
            logger.warning("Dropped %d slow viewer(s) from camera %s", len(dropped), entry.camera_id)
            self._close_in_background(dropped, {"error": SLOW_VIEWER_MESSAGE})

    async def _finish(self, entry: RelayEntry, error: Optional[str]) -> None:
        """Subprocess ended on its own: notify viewers, close them, drop the entry."""
        entry.closed = True
        if self._entries.get(entry.camera_id) is entry:
            del self._entries[entry.camera_id]
            self._discard_lock(entry.camera_id)

        if error:
            self._last_errors[entry.camera_id] = error
            logger.warning("FFmpeg error for camera %s: %s", entry.camera_id, error)
            payload = {"error": f"FFmpeg error: {error}"}
        else:
            logger.info("FFmpeg process ended for camera %s", entry.camera_id)
            payload = {"error": "Stream ended."}

        async with entry.delivery_lock:
            viewers = self._take_viewers(entry)
        await self._close_viewers(viewers, payload)

    async def _terminate(self, entry: RelayEntry, notice: Optional[str] = None) -> None:
        """Kill the entry's FFmpeg process (SIGKILL) and discard the entry."""
        entry.closed = True
        if self._entries.get(entry.camera_id) is entry:
            del self._entries[entry.camera_id]

        entry.process.kill()
        task = entry.pump_task
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        await entry.process.wait()

        await self._close_viewers(self._take_viewers(entry), {"error": notice} if notice else None)
        logger.info("FFmpeg process for camera %s killed", entry.camera_id)

    @staticmethod
    def _take_viewers(entry: RelayEntry) -> List[WebSocket]:
        viewers = list(entry.viewers) + list(entry.dropped)
        entry.viewers.clear()
        entry.dropped.clear()
        return viewers

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self._sweep_interval_sec)
            try:
                await self.sweep_idle()
            except Exception:
                logger.error("Idle sweep failed", exc_info=True)

    def _is_open(self, ws: WebSocket) -> bool:
        return (
            getattr(ws, "client_state", WebSocketState.CONNECTED) == WebSocketState.CONNECTED
            and getattr(ws, "application_state", WebSocketState.CONNECTED) == WebSocketState.CONNECTED
        )

    async def _send_bytes(self, ws: WebSocket, chunk: bytes) -> bool:
        if not self._is_open(ws):
            return False
        try:
            await asyncio.wait_for(ws.send_bytes(chunk), timeout=self._send_timeout_sec)
            return True
        except Exception:
            return False

    async def _close_viewers(self, viewers: List[WebSocket], payload: Optional[dict]) -> None:
        for ws in viewers:
            if not self._is_open(ws):
                continue
            try:
                if payload:
                    await asyncio.wait_for(ws.send_text(json.dumps(payload)), timeout=self._send_timeout_sec)
                await asyncio.wait_for(ws.close(), timeout=self._send_timeout_sec)
            except Exception:
                logger.debug("Viewer already gone while closing", exc_info=True)

    def _close_in_background(self, viewers: List[WebSocket], payload: Optional[dict]) -> None:
        """Close viewers without holding up the pump."""
        task = asyncio.create_task(self._close_viewers(viewers, payload))
        self._closing_tasks.add(task)
        task.add_done_callback(self._closing_tasks.discard)

    async def _reject(self, ws: WebSocket, message: str) -> None:
        await self._close_viewers([ws], {"error": message})
