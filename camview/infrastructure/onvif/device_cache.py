"""
Process-wide cache of initialized ONVIF control sessions.

Owned by the DI container (one instance per application), keyed by a stable
camera key such as "camera-<name>". Cached sessions are returned without a
liveness check; callers that change a camera's control address or credentials
call invalidate().
"""

# Standard library imports
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Dict, Iterable, Optional

# Local application imports
from ...core.exceptions import UpstreamConnectionError, ValidationError
from ...domain.models.camera import Camera
from .device_session import OnvifDeviceSession

logger = logging.getLogger(__name__)

SessionFactory = Callable[[str, str, str], OnvifDeviceSession]


class DeviceConnectionCache:
    """Maps a camera key to one live, initialized ONVIF session."""

    def __init__(self, session_factory: Optional[SessionFactory] = None) -> None:
        self._session_factory: SessionFactory = session_factory or OnvifDeviceSession
        self._sessions: Dict[str, OnvifDeviceSession] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}

    @asynccontextmanager
    async def _locked(self, cache_key: str) -> AsyncIterator[None]:
        # Dropped once no caller holds or awaits it
        lock = self._locks.setdefault(cache_key, asyncio.Lock())
        self._lock_users[cache_key] = self._lock_users.get(cache_key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[cache_key] -= 1
            if self._lock_users[cache_key] == 0:
                del self._lock_users[cache_key]
                del self._locks[cache_key]

    async def get_device(
        self,
        control_address: str,
        user: Optional[str] = "",
        password: Optional[str] = "",
        cache_key: Optional[str] = None,
    ) -> OnvifDeviceSession:
        """
        Return the cached session for cache_key, or open, initialize and cache a new one.

        An empty cache_key opens an uncached session.

        Raises:
            ValidationError: control_address missing or malformed
            UpstreamConnectionError: the initialization handshake failed (nothing cached)
        """
        if cache_key and cache_key in self._sessions:
            logger.debug("Using cached camera connection %s", cache_key)
            return self._sessions[cache_key]

        if not cache_key:
            return await self._open(control_address, user, password)

        async with self._locked(cache_key):
            # Another caller may have finished the handshake while we waited
            session = self._sessions.get(cache_key)
            if session is not None:
                return session
            session = await self._open(control_address, user, password)
            self._sessions[cache_key] = session
            return session

    async def _open(self, control_address: str, user: Optional[str], password: Optional[str]) -> OnvifDeviceSession:
        if not control_address:
            raise ValidationError(
                "Control address is required",
                user_message="ONVIF URL is required for control.",
            )
        logger.info("Opening new camera connection to %s", control_address)
        try:
            session = self._session_factory(control_address, user or "", password or "")
        except ValueError as e:
            raise ValidationError(str(e), user_message=f"Invalid ONVIF URL: {control_address}") from e
        await session.init()
        return session

    def get_cached(self, cache_key: str) -> Optional[OnvifDeviceSession]:
        return self._sessions.get(cache_key)

    def __contains__(self, cache_key: str) -> bool:
        return cache_key in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    async def invalidate(self, cache_key: str) -> bool:
        """Drop and close the session cached under cache_key. Returns True if one existed."""
        session = self._sessions.pop(cache_key, None)
        if session is None:
            return False
        await session.close()
        logger.info("Camera connection %s invalidated", cache_key)
        return True

    async def close_all(self) -> None:
        sessions = list(self._sessions.items())
        self._sessions.clear()
        for cache_key, session in sessions:
            try:
                await session.close()
            except Exception:
                logger.exception("Error closing camera connection %s", cache_key)

    async def warm_up(self, cameras: Iterable[Camera]) -> int:
        """
        Open sessions for registered cameras with a control address.

        Failures are logged and skipped. Returns the number of connected cameras.
        """
        logger.info("Attempting to connect to existing cameras...")
        connected = 0
        for camera in cameras:
            if not camera.onvif_url:
                continue
            try:
                await self.get_device(
                    camera.onvif_url,
                    camera.username,
                    camera.password,
                    camera.connection_cache_key,
                )
                connected += 1
                logger.info("Successfully reconnected to camera: %s", camera.name)
            except (UpstreamConnectionError, ValidationError) as e:
                logger.error("Failed to reconnect to camera %s: %s", camera.name, e.message)
        logger.info("Finished attempting to connect to existing cameras (%d connected)", connected)
        return connected
