# Standard library imports
from pathlib import Path
from contextlib import asynccontextmanager
import logging

# External package imports
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Local application imports
from .api.v1 import camera_router, onvif_router, settings_router, streaming_router, vision_router
from .core.config import get_settings
from .di.container import get_container, reset_container
from .domain.constants.settings_keys import SettingsKeys
from .domain.repositories.camera_repository import CameraRepository
from .domain.repositories.settings_repository import SettingsRepository
from .infrastructure.db.mongo_connection import close_database, ensure_indexes
from .infrastructure.http_client_factory import close_shared_http_client
from .infrastructure.onvif import DeviceConnectionCache
from .infrastructure.streaming import StreamRelay

logger = logging.getLogger(__name__)


async def seed_default_settings(settings_repository: SettingsRepository) -> None:
    """Insert default values for settings that are not stored yet."""
    for key, value in SettingsKeys.DEFAULTS.items():
        if await settings_repository.set_default(key, value):
            logger.info(f"Seeded default setting {key}={value}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown events.

    Startup seeds default settings, starts the stream relay's idle sweeper and
    reconnects to registered cameras. Shutdown stops every FFmpeg process and
    closes ONVIF sessions, the shared HTTP client and the database client.
    """
    container = get_container()
    relay: StreamRelay = container.get(StreamRelay)
    device_cache: DeviceConnectionCache = container.get(DeviceConnectionCache)

    try:
        await ensure_indexes()
        await seed_default_settings(container.get(SettingsRepository))
    except Exception as e:
        logger.error(f"Failed to prepare database: {e}", exc_info=True)

    relay.start()

    # Camera reconnects must not block or fail startup
    try:
        cameras = await container.get(CameraRepository).find_all()
        await device_cache.warm_up(cameras)
    except Exception as e:
        logger.error(f"Failed to reconnect to existing cameras: {e}", exc_info=True)

    yield

    try:
        await relay.shutdown()
    except Exception as e:
        logger.error(f"Error stopping stream relay: {e}", exc_info=True)

    try:
        await device_cache.close_all()
    except Exception as e:
        logger.error(f"Error closing camera connections: {e}", exc_info=True)

    await close_shared_http_client()
    close_database()
    reset_container()

    logger.info("Application shutdown complete")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_application() -> FastAPI:
    """
    Create and configure FastAPI application.

    This function sets up the FastAPI application with:
    - Environment variable loading
    - Logging configuration
    - CORS middleware configuration
    - API route registration

    Returns:
        Configured FastAPI application instance
    """
    # Load environment variables from .env file
    env_path = Path(__file__).resolve().parent.parent / ".env"
    load_dotenv(env_path)

    settings = get_settings()
    configure_logging(settings.log_level)

    application = FastAPI(
        title="camview API",
        version="1.0.0",
        description="IP camera registry, live stream relay and vision queries",
        lifespan=lifespan
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register API routers
    application.include_router(camera_router, prefix="/api/v1/cameras")
    application.include_router(onvif_router, prefix="/api/v1/onvif")
    application.include_router(settings_router, prefix="/api/v1/settings")
    application.include_router(streaming_router, prefix="/api/v1/streams")
    application.include_router(vision_router, prefix="/api/v1/ollama")

    return application


# Create application instance
app = create_application()
