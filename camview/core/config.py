# Standard library imports
import os
from typing import Final, List, Optional


class Settings:
    """
    Application settings loaded from environment variables.

    This class centralizes all configuration settings for the application.
    All settings are loaded from environment variables with sensible defaults.
    Runtime-editable settings (keep_streams_open, Ollama host/model) live in the
    settings store, not here.
    """

    def __init__(self) -> None:
        # Database Configuration
        self.mongo_uri: Final[str] = os.getenv("MONGO_URI", "mongodb://localhost:27017")
        self.mongo_database_name: Final[str] = os.getenv("MONGO_DB_NAME", "camview")

        # Logging / HTTP
        self.log_level: Final[str] = os.getenv("LOG_LEVEL", "INFO").upper()
        self.cors_origins: Final[List[str]] = [
            origin.strip()
            for origin in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:5173,http://localhost:3000",
            ).split(",")
            if origin.strip()
        ]

        # Transcoder (FFmpeg) stream profile
        self.ffmpeg_path: Final[str] = os.getenv("FFMPEG_PATH", "ffmpeg")
        self.stream_format: Final[str] = os.getenv("STREAM_FORMAT", "mjpeg")
        self.stream_quality: Final[int] = int(os.getenv("STREAM_QUALITY", "5"))
        self.stream_fps: Final[int] = int(os.getenv("STREAM_FPS", "10"))
        self.stream_resolution: Final[str] = os.getenv("STREAM_RESOLUTION", "640x480")
        self.stream_buffer_size: Final[int] = int(os.getenv("STREAM_BUFFER_SIZE", "1024000"))

        # Stream relay tunables
        self.stream_read_chunk_size: Final[int] = int(os.getenv("STREAM_READ_CHUNK_SIZE", "65536"))
        self.stream_replay_chunks: Final[int] = int(os.getenv("STREAM_REPLAY_CHUNKS", "50"))
        self.stream_idle_timeout_sec: Final[float] = float(os.getenv("STREAM_IDLE_TIMEOUT_SEC", "60"))
        self.stream_sweep_interval_sec: Final[float] = float(os.getenv("STREAM_SWEEP_INTERVAL_SEC", "60"))
        self.ws_send_timeout_sec: Final[float] = float(os.getenv("WS_STREAM_SEND_TIMEOUT_SEC", "2.0"))

        # Frame capture
        self.frame_capture_timeout_sec: Final[float] = float(os.getenv("FRAME_CAPTURE_TIMEOUT_SEC", "10"))
        self.frame_capture_min: Final[int] = int(os.getenv("FRAME_CAPTURE_MIN", "1"))
        self.frame_capture_max: Final[int] = int(os.getenv("FRAME_CAPTURE_MAX", "10"))

        # ONVIF
        self.onvif_default_port: Final[int] = int(os.getenv("ONVIF_DEFAULT_PORT", "8899"))
        self.onvif_discovery_timeout_sec: Final[float] = float(
            os.getenv("ONVIF_DISCOVERY_TIMEOUT_SEC", "5")
        )

        # Vision model (Ollama) generation options
        self.ollama_temperature: Final[float] = float(os.getenv("OLLAMA_TEMPERATURE", "0.05"))
        self.ollama_num_predict: Final[int] = int(os.getenv("OLLAMA_NUM_PREDICT", "512"))


# Global settings instance (singleton pattern)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings (singleton pattern)

    Returns:
        Settings instance with all configuration values
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
