"""
Shared pytest fixtures for camview tests.
"""
import os
from types import SimpleNamespace
from unittest.mock import patch

import pytest


@pytest.fixture
def mock_env():
    """Fixture to set common test environment variables."""
    env_vars = {
        "MONGO_URI": "mongodb://localhost:27017",
        "MONGO_DB_NAME": "test_camview_db",
        "FFMPEG_PATH": "ffmpeg",
        "LOG_LEVEL": "DEBUG",
    }
    with patch.dict(os.environ, env_vars, clear=False):
        yield env_vars


def make_settings(**overrides) -> SimpleNamespace:
    """Settings stand-in with small relay/capture values suitable for tests."""
    values = dict(
        mongo_uri="mongodb://localhost:27017",
        mongo_database_name="test_db",
        log_level="DEBUG",
        cors_origins=["http://localhost:5173"],
        ffmpeg_path="ffmpeg",
        stream_format="mjpeg",
        stream_quality=5,
        stream_fps=10,
        stream_resolution="640x480",
        stream_buffer_size=1024000,
        stream_read_chunk_size=4096,
        stream_replay_chunks=3,
        stream_idle_timeout_sec=60.0,
        stream_sweep_interval_sec=3600.0,
        ws_send_timeout_sec=1.0,
        frame_capture_timeout_sec=5.0,
        frame_capture_min=1,
        frame_capture_max=10,
        onvif_default_port=8899,
        onvif_discovery_timeout_sec=0.1,
        ollama_temperature=0.05,
        ollama_num_predict=512,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.fixture
def mock_settings():
    """Fixture to mock get_settings for tests. Patches the modules that read it at call time."""
    settings = make_settings()
    with patch("camview.core.config.get_settings", return_value=settings), patch(
        "camview.infrastructure.external.ollama_vision_service.get_settings", return_value=settings
    ), patch(
        "camview.application.use_cases.camera.create_camera.get_settings", return_value=settings
    ):
        yield settings


@pytest.fixture
def test_settings() -> SimpleNamespace:
    """Mutable settings object; tests tweak individual values as needed."""
    return make_settings()
