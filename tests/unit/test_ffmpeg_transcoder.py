"""
Unit tests for FfmpegTranscoder (subprocess creation patched).
"""
import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from camview.core.exceptions import TranscoderError
from camview.infrastructure.streaming.ffmpeg_transcoder import FfmpegTranscoder

SUBPROCESS = "camview.infrastructure.streaming.ffmpeg_transcoder.asyncio.create_subprocess_exec"


def _process(stdout: bytes = b"", stderr: bytes = b"", returncode: int = 0):
    process = MagicMock()
    process.returncode = returncode
    process.communicate = AsyncMock(return_value=(stdout, stderr))
    process.wait = AsyncMock(return_value=returncode)
    return process


@pytest.fixture
def transcoder(test_settings):
    return FfmpegTranscoder(test_settings)


class TestCommands:
    def test_stream_cmd_uses_fixed_profile(self, transcoder):
        cmd = transcoder.build_stream_cmd("rtsp://cam/stream")

        assert cmd[0] == "ffmpeg"
        assert cmd[cmd.index("-rtsp_transport") + 1] == "tcp"
        assert cmd[cmd.index("-buffer_size") + 1] == "1024000"
        assert cmd[cmd.index("-i") + 1] == "rtsp://cam/stream"
        assert cmd[cmd.index("-f") + 1] == "mjpeg"
        assert cmd[cmd.index("-q:v") + 1] == "5"
        assert cmd[cmd.index("-r") + 1] == "10"
        assert cmd[cmd.index("-s") + 1] == "640x480"
        assert cmd[-1] == "pipe:1"

    def test_capture_cmd_grabs_one_frame(self, transcoder):
        cmd = transcoder.build_capture_cmd("rtsp://cam/stream")

        assert cmd[cmd.index("-frames:v") + 1] == "1"
        assert cmd[cmd.index("-f") + 1] == "image2pipe"
        assert cmd[-1] == "pipe:1"


class TestCaptureStill:
    @pytest.mark.asyncio
    async def test_returns_stdout(self, transcoder):
        with patch(SUBPROCESS, new=AsyncMock(return_value=_process(stdout=b"jpeg"))):
            assert await transcoder.capture_still("rtsp://cam/stream") == b"jpeg"

    @pytest.mark.asyncio
    async def test_nonzero_exit_raises(self, transcoder):
        process = _process(stderr=b"401 Unauthorized", returncode=1)
        with patch(SUBPROCESS, new=AsyncMock(return_value=process)):
            with pytest.raises(TranscoderError) as exc_info:
                await transcoder.capture_still("rtsp://cam/stream")

        assert exc_info.value.returncode == 1
        assert "401 Unauthorized" in exc_info.value.user_message

    @pytest.mark.asyncio
    async def test_empty_output_raises(self, transcoder):
        with patch(SUBPROCESS, new=AsyncMock(return_value=_process(stdout=b""))):
            with pytest.raises(TranscoderError):
                await transcoder.capture_still("rtsp://cam/stream")

    @pytest.mark.asyncio
    async def test_timeout_kills_process(self, transcoder):
        process = _process()
        process.returncode = None

        async def hang():
            await asyncio.sleep(10)

        process.communicate = hang
        with patch(SUBPROCESS, new=AsyncMock(return_value=process)):
            with pytest.raises(TranscoderError) as exc_info:
                await transcoder.capture_still("rtsp://cam/stream", timeout=0.01)

        assert exc_info.value.timed_out
        process.kill.assert_called_once()

    @pytest.mark.asyncio
    async def test_missing_binary_raises(self, transcoder):
        with patch(SUBPROCESS, new=AsyncMock(side_effect=FileNotFoundError())):
            with pytest.raises(TranscoderError, match="ffmpeg executable not found"):
                await transcoder.capture_still("rtsp://cam/stream")


class TestSpawnStream:
    @pytest.mark.asyncio
    async def test_missing_binary_raises(self, transcoder):
        with patch(SUBPROCESS, new=AsyncMock(side_effect=FileNotFoundError())):
            with pytest.raises(TranscoderError) as exc_info:
                await transcoder.spawn_stream("rtsp://cam/stream")
        assert exc_info.value.user_message == "ffmpeg not found on server."
