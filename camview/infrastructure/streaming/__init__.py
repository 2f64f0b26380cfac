# Infrastructure streaming layer exports
from .ffmpeg_transcoder import FfmpegTranscoder, TranscodeProcess
from .frame_capture import FrameCaptureService
from .stream_relay import RelayEntry, StreamRelay

__all__ = ["FfmpegTranscoder", "TranscodeProcess", "FrameCaptureService", "RelayEntry", "StreamRelay"]
