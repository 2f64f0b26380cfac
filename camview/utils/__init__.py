"""Utility modules for the camview backend."""

from .url_utils import (
    with_credentials,
    redact_credentials,
    host_port_from_url,
    onvif_device_service_url,
    fallback_rtsp_url,
)

__all__ = [
    "with_credentials",
    "redact_credentials",
    "host_port_from_url",
    "onvif_device_service_url",
    "fallback_rtsp_url",
]
