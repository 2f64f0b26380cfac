"""
URL helpers for camera feed and control addresses.

Functions:
- with_credentials(): embed username/password as URI userinfo
- redact_credentials(): strip the password from a URI before logging it
- host_port_from_url(): split a control address into host and port
- onvif_device_service_url(): default ONVIF device-service address for a host
"""
from typing import Optional, Tuple
from urllib.parse import quote, urlsplit, urlunsplit


def with_credentials(url: str, username: Optional[str], password: Optional[str]) -> str:
    """
    Return url with username:password embedded as userinfo.

    Credentials are only applied when both are present; any userinfo already in
    the URL is replaced. Both parts are percent-encoded.
    """
    if not url or not username or not password:
        return url

    parts = urlsplit(url)
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    netloc = f"{quote(username, safe='')}:{quote(password, safe='')}@{host}"
    if parts.port is not None:
        netloc = f"{netloc}:{parts.port}"
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))


def redact_credentials(url: str) -> str:
    """Replace the password in url with '***'."""
    if not url:
        return url
    parts = urlsplit(url)
    if parts.password is None:
        return url
    netloc = parts.netloc.rsplit("@", 1)[1]
    userinfo = f"{parts.username}:***" if parts.username else "***"
    return urlunsplit((parts.scheme, f"{userinfo}@{netloc}", parts.path, parts.query, parts.fragment))


def host_port_from_url(url: str, default_port: int = 80) -> Tuple[str, int]:
    """
    Extract (host, port) from a control address such as
    http://192.168.1.20:8899/onvif/device_service.

    Raises:
        ValueError: if url has no host
    """
    parts = urlsplit(url if "//" in url else f"//{url}")
    if not parts.hostname:
        raise ValueError(f"Invalid address: {url}")
    port = parts.port
    if port is None:
        port = 443 if parts.scheme == "https" else default_port
    return parts.hostname, port


def onvif_device_service_url(host: str, port: int) -> str:
    return f"http://{host}:{port}/onvif/device_service"


def fallback_rtsp_url(host: str) -> str:
    """RTSP address used when the device does not report a stream URI."""
    return f"rtsp://{host}:554/stream"
