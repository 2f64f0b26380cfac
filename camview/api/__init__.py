"""
API layer for the camview backend.

Exposes HTTP and WebSocket endpoints under /api/v1 (cameras, onvif,
settings, streams, vision).
"""
