"""Process-wide httpx client for outbound HTTP calls (vision model host)."""
import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

# Generations stream for a long time; connecting should not
CLIENT_TIMEOUT = httpx.Timeout(300.0, connect=10.0)
CLIENT_LIMITS = httpx.Limits(max_keepalive_connections=10, max_connections=50, keepalive_expiry=30.0)

_client: Optional[httpx.AsyncClient] = None


def get_shared_http_client() -> httpx.AsyncClient:
    """
    Return the shared AsyncClient, creating it on first use.

    Repeated vision queries reuse its keep-alive connections to the Ollama host.
    """
    global _client

    if _client is None or _client.is_closed:
        _client = httpx.AsyncClient(timeout=CLIENT_TIMEOUT, limits=CLIENT_LIMITS, http2=True)
        logger.info("Shared HTTP client created")

    return _client


async def close_shared_http_client() -> None:
    """Close the shared client; called from the application lifespan on shutdown."""
    global _client

    if _client is not None:
        await _client.aclose()
        _client = None
        logger.info("Shared HTTP client closed")
