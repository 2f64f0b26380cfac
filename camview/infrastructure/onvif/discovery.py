"""
ONVIF device discovery over WS-Discovery (WSDiscovery library).

The library is thread based and blocking, so probes run through
asyncio.to_thread and never stall the event loop.
"""

# Standard library imports
import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import unquote

# External package imports
from wsdiscovery import QName
from wsdiscovery.discovery import ThreadedWSDiscovery

logger = logging.getLogger(__name__)

ONVIF_DEVICE_TYPE = QName("http://www.onvif.org/ver10/network/wsdl", "NetworkVideoTransmitter")
NAME_SCOPE_PREFIX = "onvif://www.onvif.org/name/"


def _scope_values(service: Any) -> List[str]:
    values = []
    for scope in service.getScopes() or []:
        value = scope.getValue() if hasattr(scope, "getValue") else str(scope)
        values.append(str(value))
    return values


def _name_from_scopes(scopes: List[str]) -> Optional[str]:
    for scope in scopes:
        if scope.startswith(NAME_SCOPE_PREFIX):
            return unquote(scope[len(NAME_SCOPE_PREFIX):])
    return None


class OnvifDiscovery:
    """Probe the local network for ONVIF NetworkVideoTransmitter devices."""

    def __init__(self, wsd_factory: Callable[[], Any] = ThreadedWSDiscovery) -> None:
        self._wsd_factory = wsd_factory

    def _probe(self, timeout: float) -> List[Dict[str, Any]]:
        wsd = self._wsd_factory()
        wsd.start()
        try:
            services = wsd.searchServices(types=[ONVIF_DEVICE_TYPE], timeout=timeout)
        finally:
            wsd.stop()

        devices: List[Dict[str, Any]] = []
        for service in services:
            scopes = _scope_values(service)
            urn = service.getEPR()
            devices.append(
                {
                    "urn": urn,
                    "name": _name_from_scopes(scopes) or urn,
                    "xaddrs": list(service.getXAddrs() or []),
                    "scopes": scopes,
                }
            )
        return devices

    async def discover(self, timeout: float = 5.0) -> List[Dict[str, Any]]:
        """
        Run a WS-Discovery probe for timeout seconds.

        Returns:
            List of {"urn", "name", "xaddrs", "scopes"} dicts
        """
        logger.info("Starting ONVIF discovery...")
        devices = await asyncio.to_thread(self._probe, timeout)
        logger.info("ONVIF discovery finished. Found devices: %d", len(devices))
        return devices
