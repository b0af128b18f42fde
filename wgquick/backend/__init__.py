# backend/__init__.py
from __future__ import annotations

from typing import Dict, Type

from wgquick.errors import ConfigError

from .base import RouteInspector
from .gateway import CommandGateway, CommandStream
from .routes import IpRouteInspector, NetlinkRouteInspector

# Map of supported route sources
_INSPECTORS: Dict[str, Type[RouteInspector]] = {
    "ip": IpRouteInspector,
    "netlink": NetlinkRouteInspector,
}


def get_route_inspector(source: str, gateway: CommandGateway) -> RouteInspector:
    """
    Returns a route inspector for the specified 'source'.
    """
    key = (source or "").strip().lower()
    cls = _INSPECTORS.get(key)
    if not cls:
        raise ConfigError(f"Unsupported route source '{source}'")
    return cls(gateway)


__all__ = [
    "CommandGateway",
    "CommandStream",
    "IpRouteInspector",
    "NetlinkRouteInspector",
    "RouteInspector",
    "get_route_inspector",
]
