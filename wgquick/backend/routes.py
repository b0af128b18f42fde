"""
Route Inspectors
================
Two ways of answering "what MTU does the route to X have": scraping `ip -o`
output through the command gateway, or asking the kernel over netlink with
pyroute2.
"""

from __future__ import annotations

import logging
import socket
from typing import Optional

from pyroute2 import IPRoute, NetlinkError

from .base import RouteInspector
from .gateway import CommandGateway
from .helpers import dev_from_route, mtu_from_output

logger = logging.getLogger("wg-quick")


class IpRouteInspector(RouteInspector):
    """Route MTU from `ip -o route get|show` and `ip -o link show` text."""

    gateway: CommandGateway

    def route_mtu(self, endpoint: str) -> Optional[int]:
        with self.gateway.stream() as route_stream:
            if endpoint == "default":
                route = route_stream.first_line(self.gateway.ip("-o", "route", "show", endpoint))
            else:
                route = route_stream.first_line(self.gateway.ip("-o", "route", "get", endpoint))
        if not route:
            return None
        mtu = mtu_from_output(route)
        if mtu is not None:
            return mtu
        dev = dev_from_route(route)
        if not dev:
            return None
        with self.gateway.stream() as link_stream:
            link = link_stream.first_line(self.gateway.ip("-o", "link", "show", "dev", dev))
        return mtu_from_output(link)


def _route_metric_mtu(route) -> Optional[int]:
    metrics = route.get_attr("RTA_METRICS")
    if not metrics:
        return None
    mtu = metrics.get_attr("RTAX_MTU")
    return int(mtu) if mtu else None


class NetlinkRouteInspector(RouteInspector):
    """Route MTU straight from the kernel routing table via pyroute2."""

    def route_mtu(self, endpoint: str) -> Optional[int]:
        ip = IPRoute()
        try:
            if endpoint == "default":
                routes = ip.get_default_routes(family=socket.AF_INET)
            else:
                routes = ip.route("get", dst=endpoint)
            if not routes:
                return None
            route = routes[0]
            mtu = _route_metric_mtu(route)
            if mtu:
                return mtu
            oif = route.get_attr("RTA_OIF")
            if not oif:
                return None
            links = ip.get_links(oif)
            if not links:
                return None
            link_mtu = links[0].get_attr("IFLA_MTU")
            return int(link_mtu) if link_mtu else None
        except (NetlinkError, OSError) as e:
            logger.debug("netlink route lookup for %s failed: %s", endpoint, e)
            return None
        finally:
            ip.close()
