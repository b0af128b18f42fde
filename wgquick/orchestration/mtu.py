#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
MTU estimation for wg-quick.
Picks the smallest MTU among the default route and the routes towards every
peer endpoint, minus the WireGuard encapsulation overhead.
"""
import logging
from typing import Iterator

from wgquick.backend import CommandGateway, RouteInspector
from wgquick.backend.helpers import endpoint_host
from wgquick.models import RouteMtuQuery

logger = logging.getLogger("wg-quick")

FALLBACK_MTU = 1500
TUNNEL_OVERHEAD = 80


class MtuEstimator:
    """Path-MTU heuristic over live routing state."""

    def __init__(self, gateway: CommandGateway, inspector: RouteInspector):
        self.gateway = gateway
        self.inspector = inspector

    def probe(self, iface: str) -> Iterator[RouteMtuQuery]:
        """Route MTU towards each live peer endpoint of `iface`."""
        with self.gateway.stream() as endpoints:
            for line in endpoints.lines(self.gateway.wg("show", iface, "endpoints")):
                host = endpoint_host(line)
                if host is None:
                    continue
                yield RouteMtuQuery(endpoint=host, mtu=self.inspector.route_mtu(host))

    def estimate(self, iface: str) -> int:
        mtu = self.inspector.route_mtu("default")
        if not mtu or mtu <= 0:
            mtu = FALLBACK_MTU
        for query in self.probe(iface):
            if query.mtu is None:
                logger.debug("No MTU for route to %s, skipping", query.endpoint)
                continue
            if 0 < query.mtu < mtu:
                mtu = query.mtu
        return mtu - TUNNEL_OVERHEAD
