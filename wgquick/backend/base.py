# backend/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class RouteInspector(ABC):
    """Common interface for route/link MTU lookups."""

    def __init__(self, gateway):
        self.gateway = gateway

    @abstractmethod
    def route_mtu(self, endpoint: str) -> Optional[int]:
        """MTU of the route towards `endpoint` ("default" for the default route).
        Returns None when neither a route MTU nor an outgoing link MTU is known."""
        raise NotImplementedError
