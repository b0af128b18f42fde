# Orchestration module for interface lifecycle management
from .cleanup import CleanupGuard
from .lifecycle import InterfaceLifecycle, allocate_netid
from .mtu import MtuEstimator

__all__ = ["CleanupGuard", "InterfaceLifecycle", "MtuEstimator", "allocate_netid"]
