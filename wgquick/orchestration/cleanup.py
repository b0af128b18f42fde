#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Rollback guard for interface bring-up.
An armed guard tears the interface down on any exit path that leaves the
block (exception, SystemExit, SIGTERM/SIGHUP, interpreter exit) unless it was
disarmed after the last mutating step succeeded.
"""
import atexit
import logging
import signal
import threading
from typing import Callable, Dict, Optional

from wgquick.errors import WgQuickError

logger = logging.getLogger("wg-quick")

_TRAPPED_SIGNALS = (signal.SIGTERM, signal.SIGHUP)


class CleanupGuard:
    """Pending-cleanup registration for one interface."""

    def __init__(self, iface: str, rollback: Callable[[str], None], gateway):
        self.iface: Optional[str] = iface
        self.rollback = rollback
        self.gateway = gateway
        self._saved_handlers: Dict[int, object] = {}

    @property
    def armed(self) -> bool:
        return self.iface is not None

    def __enter__(self) -> "CleanupGuard":
        atexit.register(self._run)
        if threading.current_thread() is threading.main_thread():
            for signum in _TRAPPED_SIGNALS:
                self._saved_handlers[signum] = signal.signal(signum, self._on_signal)
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            self._run()
        finally:
            atexit.unregister(self._run)
            for signum, handler in self._saved_handlers.items():
                signal.signal(signum, handler)
            self._saved_handlers.clear()
        return False

    def disarm(self) -> None:
        self.iface = None

    def _on_signal(self, signum, frame) -> None:
        raise SystemExit(128 + signum)

    def _run(self) -> None:
        if self.iface is None:
            return
        iface, self.iface = self.iface, None
        # Failures inside teardown must not abort the teardown itself.
        self.gateway.exiting = True
        logger.info("Rolling back %s", iface)
        try:
            self.rollback(iface)
        except (WgQuickError, OSError) as e:
            logger.error("Rollback of %s incomplete: %s", iface, e)
