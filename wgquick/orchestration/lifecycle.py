#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Interface lifecycle module for wg-quick.
This module sequences bring-up (create, configure, activate) and teardown of a
WireGuard interface through ip(8), wg(8) and the ndc control service.
"""
import logging
import os
import random
import time
from typing import Optional

from wgquick.backend import CommandGateway
from wgquick.backend.helpers import allowed_ips, atoi, interface_names, is_safe_token, netid_from_rule
from wgquick.errors import InterfaceExistsError, NotAWireguardInterfaceError
from wgquick.models import InterfaceConfig
from wgquick.utils.validation import validate_name

from .cleanup import CleanupGuard
from .mtu import MtuEstimator

logger = logging.getLogger("wg-quick")

FWMARK = "0x20000"
NETID_MIN = 4096
UID_RANGE = "0-99999"


def allocate_netid(rng: Optional[random.Random] = None) -> int:
    """Draw a policy network id: >= 4096 with the low bit clear."""
    if rng is None:
        # Not real randomness; the id only has to avoid collisions.
        rng = random.Random(int(time.time()) ^ os.getpid())
    netid = 0
    while netid < NETID_MIN:
        netid = rng.getrandbits(31) & 0xFFFE
    return netid


class InterfaceLifecycle:
    """Manager for WireGuard interface up/down operations."""

    def __init__(self, gateway: CommandGateway, estimator: MtuEstimator, rng: Optional[random.Random] = None):
        self.gateway = gateway
        self.estimator = estimator
        self.rng = rng
        self._created_netid: Optional[int] = None

    def interface_exists(self, iface: str) -> bool:
        with self.gateway.stream(quiet=True) as stream:
            return stream.first_line(self.gateway.ip("link", "show", "dev", iface)) is not None

    def up(self, config: InterfaceConfig) -> int:
        """Bring `config.name` up; returns the policy network id.
        Any failure after the device is created deletes it again."""
        iface = config.name
        validate_name(iface)
        if self.interface_exists(iface):
            raise InterfaceExistsError(f"{iface} already exists")
        self._created_netid = None
        with CleanupGuard(iface, self._rollback, self.gateway) as guard:
            self.add_if(iface)
            self.set_config(iface, config.residual_config)
            self.set_mtu(iface, config.mtu)
            self.set_addr(iface, config.addresses)
            netid = self.up_if(iface)
            self.set_dnses(netid, config.dns_servers)
            self.set_routes(iface, netid)
            guard.disarm()
        self._created_netid = None
        logger.debug("%s is up on network %d", iface, netid)
        return netid

    def down(self, iface: str) -> None:
        with self.gateway.stream() as stream:
            names = interface_names(stream.first_line(self.gateway.wg("show", "interfaces")))
        if iface not in names:
            raise NotAWireguardInterfaceError(f"{iface} is not a WireGuard interface")
        self.del_if(iface)

    def add_if(self, iface: str) -> None:
        self.gateway.run(self.gateway.ip("link", "add", iface, "type", "wireguard"))

    def _rollback(self, iface: str) -> None:
        destroyed = self.del_if(iface)
        netid, self._created_netid = self._created_netid, None
        if netid is not None and netid != destroyed:
            self.gateway.ndc("network", "destroy", str(netid))

    def del_if(self, iface: str) -> Optional[int]:
        """Delete the link, then destroy the policy network routed through it (if any).
        Returns the destroyed network id."""
        self.gateway.run(self.gateway.ip("link", "del", iface))
        netid = None
        with self.gateway.stream() as stream:
            for line in stream.lines(self.gateway.ip("rule", "show")):
                netid = netid_from_rule(iface, line)
                if netid is not None:
                    break
        if netid is not None:
            self.gateway.ndc("network", "destroy", str(netid))
        return netid

    def set_config(self, iface: str, residual_config: str) -> None:
        self.gateway.feed(self.gateway.wg("setconf", iface, "/proc/self/fd/0"), residual_config)

    def set_mtu(self, iface: str, mtu: Optional[int]) -> None:
        if not mtu:
            mtu = self.estimator.estimate(iface)
        self.gateway.ndc("interface", "setmtu", iface, str(mtu))

    def set_addr(self, iface: str, addresses) -> None:
        for addr in addresses:
            if not is_safe_token(addr):
                logger.warning("Skipping unsafe address %r", addr)
                continue
            self.add_addr(iface, addr)

    def add_addr(self, iface: str, addr: str) -> None:
        if ":" in addr:
            self.gateway.ndc("interface", "ipv6", iface, "enable")
            self.gateway.run(self.gateway.ip("-6", "addr", "add", addr, "dev", iface))
            return
        host, slash, prefix = addr.partition("/")
        mask = atoi(prefix) if slash else 32
        self.gateway.ndc("interface", "setcfg", iface, host, str(mask))

    def up_if(self, iface: str) -> int:
        netid = allocate_netid(self.rng)
        self.gateway.run(self.gateway.wg("set", iface, "fwmark", FWMARK))
        self.gateway.ndc("interface", "setcfg", iface, "up")
        self.gateway.ndc("network", "create", str(netid), "vpn", "1", "1")
        self._created_netid = netid
        self.gateway.ndc("network", "interface", "add", str(netid), iface)
        self.gateway.ndc("network", "users", "add", str(netid), UID_RANGE)
        return netid

    def set_dnses(self, netid: int, dns_servers) -> None:
        servers = []
        for dns in dns_servers:
            if not is_safe_token(dns):
                logger.warning("Skipping unsafe DNS server %r", dns)
                continue
            servers.append(dns)
        if not servers:
            return
        self.gateway.ndc("resolver", "setnetdns", str(netid), "", *servers)

    def set_routes(self, iface: str, netid: int) -> None:
        with self.gateway.stream() as stream:
            routes = [cidr for line in stream.lines(self.gateway.wg("show", iface, "allowed-ips")) for cidr in allowed_ips(line)]
        for cidr in routes:
            self.gateway.ndc("network", "route", "add", str(netid), iface, cidr)
