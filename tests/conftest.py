"""
Shared fixtures for wg-quick tests: scripted command gateways that record
every command instead of touching the host.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional

import pytest

from wgquick import main as main_module
from wgquick.errors import CommandError, ControlServiceError


class FakeStream:
    """Stand-in for CommandStream reading scripted output."""

    def __init__(self, gateway: "FakeGateway", quiet: bool = False):
        self.gateway = gateway
        self.quiet = quiet

    def lines(self, argv: Iterable[str]):
        argv = list(argv)
        self.gateway.queries.append(argv)
        return iter(self.gateway.output_for(argv))

    def first_line(self, argv: Iterable[str]) -> Optional[str]:
        return next(self.lines(argv), None)

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class FakeGateway:
    """Records commands; `fail_on` picks commands that fail."""

    def __init__(self, outputs: Optional[Dict[tuple, List[str]]] = None, fail_on: Optional[Callable[[List[str]], bool]] = None):
        self.outputs = outputs or {}
        self.fail_on = fail_on or (lambda argv: False)
        self.calls: List[List[str]] = []
        self.queries: List[List[str]] = []
        self.fed: Dict[tuple, str] = {}
        self.exiting = False

    def ip(self, *args):
        return ["ip", *args]

    def wg(self, *args):
        return ["wg", *args]

    def stream(self, quiet: bool = False) -> FakeStream:
        return FakeStream(self, quiet=quiet)

    def output_for(self, argv: List[str]) -> List[str]:
        return list(self.outputs.get(tuple(argv), []))

    def run(self, argv):
        argv = list(argv)
        self.calls.append(argv)
        if self.fail_on(argv) and not self.exiting:
            raise CommandError(f"{argv[0]} failed", exit_code=2)
        self.apply(argv)

    def feed(self, argv, text):
        self.fed[tuple(argv)] = text
        self.run(argv)

    def ndc(self, *args):
        argv = ["ndc", *args]
        self.calls.append(argv)
        if self.fail_on(argv) and not self.exiting:
            raise ControlServiceError(f"{' '.join(argv)}: 400 1 rejected")
        self.apply(argv)

    def apply(self, argv: List[str]) -> None:
        """Hook for subclasses that model host state."""


class SimulatedHost(FakeGateway):
    """FakeGateway that models links, policy networks and fwmark rules."""

    def __init__(self, fail_on=None, links=()):
        super().__init__(fail_on=fail_on)
        self.links = set(links)
        self.wg_links = set(links)
        self.networks: Dict[int, Optional[str]] = {}

    def output_for(self, argv: List[str]) -> List[str]:
        if argv[:3] == ["ip", "link", "show"]:
            iface = argv[-1]
            return [f"7: {iface}: <POINTOPOINT,NOARP,UP> mtu 1420 qdisc noqueue state UNKNOWN\n"] if iface in self.links else []
        if argv == ["wg", "show", "interfaces"]:
            return [" ".join(sorted(self.wg_links)) + "\n"] if self.wg_links else []
        if argv == ["ip", "rule", "show"]:
            rules = ["0:\tfrom all lookup local\n"]
            for netid, iface in sorted(self.networks.items()):
                if iface:
                    rules.append(f"17000:\tfrom all fwmark 0xc{netid:04x}/0xcffff lookup {iface}\n")
            return rules
        if argv[:2] == ["wg", "show"] and argv[-1] == "allowed-ips":
            return ["PEERKEY=\t10.8.0.0/24 fd00:8::/64\n"]
        return super().output_for(argv)

    def run(self, argv):
        argv = list(argv)
        if argv[:3] == ["ip", "link", "del"] and argv[3] not in self.links and not self.exiting:
            self.calls.append(argv)
            raise CommandError("Cannot find device", exit_code=1)
        super().run(argv)

    def apply(self, argv: List[str]) -> None:
        if argv[:3] == ["ip", "link", "add"]:
            self.links.add(argv[3])
            self.wg_links.add(argv[3])
        elif argv[:3] == ["ip", "link", "del"]:
            self.links.discard(argv[3])
            self.wg_links.discard(argv[3])
        elif argv[:3] == ["ndc", "network", "create"]:
            self.networks[int(argv[3])] = None
        elif argv[:4] == ["ndc", "network", "interface", "add"]:
            self.networks[int(argv[4])] = argv[5]
        elif argv[:3] == ["ndc", "network", "destroy"]:
            self.networks.pop(int(argv[3]), None)


class FixedRandom:
    """Deterministic source for allocate_netid."""

    def __init__(self, values):
        self.values = list(values)

    def getrandbits(self, k):
        return self.values.pop(0)


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def write_conf(tmp_path):
    def _write(name: str, text: str, mode: int = 0o600):
        path = tmp_path / name
        path.write_bytes(text.encode("utf-8"))
        path.chmod(mode)
        return path

    return _write


@pytest.fixture(autouse=True)
def _reset_cli_state(monkeypatch):
    monkeypatch.setattr(main_module, "SETTINGS", None)
    monkeypatch.setattr(main_module, "_DEF_HANDLER_SET", False)
    yield
    logger = logging.getLogger("wg-quick")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
