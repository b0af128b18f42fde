"""
Output Extraction Helpers
=========================
Narrow adapters that pull structured values out of the human-readable output
of ip(8) and wg(8). Each function handles one command's output format.
"""

from __future__ import annotations

import re
from typing import List, Optional

from wgquick.errors import PatternError

_MTU_RE = re.compile(r"mtu ([0-9]+)")
_DEV_RE = re.compile(r"dev ([^ ]+)")
_ENDPOINT_RE = re.compile(r"^\[?([A-Za-z0-9:.]+)\]?:[0-9]+$")
_ATOI_RE = re.compile(r"^[+-]?[0-9]+")

FWMARK_RULE_FMT = r"0xc([0-9a-f]+)/0xcffff lookup {iface}"


def compile_pattern(pattern: str) -> "re.Pattern[str]":
    try:
        return re.compile(pattern)
    except re.error as e:
        raise PatternError(f"Regex compilation error: {e}") from e


def atoi(text: str) -> int:
    """Leading-integer parse; text without a leading number is 0."""
    m = _ATOI_RE.match(text or "")
    return int(m.group(0)) if m else 0


def mtu_from_output(line: Optional[str]) -> Optional[int]:
    """MTU stated in an `ip -o route` or `ip -o link` line."""
    if not line:
        return None
    m = _MTU_RE.search(line)
    return int(m.group(1)) if m else None


def dev_from_route(line: Optional[str]) -> Optional[str]:
    """Outgoing device of an `ip -o route` line."""
    if not line:
        return None
    m = _DEV_RE.search(line)
    return m.group(1).strip() if m else None


def endpoint_host(line: str) -> Optional[str]:
    """Host part of a `wg show <iface> endpoints` line.

    Lines are `<public key>\\t<endpoint>`; the port and IPv6 brackets are
    stripped. Peers without an endpoint report `(none)` and yield None.
    """
    field = line.rsplit("\t", 1)[-1].strip()
    m = _ENDPOINT_RE.match(field)
    return m.group(1) if m else None


def allowed_ips(line: str) -> List[str]:
    """CIDRs of one `wg show <iface> allowed-ips` line."""
    if "\t" not in line:
        return []
    _, _, rest = line.partition("\t")
    return [cidr for cidr in rest.split() if cidr != "(none)"]


def interface_names(line: Optional[str]) -> List[str]:
    """Names in the `wg show interfaces` output line."""
    return (line or "").split()


def netid_from_rule(iface: str, line: str) -> Optional[int]:
    """Policy network id encoded in the fwmark of an `ip rule show` line."""
    regex = compile_pattern(FWMARK_RULE_FMT.format(iface=re.escape(iface)) + r"(?![A-Za-z0-9_=+.-])")
    m = regex.search(line)
    return int(m.group(1), 16) if m else None


def split_list(value: str) -> List[str]:
    """Split a comma/whitespace separated directive value."""
    return [tok for tok in re.split(r"[,\s]+", value or "") if tok]


def is_safe_token(value: str) -> bool:
    return "'" not in value and "\\" not in value
