#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Tunnel config parser for wg-quick.
Splits a WireGuard config into the directives wg-quick handles itself
(Address, DNS, MTU in the [Interface] section) and the remaining text, which
is handed verbatim to `wg setconf`.
"""
import logging
import os
import re
from pathlib import Path
from typing import List, Optional

from wgquick.backend.helpers import atoi, split_list
from wgquick.errors import ConfigNotFoundError, InvalidConfigNameError
from wgquick.models import DEFAULT_CONFIG_DIR, InterfaceConfig
from wgquick.utils.validation import IFACE_RE

logger = logging.getLogger("wg-quick")

_CONF_NAME_RE = re.compile(r"([a-zA-Z0-9_=+.-]{1,16})\.conf")
_INTERFACE_SECTION = "[interface]"


def resolve_config_path(arg: str, config_dir: str = DEFAULT_CONFIG_DIR) -> Path:
    """A bare interface name maps into `config_dir`; anything else is a path."""
    if IFACE_RE.fullmatch(arg):
        return Path(config_dir) / f"{arg}.conf"
    return Path(arg)


def _directive(clean: str, key: str) -> Optional[str]:
    """Value of `key=` in a whitespace-free line, when present and non-empty."""
    prefix = f"{key}="
    if len(clean) > len(prefix) and clean[: len(prefix)].lower() == prefix.lower():
        return clean[len(prefix):]
    return None


def parse_config(arg: str, config_dir: str = DEFAULT_CONFIG_DIR) -> InterfaceConfig:
    """Read and split a tunnel config given a path or an interface name."""
    filename = resolve_config_path(arg, config_dir)
    try:
        f = open(filename, "r", encoding="utf-8", errors="surrogateescape", newline="\n")
    except OSError as e:
        message = f"Unable to open configuration file `{filename}': {e.strerror or e}"
        raise ConfigNotFoundError(message, exit_code=e.errno or 1) from e
    with f:
        m = _CONF_NAME_RE.fullmatch(filename.name)
        if not m:
            raise InvalidConfigNameError("The config file must be a valid interface name, followed by .conf")
        if os.fstat(f.fileno()).st_mode & 0o077:
            logger.warning("Warning: `%s' is accessible to group or others", filename)
        name = m.group(1)

        residual: List[str] = []
        addresses: List[str] = []
        dnses: List[str] = []
        mtu = 0
        in_interface_section = False
        for line in f:
            clean = "".join(line.split())
            if clean.startswith("["):
                in_interface_section = False
            if clean.lower() == _INTERFACE_SECTION:
                in_interface_section = True
            if in_interface_section:
                value = _directive(clean, "Address")
                if value is not None:
                    addresses.extend(split_list(value))
                    continue
                value = _directive(clean, "DNS")
                if value is not None:
                    dnses.extend(split_list(value))
                    continue
                value = _directive(clean, "MTU")
                if value is not None:
                    mtu = atoi(value)
                    continue
            residual.append(line)

    return InterfaceConfig(
        name=name,
        residual_config="".join(residual),
        addresses=tuple(addresses),
        dns_servers=tuple(dnses),
        mtu=mtu if mtu > 0 else None,
    )
