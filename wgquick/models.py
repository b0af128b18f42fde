#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Data models for wg-quick.
This module contains the data classes used throughout the application.
"""
import dataclasses
from typing import Optional, Tuple

from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_DIR = "/data/misc/wireguard"


@dataclasses.dataclass(frozen=True)
class InterfaceConfig:
    """Interface-level settings extracted from a tunnel config file."""

    name: str
    residual_config: str = ""
    addresses: Tuple[str, ...] = ()
    dns_servers: Tuple[str, ...] = ()
    mtu: Optional[int] = None


@dataclasses.dataclass(frozen=True)
class RouteMtuQuery:
    """MTU observed on the route towards one endpoint."""

    endpoint: str
    mtu: Optional[int]


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "%(message)s"


class ToolSettings(BaseModel):
    """Validated tool settings (file + environment)."""

    config_dir: str = DEFAULT_CONFIG_DIR
    route_source: str = "ip"
    auto_su: bool = True
    ip_bin: str = "ip"
    wg_bin: str = "wg"
    ndc_bin: str = "ndc"
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("route_source")
    @classmethod
    def _check_route_source(cls, value: str) -> str:
        value = (value or "").strip().lower()
        if value not in {"ip", "netlink"}:
            raise ValueError(f"unsupported route source '{value}' (expected 'ip' or 'netlink')")
        return value
