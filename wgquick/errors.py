#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Error types for wg-quick.
Every error carries the process exit code the CLI terminates with.
"""
from typing import Optional

EXIT_USAGE = 1
EXIT_CONTROL_SERVICE = 29
EXIT_NOT_WIREGUARD = 43
EXIT_INVALID_CONFIG_NAME = 77
EXIT_PATTERN = 88
EXIT_EXISTS = 92


class WgQuickError(Exception):
    """Base error; `exit_code` is what the process exits with."""

    exit_code = 1

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(WgQuickError):
    """Configuration file or tool settings error."""


class ConfigNotFoundError(ConfigError):
    """The configuration file could not be opened (exit code is errno)."""


class InvalidConfigNameError(ConfigError):
    exit_code = EXIT_INVALID_CONFIG_NAME


class DeviceError(WgQuickError):
    """Interface existence check failed."""


class InterfaceExistsError(DeviceError):
    exit_code = EXIT_EXISTS


class NotAWireguardInterfaceError(DeviceError):
    exit_code = EXIT_NOT_WIREGUARD


class CommandError(WgQuickError):
    """External command exited nonzero or could not be launched."""


class ControlServiceError(WgQuickError):
    """ndc response did not carry the success token."""

    exit_code = EXIT_CONTROL_SERVICE


class PatternError(WgQuickError):
    exit_code = EXIT_PATTERN
