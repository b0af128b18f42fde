#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CLI commands module for wg-quick.
This module contains the command-line interface commands for interface operations.
"""
import logging
import os
import shlex
from typing import List

import typer

from wgquick.backend import CommandGateway, get_route_inspector
from wgquick.config import parse_config
from wgquick.errors import CommandError, WgQuickError
from wgquick.models import ToolSettings
from wgquick.orchestration import InterfaceLifecycle, MtuEstimator
from wgquick.utils.validation import fail, succeed

logger = logging.getLogger("wg-quick")


def auto_su(argv: List[str]) -> None:
    """Re-exec through su(1) when not running as root."""
    if not os.getuid():
        return
    typer.echo("[$] su -p -c wg-quick")
    try:
        os.execvp("su", ["su", "-p", "-c", shlex.join(argv)])
    except OSError as e:
        raise CommandError(f"su: {e.strerror or e}", exit_code=e.errno or 1) from e


class CLICommands:
    """CLI commands handler."""

    def __init__(self, settings: ToolSettings):
        self.settings = settings
        self.gateway = CommandGateway(settings.ip_bin, settings.wg_bin, settings.ndc_bin)
        inspector = get_route_inspector(settings.route_source, self.gateway)
        self.lifecycle = InterfaceLifecycle(self.gateway, MtuEstimator(self.gateway, inspector))

    def up(self, arg: str) -> None:
        """Bring an interface up from its config."""
        try:
            config = parse_config(arg, self.settings.config_dir)
            self.lifecycle.up(config)
        except WgQuickError as e:
            fail(e)
        succeed()

    def down(self, arg: str) -> None:
        """Tear an interface down."""
        try:
            config = parse_config(arg, self.settings.config_dir)
            self.lifecycle.down(config.name)
        except WgQuickError as e:
            fail(e)
        succeed()
