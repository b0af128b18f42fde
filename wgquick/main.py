#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Licensed to the Apache Software Foundation (ASF) under one
# or more contributor license agreements.  See the NOTICE file
# distributed with this work for additional information
# regarding copyright ownership.  The ASF licenses this file
# to you under the Apache License, Version 2.0 (the
# "License"); you may not use this file except in compliance
# with the License.  You may obtain a copy of the License at
#
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing,
# software distributed under the License is distributed on an
# "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY
# KIND, either express or implied.  See the License for the
# specific language governing permissions and limitations
# under the License.
from __future__ import annotations

import logging
import signal
import sys
from typing import List, Optional

import typer

from wgquick.cli import CLICommands, auto_su
from wgquick.config import ConfigManager
from wgquick.errors import EXIT_USAGE, WgQuickError
from wgquick.models import ToolSettings
from wgquick.utils.validation import fail

# Global variables
logger = logging.getLogger("wg-quick")
logger.setLevel(logging.INFO)
_DEF_HANDLER_SET = False
PROG = "wg-quick"
HELP_ARGS = ("help", "--help", "-h")
# Global configuration
SETTINGS: Optional[ToolSettings] = None


def usage(program: str = PROG, config_dir: str = "/data/misc/wireguard") -> str:
    return (
        f"Usage: {program} [ up | down ] [ CONFIG_FILE | INTERFACE ]\n"
        "\n"
        "  CONFIG_FILE is a configuration file, whose filename is the interface name\n"
        "  followed by `.conf'. Otherwise, INTERFACE is an interface name, with\n"
        f"  configuration found at {config_dir}/INTERFACE.conf. It is to be readable\n"
        "  by wg(8)'s `setconf' sub-command, with the exception of the following additions\n"
        f"  to the [Interface] section, which are handled by {program}:\n"
        "\n"
        "  - Address: may be specified one or more times and contains one or more\n"
        "    IP addresses (with an optional CIDR mask) to be set for the interface.\n"
        "  - MTU: an optional MTU for the interface; if unspecified, auto-calculated.\n"
        "  - DNS: an optional DNS server to use while the device is up.\n"
        "\n"
        "See wg-quick(8) for more info and examples."
    )


def _apply_logging_from_cfg(settings: ToolSettings) -> None:
    """Apply logging configuration from tool settings.
    Command traces go to stdout next to the su notice; warnings and errors to stderr."""
    global _DEF_HANDLER_SET
    if _DEF_HANDLER_SET:
        return
    level = settings.logging.level.upper()
    try:
        logger.setLevel(getattr(logging, level))
    except AttributeError:
        logger.setLevel(logging.INFO)
    if not logger.handlers:
        formatter = logging.Formatter(settings.logging.format)
        trace = logging.StreamHandler(sys.stdout)
        trace.addFilter(lambda record: record.levelno < logging.WARNING)
        trace.setFormatter(formatter)
        logger.addHandler(trace)
        problems = logging.StreamHandler(sys.stderr)
        problems.setLevel(logging.WARNING)
        problems.setFormatter(formatter)
        logger.addHandler(problems)
    _DEF_HANDLER_SET = True


def load_settings() -> ToolSettings:
    global SETTINGS
    if SETTINGS is None:
        try:
            SETTINGS = ConfigManager().load_tool_config()
        except WgQuickError as e:
            fail(e)
        _apply_logging_from_cfg(SETTINGS)
    return SETTINGS


def _escalate(settings: ToolSettings, verb: str, config: str) -> None:
    if not settings.auto_su:
        return
    try:
        auto_su([PROG, verb, config])
    except WgQuickError as e:
        fail(e)


# CLI interface
cli = typer.Typer(
    add_completion=False,
    help="Bring a WireGuard interface up or down from its configuration file.",
)


@cli.command()
def up(config: str = typer.Argument(..., metavar="CONFIG_FILE|INTERFACE")):
    """Create and configure the interface."""
    settings = load_settings()
    _escalate(settings, "up", config)
    CLICommands(settings).up(config)


@cli.command()
def down(config: str = typer.Argument(..., metavar="CONFIG_FILE|INTERFACE")):
    """Delete the interface and its policy network."""
    settings = load_settings()
    _escalate(settings, "down", config)
    CLICommands(settings).down(config)


@cli.command("help")
def help_():
    """Show usage."""
    settings = load_settings()
    typer.echo(usage(PROG, settings.config_dir))


def route_args(args: List[str]) -> Optional[List[str]]:
    """Arguments for the Typer app, or None when the command line is a usage error.
    `help`, `-h` and `--help` all show usage; the config argument is passed after
    `--` so names starting with a dash are never read as options."""
    if len(args) == 1 and args[0] in HELP_ARGS:
        return ["help"]
    if len(args) == 2 and args[0] in ("up", "down"):
        return [args[0], "--", args[1]]
    return None


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    args = route_args(sys.argv[1:] if argv is None else list(argv))
    if args is None:
        typer.echo(usage(PROG))
        sys.exit(EXIT_USAGE)
    try:
        rc = cli(args=args, prog_name=PROG, standalone_mode=False)
    except typer.Abort:
        sys.exit(128 + signal.SIGINT)
    sys.exit(rc if isinstance(rc, int) else 0)


if __name__ == "__main__":
    main()
