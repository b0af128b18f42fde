#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Utilities module for wg-quick.
This module contains the CLI result helpers and interface-name validation.
"""
import re

import typer

from wgquick.errors import InvalidConfigNameError, WgQuickError

IFACE_RE = re.compile(r"[a-zA-Z0-9_=+.-]{1,16}")


def fail(error: WgQuickError) -> None:
    """Print the error to stderr and exit with the error's code."""
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(code=error.exit_code)


def succeed() -> None:
    raise typer.Exit(code=0)


def validate_name(name: str) -> None:
    """Validate an interface name against the kernel/wg naming grammar."""
    if not IFACE_RE.fullmatch(name or ""):
        raise InvalidConfigNameError(
            f"Invalid interface name '{name}'. Only 1-16 of A-Z, a-z, 0-9 and _=+.- allowed"
        )
