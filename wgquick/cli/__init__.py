# CLI module for interface up/down commands
from .commands import CLICommands, auto_su

__all__ = ["CLICommands", "auto_su"]
