"""wg-quick: bring WireGuard interfaces up and down from a config file."""

__version__ = "1.0.0"
