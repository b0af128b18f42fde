# Configuration module: tool settings and tunnel config parsing
from .manager import ConfigManager
from .parser import parse_config, resolve_config_path

__all__ = ["ConfigManager", "parse_config", "resolve_config_path"]
