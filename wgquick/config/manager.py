#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Configuration management module for wg-quick.
This module handles tool settings loading (JSON file + environment overrides).
"""
import json
import logging
import os
from typing import Any, Dict, Optional

from pydantic import ValidationError

from wgquick.errors import ConfigError
from wgquick.models import DEFAULT_CONFIG_DIR, ToolSettings

logger = logging.getLogger("wg-quick")

DEFAULT_SETTINGS_FILE = f"{DEFAULT_CONFIG_DIR}/wg-quick.json"

# environment variable -> settings key
_ENV_OVERRIDES = {
    "WG_QUICK_CONFIG_DIR": "config_dir",
    "WG_QUICK_ROUTE_SOURCE": "route_source",
}


class ConfigManager:
    """Manager for tool settings."""

    def __init__(self, environ: Optional[Dict[str, str]] = None):
        self.environ = os.environ if environ is None else environ

    def load_tool_config(self) -> ToolSettings:
        """Load tool settings.
        Precedence: env > JSON file (WG_QUICK_CONFIG) > built-in defaults.
        A settings file that exists but is not valid JSON, or values that fail
        validation, are fatal.
        """
        cfg: Dict[str, Any] = {}
        cfg_path = self.environ.get("WG_QUICK_CONFIG", DEFAULT_SETTINGS_FILE)
        file_cfg = self._read_settings_file(cfg_path)
        if file_cfg is not None:
            cfg.update(file_cfg)
            logger.debug("Loaded settings from %s", cfg_path)
        for env_key, cfg_key in _ENV_OVERRIDES.items():
            value = self.environ.get(env_key)
            if value:
                cfg[cfg_key] = value
        level = self.environ.get("WG_QUICK_LOG_LEVEL")
        if level:
            log_cfg = cfg.get("logging") if isinstance(cfg.get("logging"), dict) else {}
            cfg["logging"] = {**log_cfg, "level": level}
        try:
            return ToolSettings(**cfg)
        except ValidationError as e:
            raise ConfigError(f"Invalid wg-quick settings: {e}") from e

    @staticmethod
    def _read_settings_file(cfg_path: str) -> Optional[Dict[str, Any]]:
        """Parsed settings file, or None when there is none to read.
        Before escalating through su the file may sit in a root-only directory;
        an unprivileged caller then runs on defaults until it is re-executed."""
        try:
            with open(cfg_path, "r", encoding="utf-8") as f:
                file_cfg = json.load(f)
        except (FileNotFoundError, NotADirectoryError):
            return None
        except PermissionError as e:
            if os.getuid():
                logger.debug("Settings file %s not readable before escalation: %s", cfg_path, e)
                return None
            raise ConfigError(f"Invalid settings in WG_QUICK_CONFIG='{cfg_path}': {e}") from e
        except (OSError, ValueError) as e:
            raise ConfigError(f"Invalid settings in WG_QUICK_CONFIG='{cfg_path}': {e}") from e
        if not isinstance(file_cfg, dict):
            raise ConfigError(f"Settings file '{cfg_path}' must contain a JSON object")
        return file_cfg
