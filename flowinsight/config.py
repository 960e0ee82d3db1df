"""
Runtime settings for flowinsight.

Each setting resolves in order:
1. Environment variable (FLOWINSIGHT_*)
2. ~/.flowinsight/dev.json (developer overrides)
3. Built-in default
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEV_CONFIG_PATH = Path("~/.flowinsight/dev.json").expanduser()

_TRUTHY = ("1", "true", "yes", "on")


class Config:
    """Settings resolved from env vars, then dev.json, then defaults."""

    def __init__(self, dev_config_path: Path | None = None):
        self._dev_config_path = dev_config_path or DEV_CONFIG_PATH
        self._dev: dict[str, Any] = self._load_dev_config()

    def _load_dev_config(self) -> dict[str, Any]:
        if not self._dev_config_path.exists():
            return {}
        try:
            with open(self._dev_config_path) as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Ignoring unreadable dev config {self._dev_config_path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring dev config {self._dev_config_path}: expected an object")
            return {}
        return data

    def _get(self, env_name: str, dev_key: str, default: Any) -> Any:
        env_value = os.environ.get(env_name)
        if env_value is not None:
            return env_value
        return self._dev.get(dev_key, default)

    def _get_bool(self, env_name: str, dev_key: str, default: bool) -> bool:
        value = self._get(env_name, dev_key, default)
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in _TRUTHY

    def _get_int(self, env_name: str, dev_key: str, default: int) -> int:
        value = self._get(env_name, dev_key, default)
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning(f"Invalid integer for {env_name}: {value!r}, using {default}")
            return default

    @property
    def VERBOSE(self) -> bool:
        return self._get_bool("FLOWINSIGHT_VERBOSE", "verbose", False)

    @property
    def DEV_MODE(self) -> bool:
        # Fail fast on rule bundle validation errors
        return self._get_bool("FLOWINSIGHT_DEV_MODE", "dev_mode", False)

    @property
    def RULES_FILE(self) -> str:
        return str(self._get("FLOWINSIGHT_RULES_FILE", "rules_file", ""))

    @property
    def BASE64_HINT_MIN_LENGTH(self) -> int:
        return self._get_int("FLOWINSIGHT_BASE64_HINT_MIN_LENGTH", "base64_hint_min_length", 100)

    @property
    def HEX_HINT_MIN_LENGTH(self) -> int:
        return self._get_int("FLOWINSIGHT_HEX_HINT_MIN_LENGTH", "hex_hint_min_length", 20)

    @property
    def HEX_VIEW_MAX_LINES(self) -> int:
        return self._get_int("FLOWINSIGHT_HEX_VIEW_MAX_LINES", "hex_view_max_lines", 1000)


config = Config()
