"""
Configuration management for clusterplan.

Configuration is layered, later sources winning:
- Built-in defaults
- An optional YAML configuration file
- CLUSTERPLAN_* environment variables
"""

import copy
import os
from typing import Any, Dict, Optional

import yaml

ENV_PREFIX = "CLUSTERPLAN_"

DEFAULTS: Dict[str, Any] = {
    "registry": {
        "zk_addr": "localhost:2181",
        "zk_prefix": "",
    },
    "planner": {
        "use_metadata": True,
        "force_rebuild": False,
        "selection": "count",
        "shuffle_seed": 0,
    },
    "logging": {
        "level": "INFO",
        "format": "console",
        "output": "stderr",
    },
}


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


# Environment variable suffix -> (config key, parser)
ENV_OVERRIDES: Dict[str, tuple] = {
    "ZK_ADDR": ("registry.zk_addr", str),
    "ZK_PREFIX": ("registry.zk_prefix", str),
    "USE_METADATA": ("planner.use_metadata", _parse_bool),
    "FORCE_REBUILD": ("planner.force_rebuild", _parse_bool),
    "SELECTION": ("planner.selection", str),
    "SHUFFLE_SEED": ("planner.shuffle_seed", int),
    "LOG_LEVEL": ("logging.level", str),
    "LOG_FORMAT": ("logging.format", str),
}


class Config:
    """Configuration manager for clusterplan."""

    def __init__(
        self,
        config_file: Optional[str] = None,
        environ: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize configuration.

        Args:
            config_file: Path to a YAML configuration file
            environ: Environment mapping (defaults to os.environ)
        """
        self._config: Dict[str, Any] = copy.deepcopy(DEFAULTS)

        if config_file:
            self._load_config_file(config_file)

        self._apply_env_overrides(os.environ if environ is None else environ)

    def _load_config_file(self, config_file: str) -> None:
        """
        Load configuration from YAML file.

        Args:
            config_file: Path to YAML configuration file
        """
        with open(config_file, "r") as f:
            file_config = yaml.safe_load(f) or {}

        if not isinstance(file_config, dict):
            raise ValueError(f"Config file {config_file} must contain a mapping")

        self._config = self._deep_merge(self._config, file_config)

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """
        Deep merge two dictionaries.

        Args:
            base: Base dictionary
            override: Override dictionary

        Returns:
            Merged dictionary
        """
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_overrides(self, environ: Dict[str, str]) -> None:
        """Apply CLUSTERPLAN_* environment variable overrides."""
        for suffix, (key, parse) in ENV_OVERRIDES.items():
            raw = environ.get(ENV_PREFIX + suffix)
            if raw is None or raw == "":
                continue
            self.set(key, parse(raw))

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key: Configuration key in dot notation (e.g., "planner.shuffle_seed")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        value = self._config
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value using dot notation.

        Args:
            key: Configuration key in dot notation
            value: Value to set
        """
        keys = key.split(".")
        config = self._config
        for k in keys[:-1]:
            config = config.setdefault(k, {})
        config[keys[-1]] = value

    def to_dict(self) -> Dict[str, Any]:
        """Get entire configuration as a (deep-copied) dictionary."""
        return copy.deepcopy(self._config)


# Global configuration instance
_config: Optional[Config] = None


def get_config(config_file: Optional[str] = None) -> Config:
    """
    Get global configuration instance.

    Args:
        config_file: Optional configuration file path

    Returns:
        Configuration instance
    """
    global _config
    if _config is None:
        _config = Config(config_file)
    return _config


def reset_config() -> None:
    """Reset global configuration (mainly for testing)."""
    global _config
    _config = None
