"""
Configuration management for the ICPC scoreboard.

Built-in defaults are overlaid by the JSON config file and then by
ICPCBOARD_* environment variables. main.py applies command-line flags
on top through ConfigManager.set.
"""

import json
import os
from typing import Dict, Any, Optional
from icpcboard.utils.logger_config import get_logger

logger = get_logger("config_manager")


def _flag(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("true", "yes", "on", "1"):
        return True
    if lowered in ("false", "no", "off", "0"):
        return False
    raise ValueError(value)

# Environment variable -> (section, key, converter)
ENV_OVERRIDES = {
    "ICPCBOARD_LOG_LEVEL": ("logging", "level", str),
    "ICPCBOARD_LOG_DIR": ("logging", "directory", str),
    "ICPCBOARD_LOG_COLORS": ("logging", "enable_colors", _flag),
    "ICPCBOARD_HOST": ("server", "host", str),
    "ICPCBOARD_PORT": ("server", "port", int),
    "ICPCBOARD_PENALTY_PER_REJECTION": ("contest", "penalty_per_rejection", int),
    "ICPCBOARD_MAX_PROBLEMS": ("contest", "max_problems", int),
}


class ConfigManager:
    """Centralized configuration management for the scoreboard"""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration manager

        Args:
            config_path: Path to configuration file (optional)
        """
        self.config_path = config_path or "config/scoreboard_config.json"
        self._config = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file and environment variables"""
        self._config = self._get_default_config()

        if os.path.exists(self.config_path):
            try:
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    file_config = json.load(f)
                self._merge_config(file_config)
                logger.info(f"Loaded configuration from {self.config_path}")
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Failed to load config file {self.config_path}: {e}")

        self._load_from_env()

        logger.debug("Configuration loaded successfully")

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values"""
        return {
            "logging": {
                "level": "INFO",
                "directory": "logs/scoreboard",
                "enable_colors": True
            },
            "server": {
                "host": "0.0.0.0",
                "port": 5000
            },
            "contest": {
                "penalty_per_rejection": 20,
                "max_problems": 26
            }
        }

    def _merge_config(self, new_config: Dict[str, Any]) -> None:
        """Merge new configuration into existing config"""
        def merge_dict(target: Dict[str, Any], source: Dict[str, Any]) -> None:
            for key, value in source.items():
                if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                    merge_dict(target[key], value)
                else:
                    target[key] = value

        merge_dict(self._config, new_config)

    def _load_from_env(self) -> None:
        """Apply ICPCBOARD_* overrides; values that do not parse are ignored"""
        for env_var, (section, key, convert) in ENV_OVERRIDES.items():
            value = os.getenv(env_var)
            if value is None:
                continue
            try:
                self._config.setdefault(section, {})[key] = convert(value)
            except ValueError:
                logger.warning(f"Ignoring {env_var}={value!r}: not a valid {section}.{key} value")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation

        Args:
            key: Configuration key (e.g., "logging.level")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        current = self._config
        for k in key.split('.'):
            if isinstance(current, dict) and k in current:
                current = current[k]
            else:
                return default
        return current

    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value using dot notation

        Args:
            key: Configuration key (e.g., "logging.level")
            value: Value to set
        """
        *parents, leaf = key.split('.')
        current = self._config
        for k in parents:
            current = current.setdefault(k, {})
        current[leaf] = value

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get entire configuration section"""
        return self._config.get(section, {})


# Global configuration instance
_global_config: Optional[ConfigManager] = None


def get_config(config_path: Optional[str] = None) -> ConfigManager:
    """
    Get or create global configuration instance

    Args:
        config_path: Configuration file path (optional)

    Returns:
        Global configuration manager instance
    """
    global _global_config
    if _global_config is None:
        _global_config = ConfigManager(config_path)
    return _global_config


def set_config(config_manager: Optional[ConfigManager]) -> None:
    """
    Set global configuration instance

    Args:
        config_manager: Configuration manager instance, or None to reset
    """
    global _global_config
    _global_config = config_manager
