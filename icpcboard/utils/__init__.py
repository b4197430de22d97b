"""
Utility modules for the ICPC scoreboard.

This module contains logging and configuration helpers shared by the
engine, the command protocol and the API server.
"""

from .logger_config import setup_logging, get_logger, ColoredFormatter, NoColorFormatter
from .config_manager import ConfigManager, get_config, set_config

__all__ = [
    "setup_logging", "get_logger", "ColoredFormatter", "NoColorFormatter",
    "ConfigManager", "get_config", "set_config"
]
