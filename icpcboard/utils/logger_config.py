"""
Logging configuration for the ICPC scoreboard

This module provides a unified logging configuration with colored console
output and an optional plain-text log file. Console output goes to stderr
so that stdout stays reserved for scoreboard reports.
"""

import logging
import sys
from typing import Optional


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors to console output"""

    COLORS = {
        'DEBUG': '\033[32m',      # Green text
        'INFO': '\033[36m',       # Cyan text
        'WARNING': '\033[33m',    # Yellow text
        'ERROR': '\033[31m',      # Red text
        'CRITICAL': '\033[41m\033[97m', # Red background + white text
        'RESET': '\033[0m'
    }

    def format(self, record):
        color = self.COLORS.get(record.levelname, '')
        reset = self.COLORS['RESET']

        # Only the level name and message are colored; the record is shared with the file handler
        levelname, msg = record.levelname, record.msg
        record.levelname = f"{color}{levelname}{reset}"
        record.msg = f"{color}{msg}{reset}"
        try:
            return super().format(record)
        finally:
            record.levelname, record.msg = levelname, msg


class NoColorFormatter(logging.Formatter):
    """Plain formatter for log files and terminals without color support"""


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    enable_colors: bool = True
) -> None:
    """
    Setup logging configuration

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path
        enable_colors: Whether to enable colored output for console
    """
    # Remove existing handlers to avoid duplicates
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    base_format = '%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)s | %(filename)s:%(lineno)d - %(message)s'
    date_format = '%Y-%m-%d %H:%M:%S'

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(getattr(logging, level.upper()))

    formatter_class = ColoredFormatter if enable_colors else NoColorFormatter
    console_handler.setFormatter(formatter_class(base_format, datefmt=date_format))
    logging.root.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)  # File records all log levels
        file_handler.setFormatter(NoColorFormatter(base_format, datefmt=date_format))
        logging.root.addHandler(file_handler)

    logging.root.setLevel(logging.DEBUG)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the specified name

    Args:
        name: Logger name

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
