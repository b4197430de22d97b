"""
Command protocol for the ICPC scoreboard.

Parses the line-oriented contest commands and renders their reports.
"""

from .commands import CommandError, CommandHandler

__all__ = ["CommandError", "CommandHandler"]
