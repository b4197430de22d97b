"""
Engine of the ICPC scoreboard.

This module contains the ranking order and the scoreboard engine that
flushes, freezes and scrolls the standings.
"""

from .ranking import RankingOrder
from .scoreboard import Scoreboard

__all__ = ["RankingOrder", "Scoreboard"]
