"""
icpcboard - ICPC-style contest scoreboard

Maintains a live contest ranking from a stream of judged submissions, with
a frozen mode that hides late results until they are revealed by scrolling.
"""

from .models.models import (
    ALL, Outcome, ProblemRecord, RankChange, RankingEntry, ScrollResult,
    Submission, SubmissionStatus, Team, problem_index, problem_name
)
from .engine.ranking import RankingOrder
from .engine.scoreboard import Scoreboard
from .cli.commands import CommandError, CommandHandler

__version__ = "0.1.0"
__all__ = [
    "ALL", "Outcome", "ProblemRecord", "RankChange", "RankingEntry", "ScrollResult",
    "Submission", "SubmissionStatus", "Team", "problem_index", "problem_name",
    "RankingOrder", "Scoreboard", "CommandError", "CommandHandler"
]
