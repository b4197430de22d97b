from .models import (
    ALL, MAX_PROBLEM_COUNT, DEFAULT_PENALTY_PER_REJECTION,
    Outcome, ProblemRecord, RankChange, RankingEntry, ScrollResult,
    Submission, SubmissionStatus, Team, problem_index, problem_name
)

__all__ = [
    "ALL", "MAX_PROBLEM_COUNT", "DEFAULT_PENALTY_PER_REJECTION",
    "Outcome", "ProblemRecord", "RankChange", "RankingEntry", "ScrollResult",
    "Submission", "SubmissionStatus", "Team", "problem_index", "problem_name"
]
