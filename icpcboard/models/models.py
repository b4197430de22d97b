from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

# Wildcard accepted by submission queries for both the problem and the status
ALL = "ALL"

# Problems are named A..Z, which bounds the width of every per-team bitmask
MAX_PROBLEM_COUNT = 26

# Penalty minutes charged for each rejected attempt before an acceptance
DEFAULT_PENALTY_PER_REJECTION = 20


def problem_name(problem_index: int) -> str:
    """Letter of a problem, A for 0, B for 1, ..."""
    return chr(ord('A') + problem_index)


def problem_index(name: str) -> int:
    """Index of a problem letter, the inverse of problem_name"""
    if len(name) != 1 or not 'A' <= name <= 'Z':
        raise ValueError(f"Invalid problem name: {name!r}")
    return ord(name) - ord('A')


class SubmissionStatus(str, Enum):
    ACCEPTED = "Accepted"
    WRONG_ANSWER = "Wrong_Answer"
    RUNTIME_ERROR = "Runtime_Error"
    TIME_LIMIT_EXCEEDED = "Time_Limit_Exceed"


class Outcome(str, Enum):
    """Result of an engine operation that can be refused by contest rules"""
    SUCCESS = "success"
    DUPLICATED_TEAM = "duplicated_team"
    CONTEST_STARTED = "contest_started"
    INVALID_PROBLEM_COUNT = "invalid_problem_count"
    ALREADY_FROZEN = "already_frozen"
    NOT_FROZEN = "not_frozen"
    TEAM_NOT_FOUND = "team_not_found"


@dataclass(frozen=True)
class Submission:
    """A judged submission of a team to a problem"""
    team: str
    problem: int
    status: SubmissionStatus
    time: int

    def to_dict(self) -> Dict:
        return {
            "team": self.team,
            "problem": problem_name(self.problem),
            "status": self.status.value,
            "time": self.time,
        }


class ProblemRecord:
    """
    State of one problem for one team.

    The authoritative fields only change on flush and scroll. Submissions made
    while the scoreboard is frozen accumulate in the *_after_frozen fields
    until the problem is unveiled.
    """

    def __init__(self):
        self.unaccepted_submissions = 0
        self.accepted_time = 0
        self.submissions_after_frozen = 0
        self.unaccepted_submissions_after_frozen = 0
        self.accepted_time_after_frozen = 0

    @property
    def accepted(self) -> bool:
        return self.accepted_time != 0

    def penalty(self, penalty_per_rejection: int = DEFAULT_PENALTY_PER_REJECTION) -> int:
        return self.unaccepted_submissions * penalty_per_rejection + self.accepted_time

    def unfreeze(self) -> None:
        """Merge the frozen counters into the authoritative ones and reset them"""
        self.unaccepted_submissions += self.unaccepted_submissions_after_frozen
        self.accepted_time = self.accepted_time_after_frozen
        self.submissions_after_frozen = 0
        self.unaccepted_submissions_after_frozen = 0
        self.accepted_time_after_frozen = 0

    def cell(self, frozen: bool) -> str:
        """Scoreboard cell: +k accepted, -k rejected, . untried, -k/m frozen"""
        if frozen:
            return f"{-self.unaccepted_submissions}/{self.submissions_after_frozen}"
        if self.accepted:
            return f"+{self.unaccepted_submissions}" if self.unaccepted_submissions else "+"
        if self.unaccepted_submissions:
            return f"{-self.unaccepted_submissions}"
        return "."

    def to_dict(self) -> Dict:
        return {
            "unaccepted_submissions": self.unaccepted_submissions,
            "accepted_time": self.accepted_time,
            "submissions_after_frozen": self.submissions_after_frozen,
            "unaccepted_submissions_after_frozen": self.unaccepted_submissions_after_frozen,
            "accepted_time_after_frozen": self.accepted_time_after_frozen,
        }


class Team:
    def __init__(self, name: str, index: int, problem_count: int):
        # Identity; index is the lexicographic position fixed at contest start
        self.name = name
        self.index = index

        # Bit i is problem i
        self.accepted_problems = 0
        self.frozen_problems = 0

        self.penalty = 0
        self.rank = index + 1
        self.problems: List[ProblemRecord] = [ProblemRecord() for _ in range(problem_count)]

        # Acceptance times of accepted problems, largest first
        self.accepted_times: List[int] = []

        # Keyed by (status or ALL, problem index or ALL)
        self._last_submissions: Dict[Tuple[object, object], Submission] = {}

    @property
    def accepted_count(self) -> int:
        return bin(self.accepted_problems).count("1")

    def is_frozen(self, problem: int) -> bool:
        return bool(self.frozen_problems & (1 << problem))

    def first_frozen_problem(self) -> int:
        """Lowest index among the frozen problems; the team must have one"""
        return (self.frozen_problems & -self.frozen_problems).bit_length() - 1

    def refresh_accepted_times(self) -> None:
        self.accepted_times = sorted(
            (record.accepted_time for i, record in enumerate(self.problems)
             if self.accepted_problems & (1 << i)),
            reverse=True,
        )

    def accept(self, problem: int, penalty_per_rejection: int = DEFAULT_PENALTY_PER_REJECTION) -> None:
        """Make an accepted problem record count towards the team's standing"""
        self.accepted_problems |= 1 << problem
        self.penalty += self.problems[problem].penalty(penalty_per_rejection)
        self.refresh_accepted_times()

    def rank_key(self) -> Tuple[int, int, Tuple[int, ...], int]:
        """Sort key of the ranking order; smaller is better, never equal for two teams"""
        return (-self.accepted_count, self.penalty, tuple(self.accepted_times), self.index)

    def record_submission(self, submission: Submission) -> None:
        for status in (submission.status, ALL):
            for problem in (submission.problem, ALL):
                self._last_submissions[(status, problem)] = submission

    def last_submission(self, status=ALL, problem=ALL) -> Optional[Submission]:
        return self._last_submissions.get((status, problem))

    def has_accepted_submission(self, problem: int) -> bool:
        return self.last_submission(SubmissionStatus.ACCEPTED, problem) is not None

    def cells(self) -> List[str]:
        return [record.cell(self.is_frozen(i)) for i, record in enumerate(self.problems)]

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "rank": self.rank,
            "accepted_count": self.accepted_count,
            "penalty": self.penalty,
            "accepted_problems": [problem_name(i) for i in range(len(self.problems))
                                  if self.accepted_problems & (1 << i)],
            "frozen_problems": [problem_name(i) for i in range(len(self.problems))
                                if self.is_frozen(i)],
        }


@dataclass(frozen=True)
class RankingEntry:
    """One row of a scoreboard snapshot"""
    team: str
    rank: int
    accepted_count: int
    penalty: int
    cells: Tuple[str, ...]

    @classmethod
    def of(cls, team: Team) -> "RankingEntry":
        return cls(team.name, team.rank, team.accepted_count, team.penalty, tuple(team.cells()))

    def to_line(self) -> str:
        return " ".join([self.team, str(self.rank), str(self.accepted_count), str(self.penalty), *self.cells])

    def to_dict(self) -> Dict:
        return {
            "team": self.team,
            "rank": self.rank,
            "accepted_count": self.accepted_count,
            "penalty": self.penalty,
            "cells": list(self.cells),
        }


@dataclass(frozen=True)
class RankChange:
    """A team overtook replaced_team while its frozen problems were unveiled"""
    team: str
    replaced_team: str
    accepted_count: int
    penalty: int

    def to_line(self) -> str:
        return f"{self.team} {self.replaced_team} {self.accepted_count} {self.penalty}"

    def to_dict(self) -> Dict:
        return {
            "team": self.team,
            "replaced_team": self.replaced_team,
            "accepted_count": self.accepted_count,
            "penalty": self.penalty,
        }


@dataclass
class ScrollResult:
    outcome: Outcome
    before: List[RankingEntry] = field(default_factory=list)
    changes: List[RankChange] = field(default_factory=list)
    after: List[RankingEntry] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "before": [entry.to_dict() for entry in self.before],
            "changes": [change.to_dict() for change in self.changes],
            "after": [entry.to_dict() for entry in self.after],
        }
