"""
Scoreboard engine for ICPC-style contests.

This module contains the Scoreboard class, which owns the teams, the pending
submission queue and the ranking order, and implements flushing, freezing
and the scroll reveal of frozen results.
"""

import heapq
from typing import List, Optional, Tuple

from ..models.models import (
    ALL, DEFAULT_PENALTY_PER_REJECTION, MAX_PROBLEM_COUNT,
    Outcome, RankChange, RankingEntry, ScrollResult, Submission, SubmissionStatus, Team
)
from ..utils.logger_config import get_logger
from .ranking import RankingOrder

logger = get_logger("scoreboard")


class _RevealEntry:
    """Priority queue entry of the scroll; the worst ranked team pops first"""

    __slots__ = ("key", "team")

    def __init__(self, team: Team):
        self.key = team.rank_key()
        self.team = team

    def __lt__(self, other: "_RevealEntry") -> bool:
        return self.key > other.key


class Scoreboard:
    """
    Live scoreboard of one contest session.

    Rule violations (duplicated team, freezing twice, ...) are reported as
    Outcome values and leave the state untouched. Preconditions such as an
    existing team or a started contest are the caller's responsibility.
    """

    def __init__(self, penalty_per_rejection: int = DEFAULT_PENALTY_PER_REJECTION,
                 max_problems: int = MAX_PROBLEM_COUNT):
        if not 1 <= max_problems <= MAX_PROBLEM_COUNT:
            raise ValueError(f"max_problems must be between 1 and {MAX_PROBLEM_COUNT}, got {max_problems}")
        self.penalty_per_rejection = penalty_per_rejection
        self.max_problems = max_problems

        self.started = False
        self.frozen = False
        self.duration = 0
        self.problem_count = 0

        self._names = set()
        self._teams: List[Team] = []
        self._teams_by_name = {}
        self._ranking: Optional[RankingOrder] = None
        self._pending: List[Submission] = []

    @property
    def team_names(self) -> List[str]:
        return sorted(self._names)

    def get_team(self, name: str) -> Optional[Team]:
        return self._teams_by_name.get(name)

    def add_team(self, name: str) -> Outcome:
        if self.started:
            logger.warning(f"Refused to add team {name}: competition has started")
            return Outcome.CONTEST_STARTED
        if name in self._names:
            logger.warning(f"Refused to add team {name}: duplicated team name")
            return Outcome.DUPLICATED_TEAM
        self._names.add(name)
        logger.debug(f"Added team {name}")
        return Outcome.SUCCESS

    def start_contest(self, duration: int, problem_count: int) -> Outcome:
        if self.started:
            logger.warning("Refused to start: competition has started")
            return Outcome.CONTEST_STARTED
        if not 1 <= problem_count <= self.max_problems:
            logger.warning(f"Refused to start: invalid problem count {problem_count}")
            return Outcome.INVALID_PROBLEM_COUNT

        self.duration = duration
        self.problem_count = problem_count
        self._teams = [Team(name, index, problem_count) for index, name in enumerate(sorted(self._names))]
        self._teams_by_name = {team.name: team for team in self._teams}
        self._ranking = RankingOrder(self._teams)
        self.started = True
        logger.info(f"Competition started with {len(self._teams)} teams and {problem_count} problems")
        return Outcome.SUCCESS

    def submit(self, team_name: str, problem: int, status: SubmissionStatus, time: int) -> None:
        team = self._teams_by_name[team_name]
        submission = Submission(team_name, problem, status, time)

        if not self.frozen:
            self._pending.append(submission)
        elif not team.problems[problem].accepted:
            record = team.problems[problem]
            # Every attempt after the freeze shows in the cell, even past a hidden acceptance
            record.submissions_after_frozen += 1
            if not team.has_accepted_submission(problem):
                team.frozen_problems |= 1 << problem
                if status == SubmissionStatus.ACCEPTED:
                    record.accepted_time_after_frozen = time
                else:
                    record.unaccepted_submissions_after_frozen += 1

        # Queries always see the latest submission, frozen or not
        team.record_submission(submission)

    def flush(self) -> List[RankingEntry]:
        """Apply the pending submissions and recompute every rank"""
        for submission in self._pending:
            team = self._teams_by_name[submission.team]
            record = team.problems[submission.problem]
            if record.accepted:
                continue
            if submission.status == SubmissionStatus.ACCEPTED:
                with self._ranking.reordering(team):
                    record.accepted_time = submission.time
                    team.accept(submission.problem, self.penalty_per_rejection)
            else:
                record.unaccepted_submissions += 1

        logger.debug(f"Flushed {len(self._pending)} pending submissions")
        self._pending.clear()
        return [RankingEntry.of(team) for team in self._ranking.assign_ranks()]

    def freeze(self) -> Outcome:
        if self.frozen:
            logger.warning("Refused to freeze: scoreboard has been frozen")
            return Outcome.ALREADY_FROZEN
        self.frozen = True
        logger.info("Scoreboard frozen")
        return Outcome.SUCCESS

    def scroll(self) -> ScrollResult:
        """
        Reveal the frozen problems and leave frozen mode.

        The worst ranked team with a frozen problem has its lowest frozen
        problem unveiled, then goes back into the queue while it has frozen
        problems left. When an unveiled acceptance moves a team up, the team
        now directly below it is reported with the team's new standing.
        """
        if not self.frozen:
            logger.warning("Refused to scroll: scoreboard has not been frozen")
            return ScrollResult(Outcome.NOT_FROZEN)

        result = ScrollResult(Outcome.SUCCESS, before=self.flush())

        queue = [_RevealEntry(team) for team in self._ranking if team.frozen_problems]
        heapq.heapify(queue)
        while queue:
            team = heapq.heappop(queue).team
            problem = team.first_frozen_problem()
            change = self._unveil(team, problem)
            if change is not None:
                result.changes.append(change)
            if team.frozen_problems:
                heapq.heappush(queue, _RevealEntry(team))

        result.after = self.flush()
        self.frozen = False
        logger.info(f"Scoreboard scrolled with {len(result.changes)} ranking changes")
        return result

    def _unveil(self, team: Team, problem: int) -> Optional[RankChange]:
        record = team.problems[problem]
        if not record.accepted_time_after_frozen:
            record.unfreeze()
            team.frozen_problems &= ~(1 << problem)
            return None

        with self._ranking.reordering(team):
            displaced = self._ranking.successor(team)
            record.unfreeze()
            team.accept(problem, self.penalty_per_rejection)
            team.frozen_problems &= ~(1 << problem)
            successor = self._ranking.successor(team)

        if successor is displaced:
            return None
        logger.debug(f"{team.name} overtook {successor.name} after unveiling problem {problem}")
        return RankChange(team.name, successor.name, team.accepted_count, team.penalty)

    def query_ranking(self, team_name: str) -> Tuple[Outcome, int]:
        """Rank as of the last flush or scroll, -1 for an unknown team"""
        team = self._teams_by_name.get(team_name)
        if team is None:
            logger.warning(f"Ranking query for unknown team {team_name}")
            return Outcome.TEAM_NOT_FOUND, -1
        return Outcome.SUCCESS, team.rank

    def query_submission(self, team_name: str, problem=ALL, status=ALL) -> Tuple[Outcome, Optional[Submission]]:
        team = self._teams_by_name.get(team_name)
        if team is None:
            logger.warning(f"Submission query for unknown team {team_name}")
            return Outcome.TEAM_NOT_FOUND, None
        return Outcome.SUCCESS, team.last_submission(status, problem)

    def rankings(self) -> List[RankingEntry]:
        """Current snapshot in ranking order, without applying pending submissions"""
        if self._ranking is None:
            return []
        return sorted((RankingEntry.of(team) for team in self._teams), key=lambda entry: entry.rank)

    def to_dict(self) -> dict:
        return {
            "started": self.started,
            "frozen": self.frozen,
            "duration": self.duration,
            "problem_count": self.problem_count,
            "pending_submissions": len(self._pending),
            "teams": self.team_names,
        }
