"""
Text command protocol of the scoreboard.

Each line is one command. The handler validates it, runs it on a Scoreboard
and writes the report lines the contest system expects:

    ADDTEAM [team_name]
    START DURATION [duration_time] PROBLEM [problem_count]
    SUBMIT [problem_name] BY [team_name] WITH [submit_status] AT [time]
    FLUSH
    FREEZE
    SCROLL
    QUERY_RANKING [team_name]
    QUERY_SUBMISSION [team_name] WHERE PROBLEM=[problem_name] AND STATUS=[status]
    PRINT
    END
"""

import re
import sys
from typing import Callable, Dict, Iterable, List, Optional, TextIO

from ..engine.scoreboard import Scoreboard
from ..models.models import ALL, Outcome, RankingEntry, SubmissionStatus, problem_index, problem_name
from ..utils.logger_config import get_logger

logger = get_logger("commands")

_START = re.compile(r"^DURATION\s+(-?\d+)\s+PROBLEM\s+(-?\d+)$")
_SUBMIT = re.compile(r"^(\S+)\s+BY\s+(\S+)\s+WITH\s+(\S+)\s+AT\s+(-?\d+)$")
_QUERY_SUBMISSION = re.compile(r"^(\S+)\s+WHERE\s+PROBLEM=(\S+)\s+AND\s+STATUS=(\S+)$")

QUERY_RANKING_FROZEN_WARNING = "[Warning]Scoreboard is frozen. The ranking may be inaccurate until it were scrolled."


class CommandError(ValueError):
    """A command line that violates the protocol or its preconditions"""


class CommandHandler:
    """Runs protocol commands against one Scoreboard and writes their reports"""

    def __init__(self, scoreboard: Optional[Scoreboard] = None, out: Optional[TextIO] = None):
        self.scoreboard = scoreboard or Scoreboard()
        self.out = out or sys.stdout
        self._handlers: Dict[str, Callable[[str], None]] = {
            "ADDTEAM": self._add_team,
            "START": self._start,
            "SUBMIT": self._submit,
            "FLUSH": self._flush,
            "FREEZE": self._freeze,
            "SCROLL": self._scroll,
            "QUERY_RANKING": self._query_ranking,
            "QUERY_SUBMISSION": self._query_submission,
            "PRINT": self._print,
        }

    def _write(self, line: str) -> None:
        print(line, file=self.out)

    def _write_rankings(self, entries: List[RankingEntry]) -> None:
        for entry in entries:
            self._write(entry.to_line())

    def handle(self, line: str) -> bool:
        """
        Execute one command line.

        Returns:
            False once END was executed, True otherwise

        Raises:
            CommandError: If the line is malformed or its preconditions fail
        """
        command, _, arguments = line.strip().partition(" ")
        arguments = arguments.strip()
        if command == "END":
            self._write("[Info]Competition ends.")
            return False
        handler = self._handlers.get(command)
        if handler is None:
            raise CommandError(f"Unknown command: {command!r}")
        if command not in ("ADDTEAM", "START") and not self.scoreboard.started:
            raise CommandError(f"{command} requires a started competition")
        handler(arguments)
        return True

    def run(self, lines: Iterable[str]) -> int:
        """
        Execute commands until END or the end of the input.

        Invalid lines are logged and skipped. Returns the number of commands
        that were executed.
        """
        executed = 0
        for number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                keep_going = self.handle(line)
            except CommandError as e:
                logger.error(f"Line {number}: {e}")
                continue
            executed += 1
            if not keep_going:
                break
        logger.info(f"Executed {executed} commands")
        return executed

    # Argument validation

    def _team(self, name: str) -> str:
        if self.scoreboard.get_team(name) is None:
            raise CommandError(f"Unknown team: {name!r}")
        return name

    def _problem(self, name: str, allow_all: bool = False):
        if allow_all and name == ALL:
            return ALL
        try:
            index = problem_index(name)
        except ValueError as e:
            raise CommandError(str(e)) from e
        if index >= self.scoreboard.problem_count:
            raise CommandError(f"Problem {name} is out of range")
        return index

    @staticmethod
    def _status(name: str, allow_all: bool = False):
        if allow_all and name == ALL:
            return ALL
        try:
            return SubmissionStatus(name)
        except ValueError as e:
            raise CommandError(f"Unknown status: {name!r}") from e

    # Commands

    def _add_team(self, arguments: str) -> None:
        if not arguments or " " in arguments:
            raise CommandError(f"Invalid team name: {arguments!r}")
        outcome = self.scoreboard.add_team(arguments)
        if outcome == Outcome.CONTEST_STARTED:
            self._write("[Error]Add failed: competition has started.")
        elif outcome == Outcome.DUPLICATED_TEAM:
            self._write("[Error]Add failed: duplicated team name.")
        else:
            self._write("[Info]Add successfully.")

    def _start(self, arguments: str) -> None:
        match = _START.match(arguments)
        if match is None:
            raise CommandError(f"Malformed START arguments: {arguments!r}")
        outcome = self.scoreboard.start_contest(int(match.group(1)), int(match.group(2)))
        if outcome == Outcome.CONTEST_STARTED:
            self._write("[Error]Start failed: competition has started.")
        elif outcome == Outcome.INVALID_PROBLEM_COUNT:
            self._write("[Error]Start failed: invalid problem count.")
        else:
            self._write("[Info]Competition starts.")

    def _submit(self, arguments: str) -> None:
        match = _SUBMIT.match(arguments)
        if match is None:
            raise CommandError(f"Malformed SUBMIT arguments: {arguments!r}")
        problem = self._problem(match.group(1))
        team = self._team(match.group(2))
        status = self._status(match.group(3))
        self.scoreboard.submit(team, problem, status, int(match.group(4)))

    def _flush(self, arguments: str) -> None:
        self.scoreboard.flush()
        self._write("[Info]Flush scoreboard.")

    def _freeze(self, arguments: str) -> None:
        if self.scoreboard.freeze() == Outcome.ALREADY_FROZEN:
            self._write("[Error]Freeze failed: scoreboard has been frozen.")
        else:
            self._write("[Info]Freeze scoreboard.")

    def _scroll(self, arguments: str) -> None:
        result = self.scoreboard.scroll()
        if result.outcome == Outcome.NOT_FROZEN:
            self._write("[Error]Scroll failed: scoreboard has not been frozen.")
            return
        self._write("[Info]Scroll scoreboard.")
        self._write_rankings(result.before)
        for change in result.changes:
            self._write(change.to_line())
        self._write_rankings(result.after)

    def _query_ranking(self, arguments: str) -> None:
        outcome, rank = self.scoreboard.query_ranking(arguments)
        if outcome == Outcome.TEAM_NOT_FOUND:
            self._write("[Error]Query ranking failed: cannot find the team.")
            return
        self._write("[Info]Complete query ranking.")
        if self.scoreboard.frozen:
            self._write(QUERY_RANKING_FROZEN_WARNING)
        self._write(f"{arguments} NOW AT RANKING {rank}")

    def _query_submission(self, arguments: str) -> None:
        match = _QUERY_SUBMISSION.match(arguments)
        if match is None:
            raise CommandError(f"Malformed QUERY_SUBMISSION arguments: {arguments!r}")
        team_name = match.group(1)
        if self.scoreboard.get_team(team_name) is None:
            self._write("[Error]Query submission failed: cannot find the team.")
            return
        problem = self._problem(match.group(2), allow_all=True)
        status = self._status(match.group(3), allow_all=True)
        _, submission = self.scoreboard.query_submission(team_name, problem, status)
        self._write("[Info]Complete query submission.")
        if submission is None:
            self._write("Cannot find any submission.")
        else:
            self._write(f"{submission.team} {problem_name(submission.problem)} "
                        f"{submission.status.value} {submission.time}")

    def _print(self, arguments: str) -> None:
        self._write_rankings(self.scoreboard.rankings())
