"""
Ranking order of the teams.

The order is a sorted list of team sort keys. Each key ends with the team's
enumeration index, which makes every key unique and lets the order map a key
back to its team through the team table it was built with.
"""

from bisect import bisect_left, bisect_right, insort
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Sequence

from ..models.models import Team
from ..utils.logger_config import get_logger

logger = get_logger("ranking")


class RankingOrder:
    """Teams ordered best first, supporting erase/insert/successor by team"""

    def __init__(self, teams: Sequence[Team]):
        self._teams = teams
        self._keys: List[tuple] = []
        # Key each team was inserted under, so it can be found after mutation
        self._inserted: Dict[int, tuple] = {}
        for team in teams:
            self.insert(team)

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, team: Team) -> bool:
        return team.index in self._inserted

    def __iter__(self) -> Iterator[Team]:
        for key in self._keys:
            yield self._teams[key[-1]]

    def insert(self, team: Team) -> None:
        if team.index in self._inserted:
            raise ValueError(f"Team {team.name} is already ranked")
        key = team.rank_key()
        insort(self._keys, key)
        self._inserted[team.index] = key

    def remove(self, team: Team) -> None:
        key = self._inserted.pop(team.index)
        position = bisect_left(self._keys, key)
        del self._keys[position]

    def successor(self, team: Team) -> Optional[Team]:
        """First ranked team that sorts strictly after the team's current key"""
        position = bisect_right(self._keys, team.rank_key())
        if position == len(self._keys):
            return None
        return self._teams[self._keys[position][-1]]

    @contextmanager
    def reordering(self, team: Team):
        """
        Take a team out of the order while its sort key changes.

        Every change to accepted problems, penalty or accepted times must go
        through this; the team is re-inserted under its new key on exit.
        """
        self.remove(team)
        try:
            yield self
        finally:
            self.insert(team)

    def assign_ranks(self) -> List[Team]:
        """Write 1-based ranks into the teams and return them best first"""
        ranked = list(self)
        for rank, team in enumerate(ranked, start=1):
            team.rank = rank
        logger.debug(f"Assigned ranks to {len(ranked)} teams")
        return ranked
