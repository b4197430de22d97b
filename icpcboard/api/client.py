"""
Remote client for the scoreboard API.

ScoreboardClient mirrors every API route. Methods return the response's data
payload on success and {"error": message} on failure.
"""

from typing import Any, Dict, Optional

import requests

from ..models.models import ALL
from ..utils.logger_config import get_logger

logger = get_logger("client")


class ScoreboardClient:
    """Client of a remote scoreboard served by icpcboard.api.server"""

    def __init__(self, api_base: str, session: Optional[requests.Session] = None, timeout: float = 30):
        self.api_base = api_base.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, endpoint: str, json: Optional[Dict] = None,
                 params: Optional[Dict] = None) -> Dict[str, Any]:
        url = f"{self.api_base}{endpoint}"
        try:
            if method == "GET":
                response = self.session.get(url, params=params, timeout=self.timeout)
            else:
                response = self.session.post(url, json=json or {}, timeout=self.timeout)
            result = response.json()
        except requests.exceptions.RequestException as e:
            logger.warning(f"Request to {url} failed: {e}")
            return {"error": f"Request failed: {e}"}
        except ValueError as e:
            logger.warning(f"Invalid JSON from {url}: {e}")
            return {"error": f"Invalid response: {e}"}

        if result.get("status") != "success":
            message = result.get("message", "Unknown error")
            logger.warning(f"API error from {endpoint}: {message}")
            return {"error": message}
        return result.get("data", {})

    def add_team(self, name: str) -> Dict:
        """Register a team before the contest starts"""
        return self._request("POST", "/api/teams/add", json={"name": name})

    def start_contest(self, duration: int, problem_count: int) -> Dict:
        """Start the contest"""
        return self._request("POST", "/api/contest/start",
                             json={"duration": duration, "problem_count": problem_count})

    def contest_status(self) -> Dict:
        return self._request("GET", "/api/contest/status")

    def submit(self, team: str, problem: str, status: str, time: int) -> Dict:
        """Record a judged submission; problem is a letter, status a status name"""
        return self._request("POST", "/api/submissions/create",
                             json={"team": team, "problem": problem, "status": status, "time": time})

    def flush(self) -> Dict:
        """Flush the scoreboard and get the new rankings"""
        data = self._request("POST", "/api/scoreboard/flush")
        if isinstance(data, list):
            return {"rankings": data}
        return data

    def freeze(self) -> Dict:
        return self._request("POST", "/api/scoreboard/freeze")

    def scroll(self) -> Dict:
        """Scroll the scoreboard; returns before/changes/after"""
        return self._request("POST", "/api/scoreboard/scroll")

    def view_rankings(self) -> Dict:
        return self._request("GET", "/api/scoreboard")

    def query_ranking(self, team: str) -> Dict:
        return self._request("GET", f"/api/rankings/get/{team}")

    def query_submission(self, team: str, problem: str = ALL, status: str = ALL) -> Dict:
        return self._request("GET", f"/api/submissions/get/{team}",
                             params={"problem": problem, "status": status})
