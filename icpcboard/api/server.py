"""
JSON API over the scoreboard engine.

Every app owns one Scoreboard. Requests are serialized through a lock so that
each request runs as a single atomic command against the engine.
"""

import threading
from typing import Any, Optional, Tuple

from flask import Blueprint, Flask, Response, current_app, jsonify, request

from ..engine.scoreboard import Scoreboard
from ..models.models import ALL, Outcome, SubmissionStatus, problem_index
from ..utils.config_manager import ConfigManager
from ..utils.logger_config import get_logger

logger = get_logger("server")

api_bp = Blueprint("icpcboard_api", __name__, url_prefix="/api")

# HTTP status and message of every refused operation
_REFUSALS = {
    Outcome.DUPLICATED_TEAM: (409, "Add failed: duplicated team name"),
    Outcome.CONTEST_STARTED: (409, "Competition has started"),
    Outcome.INVALID_PROBLEM_COUNT: (400, "Start failed: invalid problem count"),
    Outcome.ALREADY_FROZEN: (409, "Freeze failed: scoreboard has been frozen"),
    Outcome.NOT_FROZEN: (409, "Scroll failed: scoreboard has not been frozen"),
    Outcome.TEAM_NOT_FOUND: (404, "Cannot find the team"),
}


class InvalidRequest(ValueError):
    """Request payload that the engine must never see"""


def success_response(data: Any = None, message: str = "Success") -> Response:
    """
    Create a standardized success response.

    Args:
        data: Optional data to include in response
        message: Success message string

    Returns:
        Flask Response object with success status
    """
    response = {
        "status": "success",
        "message": message
    }
    if data is not None:
        response["data"] = data
    return jsonify(response)


def error_response(message: str, status_code: int = 400) -> Tuple[Response, int]:
    """
    Create a standardized error response.

    Args:
        message: Error message string
        status_code: HTTP status code (default: 400)

    Returns:
        Tuple of (Flask Response object, status code)
    """
    response = {
        "status": "error",
        "message": message
    }
    return jsonify(response), status_code


def refusal_response(outcome: Outcome) -> Tuple[Response, int]:
    status_code, message = _REFUSALS[outcome]
    logger.info(f"Request refused: {message}")
    return error_response(message, status_code)


def _scoreboard() -> Scoreboard:
    return current_app.extensions["scoreboard"]


def _lock() -> threading.Lock:
    return current_app.extensions["scoreboard_lock"]


def _payload() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidRequest("Request body must be a JSON object")
    return data


def _int_field(data: dict, name: str) -> int:
    value = data.get(name)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRequest(f"Field '{name}' must be an integer")
    return value


def _str_field(data: dict, name: str) -> str:
    value = data.get(name)
    if not isinstance(value, str) or not value or any(c.isspace() for c in value):
        raise InvalidRequest(f"Field '{name}' must be a non-empty string without whitespace")
    return value


def _problem(name: str, allow_all: bool = False):
    if allow_all and name == ALL:
        return ALL
    try:
        index = problem_index(name)
    except ValueError as e:
        raise InvalidRequest(str(e)) from e
    if index >= _scoreboard().problem_count:
        raise InvalidRequest(f"Problem {name} is out of range")
    return index


def _status(name: str, allow_all: bool = False):
    if allow_all and name == ALL:
        return ALL
    try:
        return SubmissionStatus(name)
    except ValueError as e:
        raise InvalidRequest(f"Unknown status: {name}") from e


def _require_started() -> None:
    if not _scoreboard().started:
        raise InvalidRequest("Competition has not started")


@api_bp.errorhandler(InvalidRequest)
def handle_invalid_request(e: InvalidRequest):
    logger.error(f"Bad request to {request.path}: {e}")
    return error_response(str(e), 400)


@api_bp.route("/teams/add", methods=["POST"])
def add_team():
    """
    Register a team before the contest starts.

    Request format:
    {
        "name": "team_name"
    }
    """
    name = _str_field(_payload(), "name")
    with _lock():
        outcome = _scoreboard().add_team(name)
    if outcome != Outcome.SUCCESS:
        return refusal_response(outcome)
    return success_response({"name": name}, "Add successfully")


@api_bp.route("/contest/start", methods=["POST"])
def start_contest():
    """
    Start the contest with the registered teams.

    Request format:
    {
        "duration": 300,
        "problem_count": 10
    }
    """
    data = _payload()
    duration = _int_field(data, "duration")
    problem_count = _int_field(data, "problem_count")
    with _lock():
        outcome = _scoreboard().start_contest(duration, problem_count)
        state = _scoreboard().to_dict()
    if outcome != Outcome.SUCCESS:
        return refusal_response(outcome)
    return success_response(state, "Competition starts")


@api_bp.route("/contest/status", methods=["GET"])
def contest_status():
    with _lock():
        return success_response(_scoreboard().to_dict())


@api_bp.route("/submissions/create", methods=["POST"])
def create_submission():
    """
    Record a judged submission.

    Request format:
    {
        "team": "team_name",
        "problem": "A",
        "status": "Accepted",
        "time": 42
    }
    """
    data = _payload()
    with _lock():
        _require_started()
        team = _str_field(data, "team")
        if _scoreboard().get_team(team) is None:
            raise InvalidRequest(f"Unknown team: {team}")
        problem = _problem(_str_field(data, "problem"))
        status = _status(_str_field(data, "status"))
        time = _int_field(data, "time")
        _scoreboard().submit(team, problem, status, time)
    return success_response(message="Submission recorded")


@api_bp.route("/submissions/get/<team>", methods=["GET"])
def get_submission(team: str):
    """
    Latest submission of a team, optionally filtered by problem and status.

    Query parameters: problem (letter or ALL), status (name or ALL)
    """
    with _lock():
        _require_started()
        problem = _problem(request.args.get("problem", ALL), allow_all=True)
        status = _status(request.args.get("status", ALL), allow_all=True)
        outcome, submission = _scoreboard().query_submission(team, problem, status)
    if outcome != Outcome.SUCCESS:
        return refusal_response(outcome)
    if submission is None:
        return success_response({"submission": None}, "Cannot find any submission")
    return success_response({"submission": submission.to_dict()})


@api_bp.route("/scoreboard/flush", methods=["POST"])
def flush():
    with _lock():
        _require_started()
        rankings = _scoreboard().flush()
    return success_response([entry.to_dict() for entry in rankings], "Flush scoreboard")


@api_bp.route("/scoreboard/freeze", methods=["POST"])
def freeze():
    with _lock():
        _require_started()
        outcome = _scoreboard().freeze()
    if outcome != Outcome.SUCCESS:
        return refusal_response(outcome)
    return success_response(message="Freeze scoreboard")


@api_bp.route("/scoreboard/scroll", methods=["POST"])
def scroll():
    with _lock():
        _require_started()
        result = _scoreboard().scroll()
    if result.outcome != Outcome.SUCCESS:
        return refusal_response(result.outcome)
    return success_response(result.to_dict(), "Scroll scoreboard")


@api_bp.route("/scoreboard", methods=["GET"])
def get_scoreboard():
    with _lock():
        rankings = _scoreboard().rankings()
        frozen = _scoreboard().frozen
    return success_response({
        "frozen": frozen,
        "rankings": [entry.to_dict() for entry in rankings],
    })


@api_bp.route("/rankings/get/<team>", methods=["GET"])
def get_ranking(team: str):
    """
    Rank of a team as of the last flush or scroll.

    The frozen flag tells the caller that the rank may be stale.
    """
    with _lock():
        _require_started()
        outcome, rank = _scoreboard().query_ranking(team)
        frozen = _scoreboard().frozen
    if outcome != Outcome.SUCCESS:
        return refusal_response(outcome)
    message = "Scoreboard is frozen. The ranking may be inaccurate until it were scrolled." if frozen else "Success"
    return success_response({"team": team, "rank": rank, "frozen": frozen}, message)


def create_app(scoreboard: Optional[Scoreboard] = None, config: Optional[ConfigManager] = None) -> Flask:
    """
    Create a Flask app serving one scoreboard.

    Args:
        scoreboard: Engine to serve, a fresh one built from config if omitted
        config: Configuration used to build the engine

    Returns:
        Flask application
    """
    if scoreboard is None:
        if config is not None:
            scoreboard = Scoreboard(
                penalty_per_rejection=config.get("contest.penalty_per_rejection", 20),
                max_problems=config.get("contest.max_problems", 26),
            )
        else:
            scoreboard = Scoreboard()

    app = Flask(__name__)
    app.extensions["scoreboard"] = scoreboard
    app.extensions["scoreboard_lock"] = threading.Lock()
    app.register_blueprint(api_bp)
    logger.info("Created Flask application")
    return app


def run_api(host: str = "0.0.0.0", port: int = 5000, debug: bool = False,
            config: Optional[ConfigManager] = None):
    """
    Start the Flask API server.

    Args:
        host: Host address to bind to (default: "0.0.0.0")
        port: Port number to bind to (default: 5000)
        debug: Enable debug mode (default: False)
        config: Configuration used to build the engine
    """
    app = create_app(config=config)
    logger.info(f"Serving scoreboard API on {host}:{port}")
    app.run(host=host, port=port, debug=debug)
