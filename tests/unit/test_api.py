from __future__ import annotations

import pytest

from icpcboard.api.server import create_app
from icpcboard.engine.scoreboard import Scoreboard
from icpcboard.utils.config_manager import ConfigManager


@pytest.fixture
def client():
    app = create_app()
    app.config["TESTING"] = True
    return app.test_client()


@pytest.fixture
def started_client(client):
    for name in ("T1", "T2"):
        assert client.post("/api/teams/add", json={"name": name}).status_code == 200
    response = client.post("/api/contest/start", json={"duration": 300, "problem_count": 2})
    assert response.status_code == 200
    return client


def submit(client, team: str, problem: str, status: str, time: int):
    return client.post("/api/submissions/create",
                       json={"team": team, "problem": problem, "status": status, "time": time})


def test_add_team_refusals(client) -> None:
    assert client.post("/api/teams/add", json={"name": "T1"}).get_json()["status"] == "success"

    duplicate = client.post("/api/teams/add", json={"name": "T1"})
    assert duplicate.status_code == 409
    assert duplicate.get_json()["status"] == "error"

    assert client.post("/api/teams/add", json={"name": "two words"}).status_code == 400
    assert client.post("/api/teams/add", data="not json").status_code == 400


def test_start_contest_and_status(started_client) -> None:
    status = started_client.get("/api/contest/status").get_json()["data"]
    assert status["started"] is True
    assert status["problem_count"] == 2
    assert status["teams"] == ["T1", "T2"]

    again = started_client.post("/api/contest/start", json={"duration": 1, "problem_count": 1})
    assert again.status_code == 409
    late = started_client.post("/api/teams/add", json={"name": "T3"})
    assert late.status_code == 409


def test_start_contest_validates_fields(client) -> None:
    assert client.post("/api/contest/start", json={"duration": "long", "problem_count": 2}).status_code == 400
    assert client.post("/api/contest/start", json={"duration": 10, "problem_count": 30}).status_code == 400


def test_operations_before_start_are_bad_requests(client) -> None:
    assert client.post("/api/scoreboard/flush").status_code == 400
    assert submit(client, "T1", "A", "Accepted", 1).status_code == 400
    assert client.get("/api/rankings/get/T1").status_code == 400


def test_submission_validation(started_client) -> None:
    assert submit(started_client, "T9", "A", "Accepted", 1).status_code == 400
    assert submit(started_client, "T1", "C", "Accepted", 1).status_code == 400
    assert submit(started_client, "T1", "A", "Compile_Error", 1).status_code == 400
    assert submit(started_client, "T1", "A", "Accepted", "soon").status_code == 400
    assert submit(started_client, "T1", "A", "Accepted", 1).status_code == 200


def test_flush_freeze_scroll_flow(started_client) -> None:
    submit(started_client, "T1", "A", "Wrong_Answer", 10)
    submit(started_client, "T1", "A", "Accepted", 20)
    rankings = started_client.post("/api/scoreboard/flush").get_json()["data"]
    assert [(entry["team"], entry["rank"], entry["penalty"]) for entry in rankings] == [("T1", 1, 40), ("T2", 2, 0)]

    assert started_client.post("/api/scoreboard/scroll").status_code == 409
    assert started_client.post("/api/scoreboard/freeze").status_code == 200
    assert started_client.post("/api/scoreboard/freeze").status_code == 409

    submit(started_client, "T2", "B", "Accepted", 5)
    ranking = started_client.get("/api/rankings/get/T2").get_json()
    assert ranking["data"] == {"team": "T2", "rank": 2, "frozen": True}
    assert "frozen" in ranking["message"]

    board = started_client.get("/api/scoreboard").get_json()["data"]
    assert board["frozen"] is True
    assert board["rankings"][1]["cells"] == [".", "0/1"]

    result = started_client.post("/api/scoreboard/scroll").get_json()["data"]
    assert result["changes"] == [{"team": "T2", "replaced_team": "T1", "accepted_count": 1, "penalty": 5}]
    assert [entry["team"] for entry in result["after"]] == ["T2", "T1"]

    ranking = started_client.get("/api/rankings/get/T2").get_json()["data"]
    assert ranking == {"team": "T2", "rank": 1, "frozen": False}


def test_query_submission_route(started_client) -> None:
    submit(started_client, "T1", "B", "Runtime_Error", 7)

    found = started_client.get("/api/submissions/get/T1", query_string={"problem": "B", "status": "ALL"})
    assert found.get_json()["data"]["submission"] == {
        "team": "T1", "problem": "B", "status": "Runtime_Error", "time": 7
    }

    latest = started_client.get("/api/submissions/get/T1").get_json()["data"]["submission"]
    assert latest["time"] == 7

    missing = started_client.get("/api/submissions/get/T1", query_string={"status": "Accepted"})
    assert missing.get_json()["data"] == {"submission": None}

    assert started_client.get("/api/submissions/get/nobody").status_code == 404
    assert started_client.get("/api/rankings/get/nobody").status_code == 404


def test_app_builds_engine_from_config(tmp_path) -> None:
    config = ConfigManager(str(tmp_path / "missing.json"))
    config.set("contest.penalty_per_rejection", 5)
    app = create_app(config=config)
    scoreboard = app.extensions["scoreboard"]
    assert isinstance(scoreboard, Scoreboard)
    assert scoreboard.penalty_per_rejection == 5
