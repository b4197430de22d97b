from __future__ import annotations

import pytest

from icpcboard.models.models import (
    ALL, ProblemRecord, RankChange, RankingEntry, Submission, SubmissionStatus, Team,
    problem_index, problem_name
)


def test_problem_names_round_trip_letters() -> None:
    assert problem_name(0) == "A"
    assert problem_name(25) == "Z"
    assert problem_index("C") == 2
    for bad in ("", "a", "AB", "ALL", "["):
        with pytest.raises(ValueError):
            problem_index(bad)


def test_status_values_match_protocol_spelling() -> None:
    assert SubmissionStatus("Time_Limit_Exceed") == SubmissionStatus.TIME_LIMIT_EXCEEDED
    assert [status.value for status in SubmissionStatus] == [
        "Accepted", "Wrong_Answer", "Runtime_Error", "Time_Limit_Exceed"
    ]


def test_problem_cells() -> None:
    record = ProblemRecord()
    assert record.cell(frozen=False) == "."
    record.unaccepted_submissions = 2
    assert record.cell(frozen=False) == "-2"
    record.submissions_after_frozen = 3
    assert record.cell(frozen=True) == "-2/3"
    record.accepted_time = 40
    assert record.cell(frozen=False) == "+2"
    assert record.penalty() == 80

    fresh = ProblemRecord()
    fresh.submissions_after_frozen = 1
    assert fresh.cell(frozen=True) == "0/1"
    fresh.accepted_time = 9
    assert fresh.cell(frozen=False) == "+"


def test_unfreeze_merges_and_resets_shadow_counters() -> None:
    record = ProblemRecord()
    record.unaccepted_submissions = 1
    record.submissions_after_frozen = 3
    record.unaccepted_submissions_after_frozen = 2
    record.accepted_time_after_frozen = 77
    record.unfreeze()
    assert record.to_dict() == {
        "unaccepted_submissions": 3,
        "accepted_time": 77,
        "submissions_after_frozen": 0,
        "unaccepted_submissions_after_frozen": 0,
        "accepted_time_after_frozen": 0,
    }


def test_team_bitmask_helpers() -> None:
    team = Team("T", 0, 5)
    team.frozen_problems = 0b10100
    assert team.first_frozen_problem() == 2
    assert team.is_frozen(4) and not team.is_frozen(3)

    team.problems[1].accepted_time = 15
    team.accept(1)
    team.problems[3].accepted_time = 40
    team.accept(3)
    assert team.accepted_count == 2
    assert team.accepted_times == [40, 15]
    assert team.penalty == 55
    assert team.to_dict()["accepted_problems"] == ["B", "D"]
    assert team.to_dict()["frozen_problems"] == ["C", "E"]


def test_team_records_four_submission_slots() -> None:
    team = Team("T", 0, 2)
    first = Submission("T", 0, SubmissionStatus.WRONG_ANSWER, 3)
    second = Submission("T", 1, SubmissionStatus.ACCEPTED, 4)
    team.record_submission(first)
    team.record_submission(second)

    assert team.last_submission() == second
    assert team.last_submission(SubmissionStatus.WRONG_ANSWER, ALL) == first
    assert team.last_submission(ALL, 0) == first
    assert team.last_submission(SubmissionStatus.ACCEPTED, 1) == second
    assert team.last_submission(SubmissionStatus.ACCEPTED, 0) is None
    assert team.has_accepted_submission(1)
    assert not team.has_accepted_submission(0)


def test_snapshot_lines() -> None:
    team = Team("T1", 0, 2)
    team.problems[0].accepted_time = 20
    team.problems[0].unaccepted_submissions = 1
    team.accept(0)
    entry = RankingEntry.of(team)
    assert entry.to_line() == "T1 1 1 40 +1 ."
    assert entry.to_dict()["cells"] == ["+1", "."]
    assert RankChange("T2", "T1", 1, 5).to_line() == "T2 T1 1 5"
    assert Submission("T1", 2, SubmissionStatus.RUNTIME_ERROR, 8).to_dict() == {
        "team": "T1", "problem": "C", "status": "Runtime_Error", "time": 8
    }
