"""
Tests for game submission validation and the double-entry check.
"""
import pytest

from leagueos.models.schemas import GameRow, GameSubmission, Side
from leagueos.services import game_validation_service
from leagueos.utils.constants import (
    DRAW_MESSAGE,
    DUPLICATE_PLAYERS_MESSAGE,
    MISSING_COURT_MESSAGE,
    MISSING_PLAYERS_MESSAGE,
    MISSING_SESSION_MESSAGE,
    MISSING_START_TIME_MESSAGE,
)


def submission(**overrides) -> GameSubmission:
    values = dict(
        session_id=7,
        start_time="19:00",
        court_id=3,
        score_a=21,
        score_b=18,
        side_a_player_ids=(1, 2),
        side_b_player_ids=(3, 4),
    )
    values.update(overrides)
    return GameSubmission(**values)


def existing_row(id=50, session_id=7, team_a=(1, 2), team_b=(3, 4), score_a=21, score_b=18) -> GameRow:
    return GameRow(
        id=id,
        session_id=session_id,
        date="Feb 17",
        season="Spring 2026",
        partner="Bea",
        outcome="W",
        start_time="2026-02-17T19:00:00",
        court_id=3,
        court_name="Court 3",
        team_a=["-", "-"],
        team_b=["-", "-"],
        team_a_ids=list(team_a),
        team_b_ids=list(team_b),
        score_a=score_a,
        score_b=score_b,
    )


def test_valid_submission():
    assert game_validation_service.validate_submission(submission()) is None


@pytest.mark.parametrize(
    "overrides,expected",
    [
        ({"session_id": None}, MISSING_SESSION_MESSAGE),
        ({"start_time": ""}, MISSING_START_TIME_MESSAGE),
        ({"score_a": 21, "score_b": 21}, DRAW_MESSAGE),
        ({"side_a_player_ids": (1, 0)}, MISSING_PLAYERS_MESSAGE),
        ({"side_b_player_ids": (None, 4)}, MISSING_PLAYERS_MESSAGE),
        ({"side_b_player_ids": (2, 4)}, DUPLICATE_PLAYERS_MESSAGE),
        ({"side_a_player_ids": (1, 1)}, DUPLICATE_PLAYERS_MESSAGE),
        ({"court_id": None}, MISSING_COURT_MESSAGE),
        ({"court_id": 0}, MISSING_COURT_MESSAGE),
    ],
)
def test_single_violation_messages(overrides, expected):
    assert game_validation_service.validate_submission(submission(**overrides)) == expected


def test_first_failing_check_wins():
    bad = submission(session_id=None, start_time="", score_a=0, score_b=0, court_id=None)
    assert game_validation_service.validate_submission(bad) == MISSING_SESSION_MESSAGE

    bad = submission(score_a=15, score_b=15, side_b_player_ids=(1, 2), court_id=None)
    assert game_validation_service.validate_submission(bad) == DRAW_MESSAGE

    bad = submission(side_b_player_ids=(1, 2), court_id=None)
    assert game_validation_service.validate_submission(bad) == DUPLICATE_PLAYERS_MESSAGE


def test_winner_side():
    assert game_validation_service.winner_side(21, 17) == Side.A
    assert game_validation_service.winner_side(15, 21) == Side.B


def test_build_participants():
    rows = game_validation_service.build_participants(submission())
    assert [(r.player_id, r.side) for r in rows] == [
        (1, Side.A),
        (2, Side.A),
        (3, Side.B),
        (4, Side.B),
    ]


def test_soft_duplicate_same_players_and_score():
    assert game_validation_service.is_soft_duplicate(submission(), 7, [existing_row()])


def test_soft_duplicate_ignores_arrangement_and_score_order():
    row = existing_row(team_a=(4, 1), team_b=(2, 3), score_a=18, score_b=21)
    assert game_validation_service.is_soft_duplicate(submission(), 7, [row])


def test_not_soft_duplicate():
    sub = submission()
    assert not game_validation_service.is_soft_duplicate(sub, 7, [existing_row(session_id=8)])
    assert not game_validation_service.is_soft_duplicate(sub, 7, [existing_row(team_b=(3, 5))])
    assert not game_validation_service.is_soft_duplicate(sub, 7, [existing_row(score_b=19)])
    assert not game_validation_service.is_soft_duplicate(sub, 7, [])
    assert not game_validation_service.is_soft_duplicate(sub, None, [existing_row()])
