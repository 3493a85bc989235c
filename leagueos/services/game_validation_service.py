"""
Pre-flight validation of a game submission.

Mirrors the structural checks the API enforces so the user gets specific
feedback before anything is sent. The server stays authoritative and can
still reject a valid-looking submission (see api_errors).
"""

import logging
from typing import Iterable, List, Optional

from leagueos.models.schemas import GameRow, GameSubmission, ParticipantAssignment, Side
from leagueos.utils.constants import (
    DRAW_MESSAGE,
    DUPLICATE_PLAYERS_MESSAGE,
    MISSING_COURT_MESSAGE,
    MISSING_PLAYERS_MESSAGE,
    MISSING_SESSION_MESSAGE,
    MISSING_START_TIME_MESSAGE,
)

logger = logging.getLogger(__name__)


def validate_submission(submission: GameSubmission) -> Optional[str]:
    """
    Check a submission against the recording rules.

    Checks run in a fixed order and the first failure is returned:
    session, start time, no draw, all four players chosen, players unique
    across both sides, court.

    Args:
        submission: The game as entered by the user

    Returns:
        The error message for the first failed check, or None if valid
    """
    if not submission.session_id:
        return MISSING_SESSION_MESSAGE
    if not submission.start_time:
        return MISSING_START_TIME_MESSAGE

    if submission.score_a == submission.score_b:
        return DRAW_MESSAGE

    ids = submission.player_ids
    if any(not player_id for player_id in ids):
        return MISSING_PLAYERS_MESSAGE

    if len(set(ids)) != len(ids):
        return DUPLICATE_PLAYERS_MESSAGE

    if not submission.court_id:
        return MISSING_COURT_MESSAGE

    return None


def winner_side(score_a: int, score_b: int) -> Side:
    """Side with the higher score. Scores are never equal for a recorded game."""
    return Side.A if score_a > score_b else Side.B


def build_participants(submission: GameSubmission) -> List[ParticipantAssignment]:
    """Participant rows for a created game: side A players first, then side B."""
    return [
        *(ParticipantAssignment(player_id=p, side=Side.A) for p in submission.side_a_player_ids),
        *(ParticipantAssignment(player_id=p, side=Side.B) for p in submission.side_b_player_ids),
    ]


def is_soft_duplicate(
    submission: GameSubmission,
    session_id: Optional[int],
    existing_games: Iterable[GameRow],
) -> bool:
    """
    Whether the submission looks like a second entry of a game already recorded.

    A match is another game in the same session with the same four players
    (in any arrangement) and the same pair of scores (in either order).
    This is a prompt-to-confirm signal, not a validation failure.
    """
    if session_id is None:
        return False
    incoming_players = sorted(submission.player_ids)
    incoming_scores = sorted((submission.score_a, submission.score_b))

    for game in existing_games:
        if game.session_id != session_id:
            continue
        if sorted([*game.team_a_ids, *game.team_b_ids]) != incoming_players:
            continue
        if sorted((game.score_a, game.score_b)) == incoming_scores:
            logger.debug(f"Submission matches existing game {game.id} in session {session_id}")
            return True
    return False

