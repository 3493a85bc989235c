"""
Recording a game result against the remote data service.

Flow: validate the submission, align the start time to the session's date
on the 5-minute grid, check for a likely double entry, create the game,
then assign its four participants. Server rejections come back as an
outcome carrying the remediation for the user. If the game was created
but its participants were refused, the outcome still carries the game so
the caller can retry the assignment or delete it. Any other exception
propagates to the caller.
"""

import enum
import logging
from typing import Iterable, Optional

from leagueos.models.schemas import Game, GameRow, GameSubmission, Record, Session
from leagueos.services import settings_service
from leagueos.services.api_errors import ApiError, decode_api_error, remediation_for
from leagueos.services.data_service import LeagueDataService
from leagueos.services.game_validation_service import (
    build_participants,
    is_soft_duplicate,
    validate_submission,
)
from leagueos.utils.constants import (
    MISSING_SESSION_MESSAGE,
    MISSING_START_TIME_MESSAGE,
    SOFT_DUPLICATE_MESSAGE,
)
from leagueos.utils.datetime_utils import combine_date_and_time

logger = logging.getLogger(__name__)


class RecordStatus(str, enum.Enum):
    INVALID = "INVALID"  # failed client-side validation, nothing sent
    NEEDS_CONFIRMATION = "NEEDS_CONFIRMATION"  # probable double entry, nothing sent
    RECORDED = "RECORDED"
    REJECTED = "REJECTED"  # server refused the game
    PARTIALLY_RECORDED = "PARTIALLY_RECORDED"  # game exists, participants were refused


class RecordGameOutcome(Record):
    status: RecordStatus
    message: Optional[str] = None
    game: Optional[Game] = None
    start_time: Optional[str] = None  # ISO timestamp that was (or would be) sent
    next_start_time: Optional[str] = None  # HH:MM to retry with after a conflict


async def record_game(
    service: LeagueDataService,
    club_id: int,
    session: Optional[Session],
    submission: GameSubmission,
    existing_games: Iterable[GameRow] = (),
    confirm_duplicate: bool = False,
    tz: Optional[str] = None,
) -> RecordGameOutcome:
    """
    Validate and persist one game with its participants.

    Args:
        service: Remote data service
        club_id: Club the game belongs to
        session: The resolved writable session
        submission: The game as entered by the user
        existing_games: Games already known in the session, for the double-entry check
        confirm_duplicate: The user confirmed a probable double entry
        tz: Time zone name for the start timestamp; defaults to the configured one

    Returns:
        RecordGameOutcome describing what happened
    """
    error = validate_submission(submission)
    if error:
        return RecordGameOutcome(status=RecordStatus.INVALID, message=error)

    if session is None or session.id != submission.session_id:
        return RecordGameOutcome(status=RecordStatus.INVALID, message=MISSING_SESSION_MESSAGE)

    start_time = combine_date_and_time(
        session.session_date, submission.start_time, tz or settings_service.TIMEZONE
    )
    if start_time is None:
        return RecordGameOutcome(status=RecordStatus.INVALID, message=MISSING_START_TIME_MESSAGE)

    if (
        settings_service.SOFT_DUPLICATE_CHECK
        and not confirm_duplicate
        and is_soft_duplicate(submission, session.id, existing_games)
    ):
        return RecordGameOutcome(
            status=RecordStatus.NEEDS_CONFIRMATION,
            message=SOFT_DUPLICATE_MESSAGE,
            start_time=start_time,
        )

    try:
        game = await service.create_game(
            club_id,
            session.id,
            submission.court_id,
            start_time,
            submission.score_a,
            submission.score_b,
        )
    except ApiError as e:
        failure = decode_api_error(e)
        remediation = remediation_for(failure, submission.start_time)
        logger.info(
            f"Game rejected for session {session.id} at {start_time}: "
            f"{type(failure).__name__} ({e.status})"
        )
        return RecordGameOutcome(
            status=RecordStatus.REJECTED,
            message=remediation.message,
            start_time=start_time,
            next_start_time=remediation.next_start_time,
        )

    try:
        await service.set_game_participants(club_id, game.id, build_participants(submission))
    except ApiError as e:
        remediation = remediation_for(decode_api_error(e), submission.start_time)
        logger.warning(
            f"Game {game.id} created in session {session.id} but participants were "
            f"rejected ({e.status}): {e.message}"
        )
        return RecordGameOutcome(
            status=RecordStatus.PARTIALLY_RECORDED,
            message=remediation.message,
            game=game,
            start_time=start_time,
        )

    logger.info(f"Recorded game {game.id} in session {session.id} at {start_time}")
    return RecordGameOutcome(status=RecordStatus.RECORDED, game=game, start_time=start_time)
