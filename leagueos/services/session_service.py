"""
Session eligibility: which session of a season may receive new games.

Two selection policies are supported and the caller picks one:

- STRICT: exactly one OPEN session must exist. Zero or several OPEN
  sessions are reported back as a diagnostic for the operator to fix.
- LATEST_OPEN_OR_CLOSED: the legacy single-club behaviour. Sessions are
  ranked newest first (session_date, then id) and the first OPEN one is
  taken, else the first CLOSED one.
"""

import enum
import logging
from typing import Dict, Iterable, List, Optional

from leagueos.models.schemas import Season, Session, SessionStatus, WritableSessionResult
from leagueos.utils.constants import MULTIPLE_OPEN_SESSIONS_MESSAGE, NO_OPEN_SESSION_MESSAGE

logger = logging.getLogger(__name__)

# Statuses that can carry a season leaderboard snapshot
LEADERBOARD_STATUSES = (SessionStatus.FINALIZED, SessionStatus.CLOSED, SessionStatus.OPEN)


class SessionSelectionPolicy(str, enum.Enum):
    """Named strategies for picking the writable session of a season."""

    STRICT = "STRICT"
    LATEST_OPEN_OR_CLOSED = "LATEST_OPEN_OR_CLOSED"


def sort_newest_first(sessions: Iterable[Session]) -> List[Session]:
    """Order sessions by (session_date desc, id desc)."""
    return sorted(sessions, key=lambda s: (s.session_date, s.id), reverse=True)


def _select_strict(sessions: List[Session]) -> WritableSessionResult:
    open_sessions = [s for s in sessions if s.status == SessionStatus.OPEN]

    if not open_sessions:
        return WritableSessionResult(session=None, diagnostic=NO_OPEN_SESSION_MESSAGE)

    if len(open_sessions) > 1:
        logger.debug(
            f"Ambiguous open sessions: {sorted(s.id for s in open_sessions)}"
        )
        return WritableSessionResult(session=None, diagnostic=MULTIPLE_OPEN_SESSIONS_MESSAGE)

    return WritableSessionResult(session=open_sessions[0], diagnostic=None)


def _select_latest_open_or_closed(sessions: List[Session]) -> WritableSessionResult:
    ranked = sort_newest_first(sessions)
    for status in (SessionStatus.OPEN, SessionStatus.CLOSED):
        for session in ranked:
            if session.status == status:
                return WritableSessionResult(session=session, diagnostic=None)
    return WritableSessionResult(session=None, diagnostic=NO_OPEN_SESSION_MESSAGE)


def select_writable_session(
    sessions: Iterable[Session],
    policy: SessionSelectionPolicy = SessionSelectionPolicy.STRICT,
) -> WritableSessionResult:
    """
    Pick the session that new games should be recorded against.

    This is a total function: any list, including an empty one, yields a
    result. Exactly one of ``session`` and ``diagnostic`` is set.

    Args:
        sessions: Sessions of a single season, in any order
        policy: Selection strategy to apply

    Returns:
        WritableSessionResult with the chosen session, or None and a
        human-readable diagnostic
    """
    session_list = list(sessions)
    if policy == SessionSelectionPolicy.LATEST_OPEN_OR_CLOSED:
        return _select_latest_open_or_closed(session_list)
    return _select_strict(session_list)


def list_open_seasons(seasons: Iterable[Season]) -> List[Season]:
    """Seasons currently accepting sessions and games, in input order."""
    return [season for season in seasons if season.is_active]


def select_leaderboard_session(sessions: Iterable[Session]) -> Optional[Session]:
    """
    The session whose leaderboard represents the season right now.

    That is the most recent session (by date) that has been opened at
    least once: FINALIZED, CLOSED or OPEN. Returns None if there is none.
    """
    candidates = [s for s in sessions if s.status in LEADERBOARD_STATUSES]
    if not candidates:
        return None
    return max(candidates, key=lambda s: s.session_date)


def resolve_record_session(
    seasons: Iterable[Season],
    sessions_by_season: Dict[int, List[Session]],
    season_id: Optional[int],
    policy: SessionSelectionPolicy = SessionSelectionPolicy.STRICT,
) -> WritableSessionResult:
    """
    Find the session to record games against across a club's seasons.

    The selected season is tried first; if it yields no session, the other
    seasons are tried in order and the first writable session wins. When
    nothing is found, the selected season's diagnostic is returned.
    """
    season_list = list(seasons)
    primary: Optional[WritableSessionResult] = None
    if season_id is not None:
        primary = select_writable_session(sessions_by_season.get(season_id, []), policy)
        if primary.session is not None:
            return primary

    for season in season_list:
        if season.id == season_id:
            continue
        result = select_writable_session(sessions_by_season.get(season.id, []), policy)
        if result.session is not None:
            logger.debug(
                f"No writable session in season {season_id}, falling back to season {season.id}"
            )
            return result

    if primary is not None:
        return primary
    return WritableSessionResult(session=None, diagnostic=NO_OPEN_SESSION_MESSAGE)
