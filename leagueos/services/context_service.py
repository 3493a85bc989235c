"""
Recording context reducer.

The club, season and writable session selected for recording are held in a
single immutable ResolutionContext. Every change of input is an event, and
reduce_context derives the next context from the previous one.
"""

from dataclasses import dataclass
from typing import List, Union

from leagueos.models.schemas import ResolutionContext, Session
from leagueos.services.session_service import SessionSelectionPolicy, select_writable_session


@dataclass(frozen=True)
class ClubSelected:
    club_id: int


@dataclass(frozen=True)
class SeasonSelected:
    season_id: int


@dataclass(frozen=True)
class SessionsLoaded:
    """Sessions fetched for a season. Ignored if the season is no longer selected."""

    season_id: int
    sessions: List[Session]


ContextEvent = Union[ClubSelected, SeasonSelected, SessionsLoaded]


def reduce_context(
    context: ResolutionContext,
    event: ContextEvent,
    policy: SessionSelectionPolicy = SessionSelectionPolicy.STRICT,
) -> ResolutionContext:
    """
    Apply one event to the recording context.

    Selecting a club clears the season and session; selecting a season
    clears the session until its sessions are loaded. Loading sessions
    resolves the writable session (or diagnostic) for the current season.
    """
    if isinstance(event, ClubSelected):
        if event.club_id == context.club_id:
            return context
        return ResolutionContext(club_id=event.club_id)

    if isinstance(event, SeasonSelected):
        if event.season_id == context.season_id:
            return context
        return ResolutionContext(club_id=context.club_id, season_id=event.season_id)

    if isinstance(event, SessionsLoaded):
        if event.season_id != context.season_id:
            return context
        result = select_writable_session(event.sessions, policy)
        return ResolutionContext(
            club_id=context.club_id,
            season_id=context.season_id,
            session=result.session,
            diagnostic=result.diagnostic,
        )

    raise TypeError(f"Unknown context event: {event!r}")
