"""
Contract of the remote league data service.

The core never talks HTTP itself. Whatever client the application wires in
(REST, cached, in-memory for tests) implements this protocol, returns the
pydantic records from leagueos.models.schemas, and raises
leagueos.services.api_errors.ApiError when the server rejects a request.
"""

from typing import List, Optional, Protocol, Sequence

from leagueos.models.schemas import (
    Court,
    Game,
    GameParticipant,
    ParticipantAssignment,
    Player,
    Season,
    SeasonLeaderboardSnapshot,
    Session,
)


class LeagueDataService(Protocol):
    """Typed access to a club's seasons, sessions, players, courts and games."""

    async def list_seasons(self, club_id: int) -> List[Season]:
        ...

    async def list_sessions(self, club_id: int, season_id: Optional[int] = None) -> List[Session]:
        ...

    async def list_players(self, club_id: int, is_active: bool = True) -> List[Player]:
        ...

    async def list_courts(self, club_id: int) -> List[Court]:
        ...

    async def list_games(self, club_id: int, session_id: Optional[int] = None) -> List[Game]:
        ...

    async def list_participants(self, club_id: int, game_id: int) -> List[GameParticipant]:
        ...

    async def get_season_leaderboard_snapshot(
        self, club_id: int, season_id: int
    ) -> SeasonLeaderboardSnapshot:
        ...

    async def create_game(
        self,
        club_id: int,
        session_id: int,
        court_id: int,
        start_time: str,
        score_a: int,
        score_b: int,
    ) -> Game:
        """Create a game. Raises ApiError with GAME_CONFLICT, INVALID_GAME_TIME or SESSION_IMMUTABLE codes."""
        ...

    async def set_game_participants(
        self, club_id: int, game_id: int, participants: Sequence[ParticipantAssignment]
    ) -> None:
        ...
