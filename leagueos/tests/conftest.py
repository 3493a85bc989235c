"""
Shared pytest configuration for leagueos tests.

Provides record factories and an in-memory LeagueDataService so the
orchestration code can be exercised without a server.
"""

from typing import Dict, List, Optional, Sequence

import pytest

from leagueos.models.schemas import (
    Club,
    Court,
    Game,
    GameParticipant,
    ParticipantAssignment,
    Player,
    Season,
    SeasonFormat,
    SeasonLeaderboardSnapshot,
    Session,
    SessionStatus,
    Side,
)
from leagueos.services.api_errors import ApiError


def make_season(id: int = 1, club_id: int = 1, name: str = "Spring 2026", format=SeasonFormat.DOUBLES, is_active: bool = True) -> Season:
    return Season(
        id=id,
        club_id=club_id,
        name=name,
        format=format,
        weekday=1,
        start_time_local="19:00:00",
        timezone="America/Vancouver",
        is_active=is_active,
    )


def make_session(id: int, status=SessionStatus.OPEN, session_date: str = "2026-02-17", season_id: int = 1, **kwargs) -> Session:
    return Session(id=id, season_id=season_id, session_date=session_date, status=status, **kwargs)


def make_game(id: int, session_id: int = 9, score_a: int = 21, score_b: int = 17, court_id: int = 5, start_time: str = "2026-02-17T19:15:00") -> Game:
    return Game(
        id=id,
        session_id=session_id,
        court_id=court_id,
        start_time=start_time,
        score_a=score_a,
        score_b=score_b,
    )


def make_participants(game_id: int, side_a: Sequence[int], side_b: Sequence[int], names: Optional[Dict[int, str]] = None) -> List[GameParticipant]:
    names = names or {}
    return [
        *(GameParticipant(game_id=game_id, player_id=p, side=Side.A, display_name=names.get(p)) for p in side_a),
        *(GameParticipant(game_id=game_id, player_id=p, side=Side.B, display_name=names.get(p)) for p in side_b),
    ]


PLAYER_NAMES = {1: "Arun", 2: "Bea", 3: "Chen", 4: "Dana"}


@pytest.fixture
def players():
    """Four active players of club 1 (ids 1-4)."""
    return [
        Player(id=pid, club_id=1, display_name=name, email=f"{name.lower()}@club.test")
        for pid, name in PLAYER_NAMES.items()
    ]


@pytest.fixture
def open_session():
    return make_session(9, SessionStatus.OPEN, "2026-02-17")


class FakeLeagueDataService:
    """In-memory LeagueDataService. Set ``failures[method] = exc`` to make a call raise."""

    def __init__(self):
        self.clubs: List[Club] = []
        self.seasons: List[Season] = []
        self.sessions: List[Session] = []
        self.players: List[Player] = []
        self.courts: List[Court] = []
        self.games: List[Game] = []
        self.participants: Dict[int, List[GameParticipant]] = {}
        self.snapshots: Dict[int, SeasonLeaderboardSnapshot] = {}
        self.failures: Dict[str, Exception] = {}
        self.created: List[dict] = []
        self.assigned: Dict[int, List[ParticipantAssignment]] = {}
        self._next_game_id = 100

    def _maybe_fail(self, method: str):
        if method in self.failures:
            raise self.failures[method]

    async def list_seasons(self, club_id):
        self._maybe_fail("list_seasons")
        return [s for s in self.seasons if s.club_id == club_id]

    async def list_sessions(self, club_id, season_id=None):
        self._maybe_fail("list_sessions")
        return [s for s in self.sessions if season_id is None or s.season_id == season_id]

    async def list_players(self, club_id, is_active=True):
        self._maybe_fail("list_players")
        return [p for p in self.players if p.club_id == club_id and p.is_active == is_active]

    async def list_courts(self, club_id):
        self._maybe_fail("list_courts")
        return [c for c in self.courts if c.club_id == club_id]

    async def list_games(self, club_id, session_id=None):
        self._maybe_fail("list_games")
        return [g for g in self.games if session_id is None or g.session_id == session_id]

    async def list_participants(self, club_id, game_id):
        self._maybe_fail("list_participants")
        return list(self.participants.get(game_id, []))

    async def get_season_leaderboard_snapshot(self, club_id, season_id):
        self._maybe_fail("get_season_leaderboard_snapshot")
        return self.snapshots.get(season_id, SeasonLeaderboardSnapshot())

    async def create_game(self, club_id, session_id, court_id, start_time, score_a, score_b):
        self._maybe_fail("create_game")
        self.created.append(
            {
                "club_id": club_id,
                "session_id": session_id,
                "court_id": court_id,
                "start_time": start_time,
                "score_a": score_a,
                "score_b": score_b,
            }
        )
        game = Game(
            id=self._next_game_id,
            session_id=session_id,
            court_id=court_id,
            start_time=start_time,
            score_a=score_a,
            score_b=score_b,
        )
        self._next_game_id += 1
        self.games.append(game)
        return game

    async def set_game_participants(self, club_id, game_id, participants):
        self._maybe_fail("set_game_participants")
        self.assigned[game_id] = list(participants)


@pytest.fixture
def data_service():
    return FakeLeagueDataService()


@pytest.fixture
def conflict_error():
    return ApiError(
        status=409,
        code="GAME_CONFLICT",
        message="Game already exists for court and start time",
    )
