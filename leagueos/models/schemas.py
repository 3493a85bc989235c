"""
Pydantic models for league data returned by the remote API and for the
values derived from it.

All records are frozen: the core reads and derives, it never mutates.
"""

import enum
from typing import List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator


class SeasonFormat(str, enum.Enum):
    """Match format a season is played in."""

    SINGLES = "SINGLES"
    DOUBLES = "DOUBLES"
    MIXED_DOUBLES = "MIXED_DOUBLES"


class SessionStatus(str, enum.Enum):
    """
    Session lifecycle: UPCOMING -> OPEN -> CLOSED -> FINALIZED.

    The server may revert CLOSED -> OPEN or FINALIZED -> CLOSED.
    Only OPEN sessions accept new games.
    """

    UPCOMING = "UPCOMING"
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    FINALIZED = "FINALIZED"
    CANCELLED = "CANCELLED"


class Side(str, enum.Enum):
    """Team side within a game."""

    A = "A"
    B = "B"


class Record(BaseModel):
    """Base for immutable API records. Unknown fields from the API are ignored."""

    model_config = ConfigDict(frozen=True, extra="ignore")


class Club(Record):
    id: int
    name: str


class Season(Record):
    id: int
    club_id: int
    name: str
    format: SeasonFormat
    weekday: int = Field(ge=0, le=6)
    start_time_local: str
    timezone: str
    is_active: bool


class Session(Record):
    id: int
    season_id: int
    session_date: str  # YYYY-MM-DD, no time zone
    status: SessionStatus
    location: Optional[str] = None
    address: Optional[str] = None


class Game(Record):
    id: int
    session_id: int
    court_id: int
    start_time: str  # ISO 8601
    score_a: int = Field(ge=0)
    score_b: int = Field(ge=0)


class GameParticipant(Record):
    game_id: int
    player_id: int
    side: Side
    display_name: Optional[str] = None


class Player(Record):
    id: int
    club_id: int
    display_name: str
    email: Optional[str] = None
    is_active: bool = True


class Court(Record):
    id: int
    club_id: int
    name: str
    is_active: bool = True


class Profile(Record):
    """The signed-in account, which may or may not be bound to a club player."""

    id: int
    email: Optional[str] = None
    full_name: Optional[str] = None
    display_name: Optional[str] = None
    role: str = "USER"
    club_role: Optional[str] = None
    club_id: Optional[int] = None

    def names(self) -> List[str]:
        """Non-empty display and full names, lowercased and trimmed."""
        return [
            value.strip().lower()
            for value in (self.display_name, self.full_name)
            if value and value.strip()
        ]


class LeaderboardRow(Record):
    """Per-player Elo standing within one season snapshot."""

    player_id: int
    display_name: str
    season_elo_delta: float = 0
    matches_played: int = 0
    matches_won: int = 0
    total_points: float = 0
    global_elo_score: Optional[float] = None


class SeasonLeaderboardSnapshot(Record):
    """Latest leaderboard of a season and the session it was taken from."""

    session: Optional[Session] = None
    rows: List[LeaderboardRow] = Field(default_factory=list)


class GameSubmission(Record):
    """
    A proposed game result as entered by the user.

    Player ids of 0 mean "not selected yet"; validation reports them,
    the model does not reject them.
    """

    session_id: Optional[int] = None
    start_time: str = ""  # HH:MM
    court_id: Optional[int] = None
    score_a: int = 0
    score_b: int = 0
    side_a_player_ids: Tuple[int, int] = (0, 0)
    side_b_player_ids: Tuple[int, int] = (0, 0)

    @field_validator("side_a_player_ids", "side_b_player_ids", mode="before")
    @classmethod
    def _blank_to_zero(cls, value):
        if isinstance(value, (list, tuple)):
            return tuple(0 if item is None else item for item in value)
        return value

    @property
    def player_ids(self) -> List[int]:
        return [*self.side_a_player_ids, *self.side_b_player_ids]


class ParticipantAssignment(Record):
    """One row of the participants payload sent after a game is created."""

    player_id: int
    side: Side


# ============================================================================
# Derived values
# ============================================================================


class WritableSessionResult(Record):
    """Outcome of session selection: a session, or a reason there is none."""

    session: Optional[Session] = None
    diagnostic: Optional[str] = None


class ResolutionContext(Record):
    """Club, season and writable session currently selected for recording."""

    club_id: Optional[int] = None
    season_id: Optional[int] = None
    session: Optional[Session] = None
    diagnostic: Optional[str] = None


class ProfileStatSummary(Record):
    singles: int = 0
    doubles: int = 0
    mixed: int = 0
    points_for: int = 0
    points_against: int = 0
    win_pct: float = 0


class EloHistoryRow(Record):
    season: str
    club: str
    elo: float
    change: float


class GameRow(Record):
    """One game as shown in the recent/all games lists."""

    id: int
    session_id: int
    date: str
    season: str
    partner: str
    outcome: str  # "W" or "L"
    start_time: str
    court_id: int
    court_name: str
    team_a: List[str]
    team_b: List[str]
    team_a_ids: List[int]
    team_b_ids: List[int]
    score_a: int
    score_b: int


class UpcomingRow(Record):
    id: int
    season_id: int
    date: str
    season: str
    club: str
    status: SessionStatus
    location: str = ""
    address: str = ""
