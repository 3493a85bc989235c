"""
Dashboard aggregation.

Replays a player's games against session and season lookups to produce the
profile statistics, per-season Elo rows, and the recent / upcoming lists.
Everything here except load_dashboard is a pure function over data that has
already been fetched; missing inputs yield empty lists or zero stats.
"""

import asyncio
import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from pydantic import Field

from leagueos.models.schemas import (
    Club,
    Court,
    EloHistoryRow,
    Game,
    GameParticipant,
    GameRow,
    LeaderboardRow,
    Player,
    Profile,
    ProfileStatSummary,
    Record,
    Season,
    SeasonFormat,
    SeasonLeaderboardSnapshot,
    Session,
    SessionStatus,
    Side,
    UpcomingRow,
    WritableSessionResult,
)
from leagueos.services import settings_service
from leagueos.services.data_service import LeagueDataService
from leagueos.services.game_validation_service import winner_side
from leagueos.services.session_service import (
    SessionSelectionPolicy,
    list_open_seasons,
    resolve_record_session,
    select_leaderboard_session,
)
from leagueos.utils.constants import DEFAULT_GLOBAL_ELO
from leagueos.utils.datetime_utils import (
    format_month_day,
    format_time_label,
    local_today,
    parse_session_date,
    time_slot_options,
)

logger = logging.getLogger(__name__)

WIN = "W"
LOSS = "L"


# ============================================================================
# Player identity
# ============================================================================


def find_user_player_id(profile: Optional[Profile], players: Iterable[Player]) -> Optional[int]:
    """
    Find the club player that corresponds to the signed-in profile.

    Email is matched first (case-insensitive), then display or full name
    (trimmed, case-insensitive). Returns None when nothing matches.
    """
    if profile is None:
        return None
    player_list = list(players)

    profile_email = (profile.email or "").strip().lower()
    if profile_email:
        for player in player_list:
            if player.email and player.email.strip().lower() == profile_email:
                return player.id

    names = profile.names()
    if names:
        for player in player_list:
            if player.display_name.strip().lower() in names:
                return player.id

    return None


def merge_admin_players(active: Iterable[Player], inactive: Iterable[Player]) -> List[Player]:
    """
    Merge active and inactive player lists into one list sorted by display name,
    ignoring case.

    Players are de-duplicated by id; when an id appears twice, the later
    entry (from the inactive list) wins.
    """
    by_id: Dict[int, Player] = {}
    for player in [*active, *inactive]:
        by_id[player.id] = player
    return sorted(by_id.values(), key=lambda p: (p.display_name.casefold(), p.display_name))


def count_unique_players_in_session_games(
    games: Iterable[Game], participants_by_game: Mapping[int, Sequence[GameParticipant]]
) -> int:
    """Number of distinct players who took part in any of the given games."""
    return len(
        {p.player_id for game in games for p in participants_by_game.get(game.id, [])}
    )


def club_name(club_id: int, clubs_by_id: Mapping[int, Club]) -> str:
    """Club display name from the caller's clubs, the configured fallbacks, or "Club <id>"."""
    club = clubs_by_id.get(club_id)
    if club is not None:
        return club.name
    return settings_service.CLUB_NAME_FALLBACK.get(club_id, f"Club {club_id}")


# ============================================================================
# Per-game helpers
# ============================================================================


def player_side(participants: Sequence[GameParticipant], player_id: Optional[int]) -> Optional[Side]:
    """Side the player was on, or None if unknown or not a participant."""
    if not player_id:
        return None
    for participant in participants:
        if participant.player_id == player_id:
            return participant.side
    return None


def outcome_for_game(
    game: Game, participants: Sequence[GameParticipant], player_id: Optional[int]
) -> Tuple[str, Optional[Side]]:
    """
    Win/loss of a game from the player's point of view.

    If the player did not take part (or no player is bound to the profile),
    the game is viewed from side A.

    Returns:
        Tuple of ("W" or "L", the player's side or None)
    """
    winner = winner_side(game.score_a, game.score_b)
    my_side = player_side(participants, player_id)
    viewed_from = my_side or Side.A
    return (WIN if viewed_from == winner else LOSS), my_side


def partner_name_for_game(
    participants: Sequence[GameParticipant],
    my_side: Optional[Side],
    player_id: Optional[int],
) -> str:
    """
    Name of the player's teammate in a doubles game.

    Falls back to side A's second then first name, then the first
    participant listed, when the teammate cannot be resolved.
    """
    if not participants:
        return "-"

    if my_side and player_id:
        for participant in participants:
            if participant.side == my_side and participant.player_id != player_id:
                if participant.display_name:
                    return participant.display_name
                break

    side_a = [p for p in participants if p.side == Side.A]
    candidates = [*side_a[1:2], *side_a[:1], participants[0]]
    for candidate in candidates:
        if candidate.display_name:
            return candidate.display_name
    return "-"


def player_games(
    games: Iterable[Game],
    participants_by_game: Mapping[int, Sequence[GameParticipant]],
    player_id: Optional[int],
) -> List[Game]:
    """Games the player took part in; every game when no player is bound."""
    if not player_id:
        return list(games)
    return [
        game
        for game in games
        if any(p.player_id == player_id for p in participants_by_game.get(game.id, []))
    ]


# ============================================================================
# Aggregates
# ============================================================================


def win_percentage(wins: int, total_games: int) -> float:
    """Wins as a percentage of games, one decimal place; 0 when there are no games."""
    if total_games == 0:
        return 0.0
    return round(wins / total_games * 100, 1)


def compute_profile_stats(
    games: Sequence[Game],
    participants_by_game: Mapping[int, Sequence[GameParticipant]],
    sessions_by_id: Mapping[int, Session],
    seasons_by_id: Mapping[int, Season],
    player_id: Optional[int],
) -> ProfileStatSummary:
    """
    Fold a player's games into format counts, points and win percentage.

    Args:
        games: The player's games (see player_games)
        participants_by_game: Participants keyed by game id
        sessions_by_id: Sessions keyed by id, used to find each game's season
        seasons_by_id: Seasons keyed by id, used for the format tallies
        player_id: The player whose perspective is taken, if known

    Returns:
        ProfileStatSummary; all zeros for an empty game list
    """
    format_counts = {fmt: 0 for fmt in SeasonFormat}
    points_for = 0
    points_against = 0
    wins = 0

    for game in games:
        session = sessions_by_id.get(game.session_id)
        season = seasons_by_id.get(session.season_id) if session else None
        if season is not None:
            format_counts[season.format] += 1

        outcome, my_side = outcome_for_game(game, participants_by_game.get(game.id, []), player_id)
        if my_side == Side.B:
            points_for += game.score_b
            points_against += game.score_a
        else:
            points_for += game.score_a
            points_against += game.score_b
        if outcome == WIN:
            wins += 1

    return ProfileStatSummary(
        singles=format_counts[SeasonFormat.SINGLES],
        doubles=format_counts[SeasonFormat.DOUBLES],
        mixed=format_counts[SeasonFormat.MIXED_DOUBLES],
        points_for=points_for,
        points_against=points_against,
        win_pct=win_percentage(wins, len(games)),
    )


def find_leaderboard_row(
    rows: Sequence[LeaderboardRow], player_id: Optional[int], profile: Optional[Profile]
) -> Optional[LeaderboardRow]:
    """
    Locate the player's row in a leaderboard.

    Id match wins; display names are not unique, so the case-insensitive
    name match against the profile is only a fallback.
    """
    if player_id:
        for row in rows:
            if row.player_id == player_id:
                return row

    names = profile.names() if profile else []
    if names:
        for row in rows:
            if row.display_name.strip().lower() in names:
                return row
    return None


def build_elo_history(
    snapshots: Iterable[Tuple[Season, SeasonLeaderboardSnapshot]],
    player_id: Optional[int],
    profile: Optional[Profile],
    clubs_by_id: Mapping[int, Club],
) -> List[EloHistoryRow]:
    """One Elo row per season the player appears in, in snapshot order."""
    history = []
    for season, snapshot in snapshots:
        row = find_leaderboard_row(snapshot.rows, player_id, profile)
        if row is None:
            continue
        history.append(
            EloHistoryRow(
                season=season.name,
                club=club_name(season.club_id, clubs_by_id),
                elo=row.global_elo_score if row.global_elo_score is not None else DEFAULT_GLOBAL_ELO,
                change=row.season_elo_delta,
            )
        )
    return history


def build_game_rows(
    games: Iterable[Game],
    participants_by_game: Mapping[int, Sequence[GameParticipant]],
    sessions_by_id: Mapping[int, Session],
    seasons_by_id: Mapping[int, Season],
    courts_by_id: Mapping[int, Court],
    player_id: Optional[int],
) -> List[GameRow]:
    """Display rows for games, newest start time first."""
    rows = []
    for game in sorted(games, key=lambda g: g.start_time, reverse=True):
        participants = participants_by_game.get(game.id, [])
        side_a = [p for p in participants if p.side == Side.A]
        side_b = [p for p in participants if p.side == Side.B]
        session = sessions_by_id.get(game.session_id)
        season = seasons_by_id.get(session.season_id) if session else None
        outcome, my_side = outcome_for_game(game, participants, player_id)
        court = courts_by_id.get(game.court_id)

        if season is not None:
            season_label = season.name
        else:
            season_label = f"Season {session.season_id if session else '-'}"

        rows.append(
            GameRow(
                id=game.id,
                session_id=game.session_id,
                date=format_month_day(session.session_date if session else game.start_time),
                season=season_label,
                partner=partner_name_for_game(participants, my_side, player_id),
                outcome=outcome,
                start_time=game.start_time,
                court_id=game.court_id,
                court_name=court.name if court else f"Court {game.court_id}",
                team_a=[p.display_name or "-" for p in side_a],
                team_b=[p.display_name or "-" for p in side_b],
                team_a_ids=[p.player_id for p in side_a],
                team_b_ids=[p.player_id for p in side_b],
                score_a=game.score_a,
                score_b=game.score_b,
            )
        )
    return rows


def is_upcoming(session: Session, today: date) -> bool:
    """OPEN sessions always count; UPCOMING ones only from today onwards."""
    if session.status == SessionStatus.OPEN:
        return True
    if session.status != SessionStatus.UPCOMING:
        return False
    session_day = parse_session_date(session.session_date)
    return session_day is not None and session_day >= today


def build_upcoming_rows(
    sessions: Iterable[Session],
    seasons_by_id: Mapping[int, Season],
    clubs_by_id: Mapping[int, Club],
    club_id: int,
    today: Optional[date] = None,
) -> List[UpcomingRow]:
    """Upcoming sessions across seasons, earliest date first."""
    today = today or local_today()
    upcoming = sorted(
        (s for s in sessions if is_upcoming(s, today)), key=lambda s: s.session_date
    )
    rows = []
    for session in upcoming:
        season = seasons_by_id.get(session.season_id)
        rows.append(
            UpcomingRow(
                id=session.id,
                season_id=session.season_id,
                date=format_month_day(session.session_date),
                season=season.name if season else f"Season {session.season_id}",
                club=club_name(season.club_id if season else club_id, clubs_by_id),
                status=session.status,
                location=session.location or "",
                address=session.address or "",
            )
        )
    return rows


# ============================================================================
# Loading
# ============================================================================


class Dashboard(Record):
    """Everything the home and profile screens show for one club."""

    club_id: int
    season_id: Optional[int] = None
    player_id: Optional[int] = None
    players: List[Player] = Field(default_factory=list)
    record_session: WritableSessionResult = Field(default_factory=WritableSessionResult)
    stats: ProfileStatSummary = Field(default_factory=ProfileStatSummary)
    elo_history: List[EloHistoryRow] = Field(default_factory=list)
    recent_games: List[GameRow] = Field(default_factory=list)
    all_games: List[GameRow] = Field(default_factory=list)
    upcoming_sessions: List[UpcomingRow] = Field(default_factory=list)
    all_upcoming_sessions: List[UpcomingRow] = Field(default_factory=list)
    leaderboard_session: Optional[Session] = None
    start_time_options: List[Tuple[str, str]] = Field(default_factory=list)  # (HH:MM, label)


def _settled(result: Any, default: Any, what: str) -> Any:
    """Unwrap a gather() result, degrading a failed fetch to ``default``."""
    if isinstance(result, BaseException):
        logger.warning(f"Failed to load {what}, continuing without it: {result}")
        return default
    return result


def _with_names(
    participants: List[GameParticipant], players_by_id: Mapping[int, Player]
) -> List[GameParticipant]:
    """Fill missing participant display names from the club's player list."""
    named = []
    for participant in participants:
        player = players_by_id.get(participant.player_id)
        if participant.display_name is None and player is not None:
            participant = participant.model_copy(update={"display_name": player.display_name})
        named.append(participant)
    return named


async def load_dashboard(
    service: LeagueDataService,
    club_id: Optional[int] = None,
    profile: Optional[Profile] = None,
    clubs: Iterable[Club] = (),
    season_id: Optional[int] = None,
    policy: Optional[SessionSelectionPolicy] = None,
    today: Optional[date] = None,
    recent_limit: Optional[int] = None,
) -> Dashboard:
    """
    Fetch a club's data concurrently and aggregate it into a Dashboard.

    Each fetch that fails is logged and treated as an empty collection, so
    one broken endpoint degrades the screen instead of blanking it. Only the
    aggregation's inputs are fetched here; nothing is written.

    Args:
        service: Remote data service
        club_id: Club to load; defaults to the configured default club
        profile: Signed-in profile, used to find the viewer's player
        clubs: Clubs known to the caller, for club names
        season_id: Selected season; defaults to the first active season
        policy: Session selection policy; defaults to the configured one
        today: Reference date for upcoming sessions; defaults to local today
        recent_limit: Size of the recent lists; defaults to the configured one
    """
    if club_id is None:
        club_id = settings_service.DEFAULT_CLUB_ID
    policy = policy or settings_service.get_session_policy()
    recent_limit = recent_limit if recent_limit is not None else settings_service.RECENT_LIMIT
    clubs_by_id = {club.id: club for club in clubs}

    seasons_res, active_res, inactive_res, courts_res, games_res = await asyncio.gather(
        service.list_seasons(club_id),
        service.list_players(club_id, is_active=True),
        service.list_players(club_id, is_active=False),
        service.list_courts(club_id),
        service.list_games(club_id),
        return_exceptions=True,
    )
    seasons: List[Season] = _settled(seasons_res, [], "seasons")
    players = merge_admin_players(
        _settled(active_res, [], "active players"),
        _settled(inactive_res, [], "inactive players"),
    )
    courts: List[Court] = _settled(courts_res, [], "courts")
    games: List[Game] = _settled(games_res, [], "games")

    if season_id is None:
        default_seasons = list_open_seasons(seasons) or seasons
        season_id = default_seasons[0].id if default_seasons else None

    sessions_res = await asyncio.gather(
        *(service.list_sessions(club_id, season.id) for season in seasons),
        return_exceptions=True,
    )
    snapshots_res = await asyncio.gather(
        *(service.get_season_leaderboard_snapshot(club_id, season.id) for season in seasons),
        return_exceptions=True,
    )
    participants_res = await asyncio.gather(
        *(service.list_participants(club_id, game.id) for game in games),
        return_exceptions=True,
    )

    sessions_by_season: Dict[int, List[Session]] = {
        season.id: _settled(res, [], f"sessions of season {season.id}")
        for season, res in zip(seasons, sessions_res)
    }
    snapshots = [
        (season, res)
        for season, res in zip(seasons, snapshots_res)
        if _settled(res, None, f"leaderboard of season {season.id}") is not None
    ]
    players_by_id = {player.id: player for player in players}
    participants_by_game = {
        game.id: _with_names(_settled(res, [], f"participants of game {game.id}"), players_by_id)
        for game, res in zip(games, participants_res)
    }

    all_sessions = [s for sessions in sessions_by_season.values() for s in sessions]
    sessions_by_id = {session.id: session for session in all_sessions}
    seasons_by_id = {season.id: season for season in seasons}
    courts_by_id = {court.id: court for court in courts}

    player_id = find_user_player_id(profile, players)
    source_games = player_games(games, participants_by_game, player_id)
    game_rows = build_game_rows(
        source_games, participants_by_game, sessions_by_id, seasons_by_id, courts_by_id, player_id
    )
    upcoming_rows = build_upcoming_rows(all_sessions, seasons_by_id, clubs_by_id, club_id, today)

    logger.debug(
        f"Dashboard for club {club_id}: {len(seasons)} seasons, {len(games)} games, "
        f"player {player_id}"
    )

    return Dashboard(
        club_id=club_id,
        season_id=season_id,
        player_id=player_id,
        players=players,
        record_session=resolve_record_session(seasons, sessions_by_season, season_id, policy),
        stats=compute_profile_stats(
            source_games, participants_by_game, sessions_by_id, seasons_by_id, player_id
        ),
        elo_history=build_elo_history(snapshots, player_id, profile, clubs_by_id),
        recent_games=game_rows[:recent_limit],
        all_games=game_rows,
        upcoming_sessions=upcoming_rows[:recent_limit],
        all_upcoming_sessions=upcoming_rows,
        leaderboard_session=select_leaderboard_session(sessions_by_season.get(season_id, [])),
        start_time_options=[(slot, format_time_label(slot)) for slot in time_slot_options()],
    )
