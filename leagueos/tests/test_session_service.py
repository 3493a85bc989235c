"""
Tests for session eligibility - writable session selection under both policies.
"""
from leagueos.models.schemas import SessionStatus
from leagueos.services import session_service
from leagueos.services.session_service import SessionSelectionPolicy
from leagueos.tests.conftest import make_season, make_session
from leagueos.utils.constants import MULTIPLE_OPEN_SESSIONS_MESSAGE, NO_OPEN_SESSION_MESSAGE

STRICT = SessionSelectionPolicy.STRICT
LATEST = SessionSelectionPolicy.LATEST_OPEN_OR_CLOSED


def test_strict_selects_the_only_open_session():
    sessions = [
        make_session(1, SessionStatus.CLOSED, "2026-02-10"),
        make_session(2, SessionStatus.OPEN, "2026-02-17"),
    ]
    result = session_service.select_writable_session(sessions)
    assert result.session.id == 2
    assert result.diagnostic is None


def test_strict_returns_session_verbatim_regardless_of_others():
    target = make_session(5, SessionStatus.OPEN, "2025-01-01", location="Main Hall")
    sessions = [
        make_session(1, SessionStatus.FINALIZED, "2026-03-01"),
        make_session(2, SessionStatus.UPCOMING, "2026-04-01"),
        target,
        make_session(3, SessionStatus.CANCELLED, "2026-05-01"),
    ]
    result = session_service.select_writable_session(sessions, STRICT)
    assert result.session == target


def test_strict_no_open_session():
    result = session_service.select_writable_session([make_session(1, SessionStatus.CLOSED)])
    assert result.session is None
    assert result.diagnostic == NO_OPEN_SESSION_MESSAGE
    assert "No open session" in result.diagnostic


def test_strict_empty_list():
    result = session_service.select_writable_session([])
    assert result.session is None
    assert result.diagnostic == NO_OPEN_SESSION_MESSAGE


def test_strict_multiple_open_sessions():
    sessions = [
        make_session(1, SessionStatus.OPEN, "2026-02-10"),
        make_session(2, SessionStatus.OPEN, "2026-02-17"),
    ]
    result = session_service.select_writable_session(sessions, STRICT)
    assert result.session is None
    assert result.diagnostic == MULTIPLE_OPEN_SESSIONS_MESSAGE
    assert result.diagnostic != NO_OPEN_SESSION_MESSAGE


def test_latest_prefers_newest_open():
    sessions = [
        make_session(1, SessionStatus.OPEN, "2026-02-10"),
        make_session(2, SessionStatus.OPEN, "2026-02-17"),
        make_session(3, SessionStatus.CLOSED, "2026-02-24"),
    ]
    result = session_service.select_writable_session(sessions, LATEST)
    assert result.session.id == 2
    assert result.diagnostic is None


def test_latest_breaks_date_ties_by_id():
    sessions = [
        make_session(4, SessionStatus.OPEN, "2026-02-17"),
        make_session(7, SessionStatus.OPEN, "2026-02-17"),
    ]
    result = session_service.select_writable_session(sessions, LATEST)
    assert result.session.id == 7


def test_latest_falls_back_to_newest_closed():
    sessions = [
        make_session(1, SessionStatus.CLOSED, "2026-02-10"),
        make_session(2, SessionStatus.CLOSED, "2026-02-17"),
        make_session(3, SessionStatus.FINALIZED, "2026-02-24"),
    ]
    result = session_service.select_writable_session(sessions, LATEST)
    assert result.session.id == 2


def test_latest_without_open_or_closed():
    sessions = [make_session(1, SessionStatus.UPCOMING), make_session(2, SessionStatus.FINALIZED)]
    result = session_service.select_writable_session(sessions, LATEST)
    assert result.session is None
    assert result.diagnostic == NO_OPEN_SESSION_MESSAGE


def test_list_open_seasons():
    seasons = [make_season(1), make_season(2, is_active=False), make_season(3)]
    assert [s.id for s in session_service.list_open_seasons(seasons)] == [1, 3]


def test_select_leaderboard_session():
    sessions = [
        make_session(1, SessionStatus.FINALIZED, "2026-02-10"),
        make_session(2, SessionStatus.CLOSED, "2026-02-17"),
        make_session(3, SessionStatus.UPCOMING, "2026-02-24"),
    ]
    assert session_service.select_leaderboard_session(sessions).id == 2
    assert session_service.select_leaderboard_session([make_session(3, SessionStatus.UPCOMING)]) is None


def test_resolve_record_session_prefers_selected_season():
    seasons = [make_season(1), make_season(2)]
    sessions_by_season = {
        1: [make_session(10, SessionStatus.OPEN, season_id=1)],
        2: [make_session(20, SessionStatus.OPEN, season_id=2)],
    }
    result = session_service.resolve_record_session(seasons, sessions_by_season, 2)
    assert result.session.id == 20


def test_resolve_record_session_falls_back_to_other_season():
    seasons = [make_season(1), make_season(2)]
    sessions_by_season = {
        1: [make_session(10, SessionStatus.OPEN, season_id=1)],
        2: [make_session(20, SessionStatus.CLOSED, season_id=2)],
    }
    result = session_service.resolve_record_session(seasons, sessions_by_season, 2)
    assert result.session.id == 10


def test_resolve_record_session_keeps_selected_season_diagnostic():
    seasons = [make_season(1), make_season(2)]
    sessions_by_season = {
        1: [make_session(10, SessionStatus.CLOSED, season_id=1)],
        2: [
            make_session(20, SessionStatus.OPEN, season_id=2),
            make_session(21, SessionStatus.OPEN, season_id=2),
        ],
    }
    result = session_service.resolve_record_session(seasons, sessions_by_season, 2)
    assert result.session is None
    assert result.diagnostic == MULTIPLE_OPEN_SESSIONS_MESSAGE
