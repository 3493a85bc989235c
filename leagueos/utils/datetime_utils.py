"""
Datetime utility functions.

Game start times live on a fixed 5-minute grid. These helpers align
user-entered wall-clock times to that grid and combine them with a
session's calendar date.

Two parse styles coexist:
- fail-soft: ``floor_to_five_minutes`` and friends return the input
  unchanged when it cannot be parsed, so they can run on every keystroke.
- fail-null: ``combine_date_and_time`` returns ``None`` when either part
  is unusable, meaning "not ready to submit yet".
"""

from datetime import date, datetime
from typing import List, Optional, Tuple
import pytz

from leagueos.utils.constants import SLOT_MINUTES, SLOTS_PER_DAY

MINUTES_PER_DAY = 24 * 60


def local_today() -> date:
    """Today's calendar date in the caller's local time zone."""
    return date.today()


def _parse_hhmm(time_hhmm: str) -> Optional[Tuple[int, int]]:
    """Parse ``HH:MM`` into (hours, minutes), or None if malformed or out of range."""
    if not isinstance(time_hhmm, str):
        return None
    parts = time_hhmm.split(":")
    if len(parts) < 2:
        return None
    if not all(part.isascii() and part.isdigit() for part in parts[:2]):
        return None
    hours = int(parts[0])
    minutes = int(parts[1])
    if hours < 0 or hours > 23 or minutes < 0 or minutes > 59:
        return None
    return hours, minutes


def _format_hhmm(hours: int, minutes: int) -> str:
    return f"{hours:02d}:{minutes:02d}"


def floor_to_five_minutes(time_hhmm: str) -> str:
    """
    Round a wall-clock time down to the nearest 5-minute boundary.

    Args:
        time_hhmm: Time as "HH:MM"

    Returns:
        Zero-padded "HH:MM" with the minute floored to a multiple of 5,
        or the input unchanged if it cannot be parsed.

    Examples:
        >>> floor_to_five_minutes("19:17")
        "19:15"
        >>> floor_to_five_minutes("07:59")
        "07:55"
        >>> floor_to_five_minutes("25:00")
        "25:00"
    """
    parsed = _parse_hhmm(time_hhmm)
    if parsed is None:
        return time_hhmm
    hours, minutes = parsed
    return _format_hhmm(hours, (minutes // SLOT_MINUTES) * SLOT_MINUTES)


def next_time_slot(time_hhmm: str) -> str:
    """
    Advance a time to the following 5-minute slot, wrapping past midnight.

    The input is normalized first, so "19:17" becomes "19:20".
    Unparseable input is returned unchanged.
    """
    parsed = _parse_hhmm(floor_to_five_minutes(time_hhmm))
    if parsed is None:
        return time_hhmm
    hours, minutes = parsed
    total = (hours * 60 + minutes + SLOT_MINUTES) % MINUTES_PER_DAY
    return _format_hhmm(total // 60, total % 60)


def time_slot_options() -> List[str]:
    """All selectable start times for a day: "00:00", "00:05", ... "23:55"."""
    return [
        _format_hhmm((i * SLOT_MINUTES) // 60, (i * SLOT_MINUTES) % 60)
        for i in range(SLOTS_PER_DAY)
    ]


def format_time_label(time_hhmm: str) -> str:
    """Render "19:05" as "7:05 PM". Unparseable input is returned unchanged."""
    parsed = _parse_hhmm(time_hhmm)
    if parsed is None:
        return time_hhmm
    hours, minutes = parsed
    suffix = "PM" if hours >= 12 else "AM"
    hour12 = 12 if hours % 12 == 0 else hours % 12
    return f"{hour12}:{minutes:02d} {suffix}"


def parse_session_date(session_date: str) -> Optional[date]:
    """Parse a "YYYY-MM-DD" session date, returning None on failure."""
    if not isinstance(session_date, str):
        return None
    try:
        return datetime.strptime(session_date.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def combine_date_and_time(
    session_date: str, time_hhmm: str, tz: Optional[str] = None
) -> Optional[str]:
    """
    Combine a session's calendar date with a start time into an ISO timestamp.

    The time is floored to the 5-minute grid before combining. Games do not
    carry a per-club time zone, so the timestamp is built in the caller's
    local zone unless ``tz`` names a pytz zone explicitly.

    Args:
        session_date: Calendar date as "YYYY-MM-DD"
        time_hhmm: Start time as "HH:MM"
        tz: Optional time zone name (e.g. "America/Vancouver")

    Returns:
        Timezone-aware ISO 8601 string with zero seconds, e.g.
        "2026-02-17T19:15:00-08:00", or None if the date or time cannot be
        parsed or the date does not exist (e.g. "2026-02-30").
    """
    parsed_time = _parse_hhmm(floor_to_five_minutes(time_hhmm))
    if parsed_time is None:
        return None
    hours, minutes = parsed_time

    if not isinstance(session_date, str):
        return None
    parts = session_date.split("-")
    if len(parts) != 3:
        return None
    try:
        year, month, day = (int(part) for part in parts)
    except ValueError:
        return None

    try:
        naive = datetime(year, month, day, hours, minutes, 0, 0)
    except ValueError:
        return None

    if tz:
        try:
            zone = pytz.timezone(tz)
        except pytz.UnknownTimeZoneError:
            return None
        aware = zone.localize(naive)
    else:
        aware = naive.astimezone()
    return aware.isoformat()


def format_month_day(value: str) -> str:
    """
    Render a session date or ISO timestamp as "Feb 17".

    Unparseable input is returned unchanged.
    """
    parsed = parse_session_date(value)
    if parsed is None:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except (AttributeError, ValueError):
            return value
    return f"{parsed.strftime('%b')} {parsed.day}"
