"""
Server rejections of a game submission.

Data-service implementations raise ApiError. It is decoded once, here,
into a closed set of failure variants that callers handle exhaustively:

    GameConflict      court + start time already booked
    InvalidGameTime   start time not on a 5-minute boundary
    SessionImmutable  session left OPEN between selection and submission
    GenericFailure    anything else, carrying the server's message
"""

from dataclasses import dataclass
from typing import Any, Optional, Union

from leagueos.utils.constants import (
    GAME_CONFLICT_MESSAGE,
    GENERIC_FAILURE_MESSAGE,
    INVALID_GAME_TIME_MESSAGE,
    SESSION_IMMUTABLE_MESSAGE,
)
from leagueos.utils.datetime_utils import next_time_slot

GAME_CONFLICT = "GAME_CONFLICT"
INVALID_GAME_TIME = "INVALID_GAME_TIME"
SESSION_IMMUTABLE = "SESSION_IMMUTABLE"


class ApiError(Exception):
    """Error response from the remote league API."""

    def __init__(
        self,
        status: int,
        message: str,
        code: Optional[str] = None,
        detail: Any = None,
    ):
        super().__init__(message)
        self.status = status
        self.message = message
        self.code = code
        self.detail = detail

    def __repr__(self) -> str:
        return f"ApiError(status={self.status}, code={self.code!r}, message={self.message!r})"

    @classmethod
    def from_response(cls, status: int, body: Any, reason: str = "") -> "ApiError":
        """
        Build an ApiError from a decoded error response body.

        The API reports structured errors as {"detail": {"code": ..., "message": ...}}.
        Any other body is kept as the detail, and a string body becomes the message.

        Args:
            status: HTTP status code
            body: Parsed JSON body, or the raw text if it was not JSON
            reason: HTTP reason phrase, used for the fallback message
        """
        fallback = f"API {status} {reason}".rstrip()
        detail = body.get("detail") if isinstance(body, dict) else None
        if isinstance(detail, dict):
            return cls(
                status=status,
                code=detail.get("code"),
                message=detail.get("message") or fallback,
                detail=detail,
            )
        message = body if isinstance(body, str) and body else fallback
        return cls(status=status, message=message, detail=body)


@dataclass(frozen=True)
class GameConflict:
    pass


@dataclass(frozen=True)
class InvalidGameTime:
    pass


@dataclass(frozen=True)
class SessionImmutable:
    pass


@dataclass(frozen=True)
class GenericFailure:
    message: str


ApiFailure = Union[GameConflict, InvalidGameTime, SessionImmutable, GenericFailure]


@dataclass(frozen=True)
class Remediation:
    """What to tell the user, and the start time to retry with if it changed."""

    message: str
    next_start_time: Optional[str] = None


def decode_api_error(error: ApiError) -> ApiFailure:
    """Map an ApiError onto its failure variant by error code."""
    if error.code == GAME_CONFLICT:
        return GameConflict()
    if error.code == INVALID_GAME_TIME:
        return InvalidGameTime()
    if error.code == SESSION_IMMUTABLE:
        return SessionImmutable()
    return GenericFailure(message=error.message)


def remediation_for(failure: ApiFailure, start_time: str) -> Remediation:
    """
    Decide how the recording screen reacts to a rejected submission.

    On a conflict the start time moves forward one 5-minute slot so the
    user can retry immediately; the other variants only carry a message.

    Args:
        failure: Decoded server failure
        start_time: The "HH:MM" time that was submitted

    Returns:
        Remediation with the user-facing message and optional new start time
    """
    if isinstance(failure, GameConflict):
        return Remediation(message=GAME_CONFLICT_MESSAGE, next_start_time=next_time_slot(start_time))
    if isinstance(failure, InvalidGameTime):
        return Remediation(message=INVALID_GAME_TIME_MESSAGE)
    if isinstance(failure, SessionImmutable):
        return Remediation(message=SESSION_IMMUTABLE_MESSAGE)
    if isinstance(failure, GenericFailure):
        return Remediation(message=failure.message or GENERIC_FAILURE_MESSAGE)
    raise TypeError(f"Unhandled API failure: {failure!r}")
