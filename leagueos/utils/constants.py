"""
Constants used across game recording and dashboard aggregation.
"""

# Time grid
SLOT_MINUTES = 5  # Game start times align to this many minutes
SLOTS_PER_DAY = 24 * 60 // SLOT_MINUTES

# Ratings
DEFAULT_GLOBAL_ELO = 1000  # Shown when a leaderboard row has no global score

# Session selection diagnostics
NO_OPEN_SESSION_MESSAGE = (
    "No open session is available for this season. Open one session before recording games."
)
MULTIPLE_OPEN_SESSIONS_MESSAGE = (
    "Multiple open sessions found for this season. Close extras so exactly one open session remains."
)

# Submission validation messages (checked in this order)
MISSING_SESSION_MESSAGE = "No open session selected."
MISSING_START_TIME_MESSAGE = "Please select a start time."
DRAW_MESSAGE = "Draw is not allowed. Scores must differ."
MISSING_PLAYERS_MESSAGE = "Please select all 4 players."
DUPLICATE_PLAYERS_MESSAGE = "Players must be unique across both sides."
MISSING_COURT_MESSAGE = "Please select a court."
SOFT_DUPLICATE_MESSAGE = (
    "A game with the same players and score already exists in this session. Record it anyway?"
)

# Server rejection remediation
GAME_CONFLICT_MESSAGE = (
    "A game already exists for this court and start time. Time moved to the next 5-minute slot."
)
INVALID_GAME_TIME_MESSAGE = "Start time must be on a 5-minute boundary. Try 7:00, 7:05, 7:10."
SESSION_IMMUTABLE_MESSAGE = (
    "Selected session is not writable anymore. Select a season with one OPEN session."
)
GENERIC_FAILURE_MESSAGE = "Failed to add game"
