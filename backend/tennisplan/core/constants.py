"""Application-wide constants for the Tennisplan backend."""

BRAND_NAME = "Tennisschule"

API_TITLE = f"{BRAND_NAME} Planung API"
API_DESCRIPTION = "Scheduling and billing for trainers, players, rate plans and training sessions."
API_VERSION = "1.0.0"

# Calendar grid
CALENDAR_START_HOUR = 7
CALENDAR_END_HOUR = 22
CALENDAR_PX_PER_HOUR = 40
CALENDAR_MIN_EVENT_PX = 22

# Planning
UPCOMING_SESSIONS_LIMIT = 20
PLANNING_LOOKAHEAD_DAYS = 7

# Text constraints
MAX_NAME_LENGTH = 200
MAX_NOTE_LENGTH = 2000

DAYS_OF_WEEK_SHORT = ["Mo", "Di", "Mi", "Do", "Fr", "Sa", "So"]

# Fallback labels used when a referenced record no longer exists
UNKNOWN_PLAYER_LABEL = "Spieler"
UNKNOWN_PLAYER_NAME = "Unbekannt"
UNKNOWN_RATE_PLAN_LABEL = "Tarif"
