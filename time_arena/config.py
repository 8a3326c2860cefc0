import os

APP_TITLE = "Time Arena"
APPDATA_DIR = os.path.join(os.getenv("APPDATA") or os.path.expanduser("~"), "TimeArena")

STORAGE_KEY = "timearena_state_v1"
STATE_FILE = os.path.join(APPDATA_DIR, "state.json")

LOG_DIR = os.path.join(APPDATA_DIR, "logs")
LOG_FILE = os.path.join(LOG_DIR, "time_arena.log")

TICK_INTERVAL_SEC = 1.0
SAVE_ON_MUTATION = True

HISTORY_LIMIT = 60

# Default record
DEFAULT_MINUTES_MAX = 120
DEFAULT_THEME = "dark"
DEFAULT_USER_NAME = "Player"
THEMES = ("dark", "light")

# Scoring
IMPLICIT_MISSION_XP = 10
MAJOR_PENALTY_DEBIT_MIN = 20
MINOR_PENALTY_DEBIT_MIN = 10

# (xp ceiling, level) pairs; xp at or above the last ceiling is MAX_LEVEL
LEVEL_THRESHOLDS = (
    (100, 1),
    (250, 2),
    (450, 3),
    (700, 4),
    (1000, 5),
)
MAX_LEVEL = 6

DAILY_MESSAGES = (
    "Welcome to the arena. Today we make progress!",
    "Today's quests are waiting. Let's go!",
    "We earn clean time, no negotiating.",
    "The streak is on fire. Keep it burning!",
    "A small step today = level up tomorrow!",
)
