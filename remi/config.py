import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
STORAGE_DIR = Path(os.environ.get("REMI_STORAGE_DIR", PROJECT_ROOT / "data"))

STORAGE_BUCKET = "remi_scorer"
STATE_KEY = "state"

MIN_PLAYERS = 2
MAX_PLAYERS = 4

# Largest value the stored schema accepts for scores and targets
INT32_MAX = 2 ** 31 - 1


def _positive_int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if raw.isascii() and raw.isdigit() and len(raw) <= 10 and 0 < int(raw) <= INT32_MAX:
        return int(raw)
    return default


DEFAULT_TARGET_SCORE = _positive_int_env("REMI_DEFAULT_TARGET_SCORE", 1000)
TARGET_SCORE_PRESETS = (500, 1000, 1500, 2000)
QUICK_SCORES = (0, 5, 10, 25, 50, 100)

# Round scores at or above this are highlighted on the scoreboard
HIGH_ROUND_SCORE = 100

MATCH_NAME_DATE_FORMAT = "%d.%m.%Y %H:%M"
GENERATED_MATCH_NAMES = (
    "Battle of the rebel cards",
    "The legendary couch Remi",
    "Duel of the lost ace",
)
