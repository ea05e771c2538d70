from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "terminal-typer"


def _default_data_dir() -> Path:
    override = os.environ.get("TYPER_HOME")
    if override:
        return Path(override)
    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".local" / "share" / APP_NAME


DATA_DIR = _default_data_dir()
LEADERBOARD_FILE = DATA_DIR / "leaderboard.txt"
LOG_FILE = DATA_DIR / "terminal-typer.log"
LOG_LEVEL = os.environ.get("TYPER_LOG_LEVEL", "INFO").upper()

# Text generation
WORD_COUNT_PRESETS = (5, 10, 25, 50)
MIN_WORD_COUNT = 1
MAX_WORD_COUNT = 1000

# Leaderboard
LEADERBOARD_CAPACITY = 10
LEGACY_WORD_COUNT = 15  # attempts recorded before word counts were stored
UNKNOWN_DATE = "Unknown"
DATE_FORMAT = "%m/%d/%Y %H:%M"

# Player names
MAX_NAME_LENGTH = 20
MAX_NAMES_SHOWN = 6

# Scoring
CHARS_PER_WORD = 5.0
ACCURACY_PENALTY_THRESHOLD = 50.0
