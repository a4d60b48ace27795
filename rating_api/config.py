# Settings from environment variables (.env or hosting dashboard variables).

import os
from dotenv import load_dotenv

load_dotenv()


def _env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def _env_int(key: str, default: int) -> int:
    s = _env(key)
    if not s:
        return default
    try:
        return int(s)
    except ValueError:
        return default


def _env_list(key: str, default: list = None) -> list:
    s = _env(key)
    if not s:
        return list(default or [])
    return [x.strip() for x in s.split(",") if x.strip()]


def _env_roster(key: str, default: list) -> list:
    """Parse ``Name:password,Name:password`` into (name, password) pairs."""
    s = _env(key)
    if not s:
        return list(default)
    roster = []
    for item in s.split(","):
        name, sep, password = item.partition(":")
        name = name.strip()
        if not name or not sep:
            continue
        roster.append((name, password.strip()))
    return roster or list(default)


# ============================================================================
# Database
# ============================================================================
DATABASE_URL = _env("DATABASE_URL")
DATABASE_URL_FALLBACK = _env("DATABASE_URL_FALLBACK", "sqlite+aiosqlite:///./local_ratings.db")

# ============================================================================
# Server
# ============================================================================
PORT = _env_int("PORT", 8787)
CORS_ORIGINS = _env_list("CORS_ORIGINS", ["*"])
LOG_LEVEL = _env("LOG_LEVEL", "INFO").upper()

# ============================================================================
# Roster & admin
# ============================================================================
DEFAULT_ROSTER = [
    ("Bader", "bader123"),
    ("Charbel", "charbel123"),
    ("Christian", "christian123"),
    ("Edmond", "edmond123"),
    ("Edwin", "edwin123"),
    ("Justin", "justin123"),
    ("Marc", "marc123"),
    ("Rayan", "rayan123"),
]
ROSTER = _env_roster("ROSTER", DEFAULT_ROSTER)
ADMIN_NAME = _env("ADMIN_NAME", "Bader")

# ============================================================================
# Ratings & comments
# ============================================================================
MIN_SCORE = 1
MAX_SCORE = 10
PLAYER_NAME_MAX_LENGTH = 64
COMMENT_MAX_LENGTH = _env_int("COMMENT_MAX_LENGTH", 500)
