"""Application configuration and constants."""
import logging
import os
from pathlib import Path


def _parse_int_env(name: str, default: int) -> int:
    """Parse integer from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# Directories
DATA_DIR = Path(
    os.environ.get("ASSESSMENT_DATA_DIR", Path.cwd() / "data" / "assessments")
)
DATA_DIR.mkdir(parents=True, exist_ok=True)

SESSIONS_DIR = Path(os.environ.get("SESSIONS_DIR", Path.cwd() / "data" / "sessions"))
SESSIONS_DIR.mkdir(parents=True, exist_ok=True)

# Respondent sessions untouched for longer than this are removed
SESSION_RETENTION_DAYS = _parse_int_env("SESSION_RETENTION_DAYS", 7)
SESSION_CLEANUP_INTERVAL_SECONDS = _parse_int_env(
    "SESSION_CLEANUP_INTERVAL_SECONDS", 24 * 60 * 60
)

# Database
DB_DIR = Path(os.environ.get("DB_DIR", Path.cwd() / "data"))
DB_DIR.mkdir(parents=True, exist_ok=True)
DATABASE_URL = os.environ.get(
    "DATABASE_URL", f"sqlite:///{DB_DIR / 'assessments.db'}"
)

# Logging
LOG_LEVEL = logging.getLevelName(os.environ.get("LOG_LEVEL", "INFO").upper())
if not isinstance(LOG_LEVEL, int):
    LOG_LEVEL = logging.INFO

# Assessments
ASSESSMENT_TYPES = {"test", "essay", "survey"}
DEFAULT_SETTINGS = {
    "shuffleQuestions": False,
    "shuffleOptions": False,
    "showCorrectAnswers": False,
    "showScoreImmediately": True,
    "passingScore": None,
    "allowMultipleAttempts": True,
    "maxAttempts": None,
    "timeLimit": None,  # minutes
    "closeDate": None,  # ISO timestamp
    "passwordHash": None,
}

# Seconds a submit may arrive after the time limit runs out
TIME_LIMIT_GRACE_SECONDS = _parse_int_env("TIME_LIMIT_GRACE_SECONDS", 30)
