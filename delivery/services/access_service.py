"""Delivery gates for respondent sessions: close date, password, time limit."""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from fastapi import HTTPException

from delivery.config import TIME_LIMIT_GRACE_SECONDS
from delivery.utils import as_utc

logger = logging.getLogger(__name__)

BCRYPT_MAX_BYTES = 72


def now() -> datetime:
    """Current UTC time."""
    return datetime.now(timezone.utc)


def hash_password(password: str) -> str:
    """Hash an access password using bcrypt."""
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        raise HTTPException(status_code=400, detail="Password is too long")
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(encoded, salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify an access password against its hash."""
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"), hashed_password.encode("utf-8")
        )
    except ValueError as exc:
        logger.warning("Stored access password hash is unusable: %s", exc)
        return False


def parse_datetime(value: object) -> datetime | None:
    """Parse an ISO timestamp; naive values are taken as UTC."""
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        return as_utc(datetime.fromisoformat(raw))
    except ValueError:
        logger.warning("Ignoring unparseable timestamp %r", value)
        return None


def check_open(settings: dict[str, Any], at: datetime) -> None:
    """Reject delivery once the assessment's close date has passed."""
    close_date = parse_datetime(settings.get("closeDate"))
    if close_date is not None and at >= close_date:
        raise HTTPException(status_code=409, detail="Assessment is closed")


def check_password(settings: dict[str, Any], password: str | None) -> None:
    """Require the access password when the assessment has one."""
    password_hash = settings.get("passwordHash")
    if not password_hash:
        return
    if not password or not verify_password(password, password_hash):
        raise HTTPException(status_code=403, detail="Incorrect password")


def session_deadline(
    settings: dict[str, Any], started_at: datetime | None
) -> datetime | None:
    """When a session's time runs out; None without a time limit."""
    limit = settings.get("timeLimit")
    if isinstance(limit, bool) or not isinstance(limit, (int, float)) or limit <= 0:
        return None
    if started_at is None:
        return None
    return as_utc(started_at) + timedelta(minutes=limit)


def check_time_left(
    settings: dict[str, Any], started_at: datetime | None, at: datetime
) -> None:
    """Reject work on a session whose time limit has run out."""
    deadline = session_deadline(settings, started_at)
    if deadline is None:
        return
    if at > deadline + timedelta(seconds=TIME_LIMIT_GRACE_SECONDS):
        raise HTTPException(status_code=409, detail="Time limit exceeded")
