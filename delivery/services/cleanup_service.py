"""Service for cleanup of abandoned respondent sessions."""
import logging
import shutil
import threading
import time
from pathlib import Path

from delivery import config

logger = logging.getLogger(__name__)


def _latest_mtime(directory: Path) -> float:
    mtimes = [path.stat().st_mtime for path in directory.iterdir()]
    return max(mtimes, default=directory.stat().st_mtime)


def cleanup_stale_sessions(now: float | None = None) -> int:
    """Remove respondent session directories untouched past the retention period."""
    if config.SESSION_RETENTION_DAYS <= 0:
        return 0

    cutoff = (now or time.time()) - config.SESSION_RETENTION_DAYS * 24 * 60 * 60
    removed = 0
    try:
        for directory in config.SESSIONS_DIR.iterdir():
            if not directory.is_dir():
                continue
            if _latest_mtime(directory) >= cutoff:
                continue
            shutil.rmtree(directory)
            removed += 1
    except OSError as e:
        logger.error(f"Failed to cleanup stale sessions: {e}")
        return removed

    if removed > 0:
        logger.info(f"Cleaned up {removed} stale respondent sessions")
    return removed


def schedule_sessions_cleanup() -> None:
    """Schedule periodic cleanup of stale respondent sessions."""
    cleanup_interval = config.SESSION_CLEANUP_INTERVAL_SECONDS

    def _worker() -> None:
        # Initial delay before first cleanup
        time.sleep(60)
        while True:
            cleanup_stale_sessions()
            time.sleep(cleanup_interval)

    thread = threading.Thread(
        target=_worker,
        name="sessions_cleanup",
        daemon=True,
    )
    thread.start()
