import os
import time
from pathlib import Path

import pytest

from delivery import config
from delivery.services.cleanup_service import cleanup_stale_sessions


def _session(base: Path, name: str, age_days: float) -> Path:
    directory = base / name
    directory.mkdir(parents=True)
    state = directory / "quiz.shuffle.json"
    state.write_text("{}", encoding="utf-8")
    stamp = time.time() - age_days * 24 * 60 * 60
    os.utime(state, (stamp, stamp))
    os.utime(directory, (stamp, stamp))
    return directory


def test_cleanup_removes_only_stale_sessions(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "SESSIONS_DIR", tmp_path)
    monkeypatch.setattr(config, "SESSION_RETENTION_DAYS", 7)
    stale = _session(tmp_path, "stale", 10)
    fresh = _session(tmp_path, "fresh", 1)

    assert cleanup_stale_sessions() == 1
    assert not stale.exists()
    assert fresh.exists()


def test_cleanup_disabled_by_zero_retention(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "SESSIONS_DIR", tmp_path)
    monkeypatch.setattr(config, "SESSION_RETENTION_DAYS", 0)
    stale = _session(tmp_path, "stale", 30)

    assert cleanup_stale_sessions() == 0
    assert stale.exists()
