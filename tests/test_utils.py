from datetime import datetime, timezone
from pathlib import Path

import pytest
from fastapi import HTTPException

from delivery import config
from delivery.utils import json_utils, paths, time_utils, validation


def test_json_files(tmp_path: Path) -> None:
    payload = {"message": "привет", "count": 2}
    assert "привет" in json_utils.json_dump(payload)

    path = tmp_path / "nested" / "payload.json"
    json_utils.write_json_file(path, payload)
    assert json_utils.read_json_object(path) == payload
    assert not path.with_name("payload.json.tmp").exists()
    assert json_utils.read_json_object(tmp_path / "missing.json") is None


def test_read_json_object_rejects_non_objects(tmp_path: Path) -> None:
    listing = tmp_path / "list.json"
    listing.write_text("[1, 2]", encoding="utf-8")
    broken = tmp_path / "broken.json"
    broken.write_text("{", encoding="utf-8")
    with pytest.raises(ValueError):
        json_utils.read_json_object(listing)
    with pytest.raises(ValueError):
        json_utils.read_json_object(broken)


def test_time_utils() -> None:
    parsed = datetime.fromisoformat(time_utils.utc_now())
    assert parsed.tzinfo is not None

    naive = datetime(2024, 1, 1, 12, 0)
    assert time_utils.as_utc(naive).tzinfo is timezone.utc
    assert time_utils.as_utc(None) is None


def test_paths_helpers(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "DATA_DIR", tmp_path / "assessments")
    monkeypatch.setattr(config, "SESSIONS_DIR", tmp_path / "sessions")
    assert paths.assessment_dir("abc") == tmp_path / "assessments" / "abc"
    assert paths.payload_path("abc") == tmp_path / "assessments" / "abc" / "assessment.json"
    assert paths.session_dir("client") == tmp_path / "sessions" / "client"


def test_validate_id() -> None:
    assert validation.validate_id("test", " abc ") == "abc"
    with pytest.raises(HTTPException):
        validation.validate_id("test", "")
    with pytest.raises(HTTPException):
        validation.validate_id("test", "../bad")
    with pytest.raises(HTTPException):
        validation.validate_id("test", "quiz.shuffle")


def test_validate_assessment_exists(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "DATA_DIR", tmp_path)
    with pytest.raises(HTTPException):
        validation.validate_assessment_exists("missing")

    payload = paths.payload_path("exists")
    payload.parent.mkdir(parents=True, exist_ok=True)
    payload.write_text("{}", encoding="utf-8")
    validation.validate_assessment_exists("exists")
