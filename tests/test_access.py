from datetime import datetime, timedelta, timezone

import pytest
from fastapi import HTTPException

from delivery.config import TIME_LIMIT_GRACE_SECONDS
from delivery.services import access_service

START = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def test_password_hash_round_trip() -> None:
    hashed = access_service.hash_password("open sesame")
    assert hashed != "open sesame"
    assert access_service.verify_password("open sesame", hashed)
    assert not access_service.verify_password("guess", hashed)


def test_unusable_hash_rejects_password() -> None:
    assert not access_service.verify_password("open sesame", "not-a-hash")


def test_overlong_password_is_rejected() -> None:
    with pytest.raises(HTTPException) as exc_info:
        access_service.hash_password("é" * 40)
    assert exc_info.value.status_code == 400


def test_check_password() -> None:
    settings = {"passwordHash": access_service.hash_password("secret")}
    access_service.check_password(settings, "secret")
    access_service.check_password({"passwordHash": None}, None)
    for attempt in (None, "", "wrong"):
        with pytest.raises(HTTPException) as exc_info:
            access_service.check_password(settings, attempt)
        assert exc_info.value.status_code == 403


def test_parse_datetime() -> None:
    assert access_service.parse_datetime("2024-03-01T09:00:00Z") == START
    assert access_service.parse_datetime("2024-03-01T09:00:00") == START
    assert access_service.parse_datetime("yesterday") is None
    assert access_service.parse_datetime(None) is None


def test_check_open() -> None:
    settings = {"closeDate": "2024-03-01T09:00:00+00:00"}
    access_service.check_open(settings, START - timedelta(seconds=1))
    access_service.check_open({"closeDate": None}, START)
    with pytest.raises(HTTPException) as exc_info:
        access_service.check_open(settings, START)
    assert exc_info.value.status_code == 409


def test_session_deadline() -> None:
    assert access_service.session_deadline({"timeLimit": 20}, START) == START + timedelta(minutes=20)
    assert access_service.session_deadline({"timeLimit": None}, START) is None
    assert access_service.session_deadline({"timeLimit": True}, START) is None
    assert access_service.session_deadline({"timeLimit": 20}, None) is None


def test_check_time_left_allows_grace() -> None:
    settings = {"timeLimit": 1}
    deadline = START + timedelta(minutes=1)
    access_service.check_time_left(settings, START, deadline + timedelta(seconds=TIME_LIMIT_GRACE_SECONDS))
    with pytest.raises(HTTPException) as exc_info:
        access_service.check_time_left(
            settings, START, deadline + timedelta(seconds=TIME_LIMIT_GRACE_SECONDS + 1)
        )
    assert exc_info.value.status_code == 409
