"""Respondent session endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session as DbSession

from delivery.database import get_db
from delivery.models import ResponsePayload, SessionStartRequest, SubmitRequest
from delivery.services import session_service
from delivery.utils import validate_assessment_exists, validate_id

router = APIRouter(
    prefix="/api/assessments/{assessment_id}/sessions/{client_id}",
    tags=["sessions"],
)


def _validated(assessment_id: str, client_id: str) -> tuple[str, str]:
    assessment_id = validate_id("assessmentId", assessment_id)
    client_id = validate_id("clientId", client_id)
    validate_assessment_exists(assessment_id)
    return assessment_id, client_id


@router.post("")
def start_session(
    assessment_id: str,
    client_id: str,
    db: Annotated[DbSession, Depends(get_db)],
    payload: SessionStartRequest | None = None,
) -> dict[str, object]:
    """Start or resume a session and return its pages in display order."""
    assessment_id, client_id = _validated(assessment_id, client_id)
    respondent_name = payload.respondentName if payload else None
    password = payload.password if payload else None
    return session_service.start_session(
        db, assessment_id, client_id, respondent_name, password=password
    )


@router.put("/responses/{field_id}")
def record_response(
    assessment_id: str,
    client_id: str,
    field_id: str,
    payload: ResponsePayload,
) -> dict[str, object]:
    """Record the display-space response for one field."""
    assessment_id, client_id = _validated(assessment_id, client_id)
    return session_service.record_response(assessment_id, client_id, field_id, payload.value)


@router.post("/submit")
def submit_session(
    assessment_id: str,
    client_id: str,
    payload: SubmitRequest,
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, object]:
    """Grade and record the session, then clear it."""
    assessment_id, client_id = _validated(assessment_id, client_id)
    return session_service.submit_session(
        db,
        assessment_id,
        client_id,
        extra_responses=payload.responses,
        respondent_name=payload.respondentName,
    )


@router.delete("")
def clear_session(assessment_id: str, client_id: str) -> dict[str, str]:
    """Discard the session's shuffle and responses."""
    assessment_id, client_id = _validated(assessment_id, client_id)
    session_service.discard_session(assessment_id, client_id)
    return {"status": "cleared"}
