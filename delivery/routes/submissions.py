"""Submission review and marking endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session as DbSession

from delivery.database import get_db
from delivery.models import MarkAnswerRequest
from delivery.services import submission_service
from delivery.services.assessment_service import load_assessment_payload, load_fields
from delivery.utils import payload_path, validate_id
from grading import answer_key_from_selections
from serialization import answer_key_to_payload

router = APIRouter(prefix="/api/submissions", tags=["submissions"])


@router.get("")
def list_submissions(
    db: Annotated[DbSession, Depends(get_db)],
    assessment_id: str = Query(..., alias="assessmentId"),
    status: str | None = Query(None),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> dict[str, object]:
    """List submissions of an assessment, newest first."""
    assessment_id = validate_id("assessmentId", assessment_id)
    submissions = submission_service.get_submissions_by_assessment(
        db, assessment_id, status=status, limit=limit, offset=offset
    )
    return {
        "total": submission_service.count_submissions(db, assessment_id=assessment_id),
        "submissions": [
            submission_service.serialize_submission(item) for item in submissions
        ],
    }


@router.get("/{submission_id}")
def get_submission(
    submission_id: str,
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, object]:
    """Get a submission with its answers and the answer key."""
    submission = submission_service.require_submission(db, submission_id)
    result = submission_service.serialize_submission(submission)
    result["answers"] = submission_service.serialize_answers(submission)

    # the definition may have been deleted since the submission was recorded
    if payload_path(submission.assessment_id).exists():
        fields = load_fields(load_assessment_payload(submission.assessment_id))
        selections = {
            answer.field_id: answer.response_value() for answer in submission.answers
        }
        result["answerKey"] = answer_key_to_payload(
            answer_key_from_selections(fields, selections)
        )
    return result


@router.patch("/{submission_id}/answers/{field_id}")
def mark_answer(
    submission_id: str,
    field_id: str,
    payload: MarkAnswerRequest,
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, object]:
    """Override the marks for one answer."""
    submission = submission_service.mark_answer(
        db,
        submission_id,
        field_id,
        payload.marksAwarded,
        is_correct=payload.isCorrect,
        feedback=payload.feedback,
    )
    result = submission_service.serialize_submission(submission)
    result["answers"] = submission_service.serialize_answers(submission)
    return result


@router.delete("/{submission_id}")
def delete_submission(
    submission_id: str,
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, str]:
    """Delete a submission."""
    if not submission_service.delete_submission(db, submission_id):
        raise HTTPException(status_code=404, detail="Submission not found")
    return {"status": "deleted"}
