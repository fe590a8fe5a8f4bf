"""Service layer for submissions using the SQL database."""
import uuid
from datetime import datetime
from typing import Any

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.orm import Session as DBSession, selectinload

from delivery.models.db.submission import Submission, SubmissionAnswer, SubmissionStatus
from delivery.utils import as_utc
from models import Field, SubmissionGrade


def record_submission(
    db: DBSession,
    assessment_id: str,
    client_id: str,
    fields: list[Field],
    grade: SubmissionGrade,
    responses: dict[str, Any],
    respondent_name: str | None = None,
    started_at: datetime | None = None,
) -> Submission:
    """
    Persist a graded submission.

    Args:
        db: Database session
        assessment_id: Assessment that was taken
        client_id: Respondent identifier
        fields: Fields in the order they were shown to the respondent
        grade: Grading outcome, already in original index space
        responses: Responses resolved to original index space
        respondent_name: Optional name entered by the respondent
        started_at: When the session was first started
    """
    submission = Submission(
        id=uuid.uuid4().hex,
        assessment_id=assessment_id,
        client_id=client_id,
        respondent_name=respondent_name,
        started_at=started_at,
        status=SubmissionStatus.SUBMITTED.value,
        passing_score=grade.passing_score,
    )
    grades = {item.field_id: item for item in grade.grades}

    for position, field in enumerate(fields):
        if not field.type.is_answerable:
            continue
        field_grade = grades.get(field.id)

        answer = SubmissionAnswer(
            field_id=field.id,
            position=position,
            marks_awarded=0,
            max_marks=0,
            manually_graded=False,
        )
        value = responses.get(field.id)
        if field.type.is_text:
            answer.answer_text = value if isinstance(value, str) else None
        elif isinstance(value, list):
            answer.selected = value

        if field_grade is not None:
            answer.is_correct = field_grade.is_correct
            answer.marks_awarded = field_grade.marks_awarded
            answer.max_marks = field_grade.max_marks
        elif field.type.is_text:
            # free text without accepted answers waits for manual marking
            answer.max_marks = field.marks
        submission.answers.append(answer)

    submission.recalculate()

    db.add(submission)
    db.commit()
    db.refresh(submission)
    return submission


def get_submission(db: DBSession, submission_id: str) -> Submission | None:
    """Get submission by ID with answers loaded."""
    return db.execute(
        select(Submission)
        .options(selectinload(Submission.answers))
        .where(Submission.id == submission_id)
    ).scalar_one_or_none()


def require_submission(db: DBSession, submission_id: str) -> Submission:
    submission = get_submission(db, submission_id)
    if submission is None:
        raise HTTPException(status_code=404, detail="Submission not found")
    return submission


def get_submissions_by_assessment(
    db: DBSession,
    assessment_id: str,
    status: str | None = None,
    limit: int = 100,
    offset: int = 0,
) -> list[Submission]:
    """Get submissions for an assessment, newest first."""
    query = select(Submission).where(Submission.assessment_id == assessment_id)

    if status:
        query = query.where(Submission.status == status)

    query = query.order_by(Submission.submitted_at.desc()).limit(limit).offset(offset)

    return list(db.execute(query).scalars().all())


def count_submissions(
    db: DBSession,
    assessment_id: str | None = None,
    client_id: str | None = None,
) -> int:
    """Count submissions matching criteria."""
    query = select(func.count(Submission.id))

    if assessment_id:
        query = query.where(Submission.assessment_id == assessment_id)
    if client_id:
        query = query.where(Submission.client_id == client_id)

    return db.execute(query).scalar() or 0


def mark_answer(
    db: DBSession,
    submission_id: str,
    field_id: str,
    marks_awarded: float,
    is_correct: bool | None = None,
    feedback: str | None = None,
) -> Submission:
    """Override the marks of one answer and refresh the submission totals."""
    submission = require_submission(db, submission_id)
    answer = next(
        (item for item in submission.answers if item.field_id == field_id), None
    )
    if answer is None:
        raise HTTPException(status_code=404, detail="Answer not found")

    if answer.max_marks and marks_awarded > answer.max_marks:
        raise HTTPException(status_code=400, detail="Marks exceed the field maximum")

    answer.marks_awarded = marks_awarded
    answer.is_correct = is_correct if is_correct is not None else marks_awarded > 0
    answer.feedback = feedback
    answer.manually_graded = True

    submission.recalculate()
    submission.status = SubmissionStatus.MARKED.value

    db.commit()
    db.refresh(submission)
    return submission


def delete_submission(db: DBSession, submission_id: str) -> bool:
    """Delete a submission and all its answers."""
    submission = db.get(Submission, submission_id)
    if not submission:
        return False

    db.delete(submission)
    db.commit()
    return True


def _isoformat(value: datetime | None) -> str | None:
    value = as_utc(value)
    return value.isoformat() if value else None


def serialize_submission(submission: Submission) -> dict[str, Any]:
    return {
        "id": submission.id,
        "assessmentId": submission.assessment_id,
        "clientId": submission.client_id,
        "respondentName": submission.respondent_name,
        "status": submission.status,
        "startedAt": _isoformat(submission.started_at),
        "submittedAt": _isoformat(submission.submitted_at),
        "score": submission.score,
        "maxScore": submission.max_score,
        "percentage": submission.percentage,
        "passed": submission.passed,
    }


def serialize_answers(submission: Submission) -> list[dict[str, Any]]:
    return [
        {
            "fieldId": answer.field_id,
            "position": answer.position,
            "selected": answer.selected,
            "answerText": answer.answer_text,
            "isCorrect": answer.is_correct,
            "marksAwarded": answer.marks_awarded,
            "maxMarks": answer.max_marks,
            "manuallyGraded": answer.manually_graded,
            "feedback": answer.feedback,
        }
        for answer in submission.answers
    ]
