"""Service layer for assessment statistics."""
from sqlalchemy import select
from sqlalchemy.orm import Session as DBSession

from delivery.models.db.submission import Submission, SubmissionAnswer, SubmissionStatus

# Lower bound (percentage) for each letter grade, highest first
GRADE_BOUNDARIES = [("A", 90), ("B", 80), ("C", 70), ("D", 60), ("F", 0)]


def letter_grade(percentage: float) -> str:
    """Map a percentage to a letter grade."""
    for letter, lower in GRADE_BOUNDARIES:
        if percentage >= lower:
            return letter
    return "F"


def grade_distribution(percentages: list[float]) -> dict[str, int]:
    distribution = {letter: 0 for letter, _ in GRADE_BOUNDARIES}
    for percentage in percentages:
        distribution[letter_grade(percentage)] += 1
    return distribution


def field_statistics(db: DBSession, assessment_id: str) -> list[dict[str, object]]:
    """Correct rate per auto- or hand-graded field, sorted by field id."""
    rows = db.execute(
        select(SubmissionAnswer.field_id, SubmissionAnswer.is_correct)
        .join(Submission, Submission.id == SubmissionAnswer.submission_id)
        .where(
            Submission.assessment_id == assessment_id,
            SubmissionAnswer.is_correct.is_not(None),
        )
    ).all()

    totals: dict[str, list[int]] = {}
    for field_id, is_correct in rows:
        counts = totals.setdefault(field_id, [0, 0])
        counts[1] += 1
        if is_correct:
            counts[0] += 1

    return [
        {
            "fieldId": field_id,
            "correct": correct,
            "graded": graded,
            "correctRate": round(correct / graded * 100, 2) if graded else 0.0,
        }
        for field_id, (correct, graded) in sorted(totals.items())
    ]


def assessment_statistics(db: DBSession, assessment_id: str) -> dict[str, object]:
    """Aggregate statistics for all submissions of an assessment."""
    submissions = list(
        db.execute(
            select(Submission).where(Submission.assessment_id == assessment_id)
        ).scalars().all()
    )
    percentages = [submission.percentage for submission in submissions]
    passed = [submission.passed for submission in submissions if submission.passed is not None]

    return {
        "assessmentId": assessment_id,
        "totalSubmissions": len(submissions),
        "markedSubmissions": sum(1 for item in submissions if item.status == SubmissionStatus.MARKED.value),
        "averageScore": round(sum(item.score for item in submissions) / len(submissions), 2)
        if submissions
        else None,
        "averagePercentage": round(sum(percentages) / len(percentages), 2)
        if percentages
        else None,
        "passRate": round(sum(1 for item in passed if item) / len(passed) * 100, 2)
        if passed
        else None,
        "gradeDistribution": grade_distribution(percentages),
        "fields": field_statistics(db, assessment_id),
    }
