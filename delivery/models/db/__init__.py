"""Database models."""
from delivery.models.db.submission import Submission, SubmissionAnswer, SubmissionStatus

__all__ = [
    "Submission",
    "SubmissionAnswer",
    "SubmissionStatus",
]
