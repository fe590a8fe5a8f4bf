"""Pydantic models."""
from delivery.models.assessments import (
    AssessmentCreate,
    AssessmentSettings,
    AssessmentUpdate,
    FieldCreate,
    FieldReorder,
    FieldUpdate,
)
from delivery.models.sessions import ResponsePayload, SessionStartRequest, SubmitRequest
from delivery.models.submissions import MarkAnswerRequest

__all__ = [
    "AssessmentCreate",
    "AssessmentSettings",
    "AssessmentUpdate",
    "FieldCreate",
    "FieldReorder",
    "FieldUpdate",
    "MarkAnswerRequest",
    "ResponsePayload",
    "SessionStartRequest",
    "SubmitRequest",
]
