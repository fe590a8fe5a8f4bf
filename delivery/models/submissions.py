"""Submission marking Pydantic models."""
from pydantic import BaseModel, Field


class MarkAnswerRequest(BaseModel):
    """Manual marking of a single answer."""

    marksAwarded: float = Field(..., ge=0)
    isCorrect: bool | None = None
    feedback: str | None = None
