"""Assessment- and field-related Pydantic models."""
from datetime import datetime

from pydantic import BaseModel, Field


class AssessmentSettings(BaseModel):
    """Delivery settings.

    Unset values keep their current value; an explicit null resets the
    setting to its default. An empty password removes password protection.
    """

    shuffleQuestions: bool | None = None
    shuffleOptions: bool | None = None
    showCorrectAnswers: bool | None = None
    showScoreImmediately: bool | None = None
    passingScore: float | None = Field(default=None, ge=0, le=100)
    allowMultipleAttempts: bool | None = None
    maxAttempts: int | None = Field(default=None, ge=1)
    timeLimit: int | None = Field(default=None, ge=1, description="Minutes")
    closeDate: datetime | None = None
    password: str | None = Field(default=None, max_length=72)


class AssessmentCreate(BaseModel):
    """Model for creating a new assessment."""

    title: str
    type: str = "test"
    settings: AssessmentSettings | None = None


class AssessmentUpdate(BaseModel):
    """Model for updating assessment metadata and settings."""

    title: str | None = None
    settings: AssessmentSettings | None = None


class FieldCreate(BaseModel):
    """Model for adding a field. The id is assigned by the server."""

    type: str
    label: str = ""
    order: int | None = None
    options: list[str] = []
    correctAnswers: list[int] = []
    acceptedAnswers: list[str] = []
    marks: float = Field(default=1, ge=0)
    required: bool = False


class FieldUpdate(BaseModel):
    """Model for updating a field; the type and id never change."""

    label: str | None = None
    order: int | None = None
    options: list[str] | None = None
    correctAnswers: list[int] | None = None
    acceptedAnswers: list[str] | None = None
    marks: float | None = Field(default=None, ge=0)
    required: bool | None = None


class FieldReorder(BaseModel):
    """New authoring order as a list of field ids."""

    fieldIds: list[str] = Field(..., min_length=1)
