"""
Submission and SubmissionAnswer database models.

Answers are stored already resolved to original index space; the respondent's
shuffle permutation is never persisted here.
"""

from __future__ import annotations

import enum
import json
from datetime import datetime, timezone
from typing import Any

import sqlalchemy as sa
from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from delivery.database import Base


class SubmissionStatus(str, enum.Enum):
    """Status of a submission."""

    SUBMITTED = "submitted"
    MARKED = "marked"  # at least one answer was marked by hand


class Submission(Base):
    """One completed respondent session for an assessment."""

    __tablename__ = "submissions"

    # Primary key - UUID hex
    id: Mapped[str] = mapped_column(String(64), primary_key=True, index=True)

    assessment_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    client_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    respondent_name: Mapped[str | None] = mapped_column(String(200), nullable=True)

    started_at: Mapped[datetime | None] = mapped_column(
        sa.DateTime(timezone=True), nullable=True
    )
    submitted_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    status: Mapped[str] = mapped_column(
        String(20), default=SubmissionStatus.SUBMITTED.value, nullable=False
    )
    score: Mapped[float] = mapped_column(default=0, nullable=False)
    max_score: Mapped[float] = mapped_column(default=0, nullable=False)
    passing_score: Mapped[float | None] = mapped_column(nullable=True)

    answers: Mapped[list["SubmissionAnswer"]] = relationship(
        "SubmissionAnswer",
        back_populates="submission",
        cascade="all, delete-orphan",
        order_by="SubmissionAnswer.position",
    )

    @property
    def percentage(self) -> float:
        if not self.max_score:
            return 0.0
        return round(self.score / self.max_score * 100, 2)

    @property
    def passed(self) -> bool | None:
        if self.passing_score is None:
            return None
        return self.percentage >= self.passing_score

    def recalculate(self) -> None:
        """Refresh totals from the answer rows."""
        self.score = sum(answer.marks_awarded for answer in self.answers)
        self.max_score = sum(answer.max_marks for answer in self.answers)


class SubmissionAnswer(Base):
    """Graded response to a single field."""

    __tablename__ = "submission_answers"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    submission_id: Mapped[str] = mapped_column(
        ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False, index=True
    )

    field_id: Mapped[str] = mapped_column(String(64), nullable=False)
    position: Mapped[int] = mapped_column(nullable=False)  # order shown to respondent

    # Original index space for select fields, raw text for text fields
    selected_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    answer_text: Mapped[str | None] = mapped_column(Text, nullable=True)

    is_correct: Mapped[bool | None] = mapped_column(nullable=True)
    marks_awarded: Mapped[float] = mapped_column(default=0, nullable=False)
    max_marks: Mapped[float] = mapped_column(default=0, nullable=False)

    manually_graded: Mapped[bool] = mapped_column(default=False, nullable=False)
    feedback: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("submission_id", "field_id", name="uq_submission_field"),
    )

    submission: Mapped["Submission"] = relationship(
        "Submission", back_populates="answers"
    )

    @property
    def selected(self) -> list[int]:
        """Parse selected original indices from JSON."""
        if not self.selected_json:
            return []
        try:
            value = json.loads(self.selected_json)
        except (json.JSONDecodeError, TypeError):
            return []
        return value if isinstance(value, list) else []

    @selected.setter
    def selected(self, value: list[int] | None) -> None:
        self.selected_json = json.dumps(value) if value else None

    def response_value(self) -> Any:
        """Response in original index space, as grading expects it."""
        if self.answer_text is not None:
            return self.answer_text
        return self.selected
