from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Dict


class FieldType(str, enum.Enum):
    """Field variants an assessment can contain."""

    SHORT_INPUT = "shortInput"
    LONG_INPUT = "longInput"
    MULTIPLE_CHOICE = "multipleChoice"
    CHECKBOXES = "checkboxes"
    DROPDOWN = "dropdown"
    IMAGE_CHOICE = "imageChoice"
    PAGE_BREAK = "pageBreak"
    INFO_BLOCK = "infoBlock"

    @property
    def is_select(self) -> bool:
        match self:
            case (
                FieldType.MULTIPLE_CHOICE
                | FieldType.CHECKBOXES
                | FieldType.DROPDOWN
                | FieldType.IMAGE_CHOICE
            ):
                return True
            case (
                FieldType.SHORT_INPUT
                | FieldType.LONG_INPUT
                | FieldType.PAGE_BREAK
                | FieldType.INFO_BLOCK
            ):
                return False
        raise ValueError(f"Unhandled field type: {self!r}")

    @property
    def is_text(self) -> bool:
        match self:
            case FieldType.SHORT_INPUT | FieldType.LONG_INPUT:
                return True
            case (
                FieldType.MULTIPLE_CHOICE
                | FieldType.CHECKBOXES
                | FieldType.DROPDOWN
                | FieldType.IMAGE_CHOICE
                | FieldType.PAGE_BREAK
                | FieldType.INFO_BLOCK
            ):
                return False
        raise ValueError(f"Unhandled field type: {self!r}")

    @property
    def is_answerable(self) -> bool:
        return self.is_select or self.is_text

    @property
    def is_multi_select(self) -> bool:
        match self:
            case FieldType.CHECKBOXES:
                return True
            case (
                FieldType.SHORT_INPUT
                | FieldType.LONG_INPUT
                | FieldType.MULTIPLE_CHOICE
                | FieldType.DROPDOWN
                | FieldType.IMAGE_CHOICE
                | FieldType.PAGE_BREAK
                | FieldType.INFO_BLOCK
            ):
                return False
        raise ValueError(f"Unhandled field type: {self!r}")


@dataclass
class Field:
    id: str
    type: FieldType
    order: int = 0
    label: str = ""
    options: List[str] = field(default_factory=list)
    # original option indices (select) or indices into accepted_answers (text)
    correct_answers: List[int] = field(default_factory=list)
    accepted_answers: List[str] = field(default_factory=list)
    marks: float = 1
    required: bool = False

    @property
    def is_gradable(self) -> bool:
        if self.type.is_select:
            return bool(self.correct_answers)
        if self.type.is_text:
            return bool(self.accepted_answers)
        return False


@dataclass
class AssessmentConfig:
    randomize_fields: bool = False
    shuffle_options: bool = False

    @property
    def enabled(self) -> bool:
        return self.randomize_fields or self.shuffle_options


@dataclass
class ShuffleResult:
    field_display_order: List[str]
    # field id -> original option index shown at each display position
    option_permutation: Dict[str, List[int]] = field(default_factory=dict)

    @classmethod
    def identity(cls, fields: List[Field]) -> ShuffleResult:
        from segmenter import sort_fields

        return cls([item.id for item in sort_fields(fields)], {})


@dataclass
class Page:
    fields: List[Field]

    @property
    def is_break(self) -> bool:
        return len(self.fields) == 1 and self.fields[0].type is FieldType.PAGE_BREAK


@dataclass
class FieldGrade:
    field_id: str
    is_correct: bool
    marks_awarded: float
    max_marks: float
    selected: List[int] = field(default_factory=list)  # original index space


@dataclass
class SubmissionGrade:
    grades: List[FieldGrade]
    passing_score: float | None = None

    @property
    def score(self) -> float:
        return sum(grade.marks_awarded for grade in self.grades)

    @property
    def max_score(self) -> float:
        return sum(grade.max_marks for grade in self.grades)

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


@dataclass
class AnswerKeyEntry:
    field_id: str
    label: str
    correct: List[str]
    selected: List[str]
    # display positions holding a correct option, for highlighting
    correct_display_indices: List[int] = field(default_factory=list)
    is_correct: bool = False
