"""Grading and answer-key rendering in original index space."""
from __future__ import annotations

import logging
from typing import Iterable, Mapping

from models import AnswerKeyEntry, Field, FieldGrade, ShuffleResult, SubmissionGrade
from remapper import field_permutation, resolve_selection, to_display_index
from segmenter import sort_fields

logger = logging.getLogger(__name__)


def normalize_text(value: str) -> str:
    return value.strip().casefold()


def accepted_texts(field: Field) -> list[str]:
    """Accepted answers for a text field (all of them if none are marked)."""
    if not field.correct_answers:
        return list(field.accepted_answers)
    return [
        field.accepted_answers[index]
        for index in field.correct_answers
        if 0 <= index < len(field.accepted_answers)
    ]


def grade_field(
    field: Field, value: object, result: ShuffleResult | None
) -> FieldGrade | None:
    """Grade one response. Returns None for fields without an answer key."""
    if not field.is_gradable:
        return None

    max_marks = field.marks
    if field.type.is_text:
        if not isinstance(value, str):
            return FieldGrade(field.id, False, 0, max_marks)
        answer = normalize_text(value)
        is_correct = bool(answer) and any(
            answer == normalize_text(text) for text in accepted_texts(field)
        )
        return FieldGrade(field.id, is_correct, max_marks if is_correct else 0, max_marks)

    selected = resolve_selection(field, result, value)
    if not field.type.is_multi_select and len(selected) > 1:
        logger.debug("Field %s got %d selections for a single choice", field.id, len(selected))
    is_correct = bool(selected) and set(selected) == set(field.correct_answers)
    return FieldGrade(
        field.id,
        is_correct,
        max_marks if is_correct else 0,
        max_marks,
        selected=selected,
    )


def grade_submission(
    fields: Iterable[Field],
    responses: Mapping[str, object],
    result: ShuffleResult | None,
    passing_score: float | None = None,
) -> SubmissionGrade:
    grades = []
    for item in sort_fields(fields):
        grade = grade_field(item, responses.get(item.id), result)
        if grade is not None:
            grades.append(grade)
    return SubmissionGrade(grades, passing_score)


def _option_texts(field: Field, indices: Iterable[int]) -> list[str]:
    return [field.options[index] for index in indices if 0 <= index < len(field.options)]


def build_answer_key(
    fields: Iterable[Field],
    responses: Mapping[str, object],
    result: ShuffleResult | None,
) -> list[AnswerKeyEntry]:
    entries: list[AnswerKeyEntry] = []
    for item in sort_fields(fields):
        if not item.is_gradable:
            continue
        value = responses.get(item.id)
        grade = grade_field(item, value, result)
        is_correct = bool(grade and grade.is_correct)

        if item.type.is_text:
            selected = [value] if isinstance(value, str) and value.strip() else []
            entries.append(
                AnswerKeyEntry(item.id, item.label, accepted_texts(item), selected, is_correct=is_correct)
            )
            continue

        permutation = field_permutation(result, item)
        entries.append(
            AnswerKeyEntry(
                item.id,
                item.label,
                correct=_option_texts(item, item.correct_answers),
                selected=_option_texts(item, resolve_selection(item, result, value)),
                correct_display_indices=[
                    to_display_index(permutation, index) for index in item.correct_answers
                ],
                is_correct=is_correct,
            )
        )
    return entries


def answer_key_from_selections(
    fields: Iterable[Field],
    selections: Mapping[str, object],
) -> list[AnswerKeyEntry]:
    """Answer key for responses already resolved to original index space."""
    return build_answer_key(fields, selections, None)
