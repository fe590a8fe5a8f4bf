from __future__ import annotations

from typing import Any, Iterable

from models import AnswerKeyEntry, AssessmentConfig, Field, FieldGrade, FieldType, ShuffleResult


def _int_list(value: object) -> list[int]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, int) and not isinstance(item, bool)]


def _str_list(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value]


def field_from_payload(payload: dict[str, Any], position: int = 0) -> Field:
    """Build a Field from its JSON payload. Raises ValueError on bad input."""
    field_id = payload.get("id")
    if not isinstance(field_id, str) or not field_id:
        raise ValueError("Field id is required")
    field_type = FieldType(payload.get("type"))

    order = payload.get("order", position)
    if not isinstance(order, int) or isinstance(order, bool):
        order = position

    marks = payload.get("marks", 1)
    if isinstance(marks, bool) or not isinstance(marks, (int, float)) or marks < 0:
        marks = 1

    return Field(
        id=field_id,
        type=field_type,
        order=order,
        label=str(payload.get("label", "")),
        options=_str_list(payload.get("options")),
        correct_answers=_int_list(payload.get("correctAnswers")),
        accepted_answers=_str_list(payload.get("acceptedAnswers")),
        marks=marks,
        required=bool(payload.get("required", False)),
    )


def field_to_payload(field: Field) -> dict[str, Any]:
    return {
        "id": field.id,
        "type": field.type.value,
        "order": field.order,
        "label": field.label,
        "options": list(field.options),
        "correctAnswers": list(field.correct_answers),
        "acceptedAnswers": list(field.accepted_answers),
        "marks": field.marks,
        "required": field.required,
    }


def fields_from_payload(payload: dict[str, Any]) -> list[Field]:
    raw_fields = payload.get("fields", [])
    if not isinstance(raw_fields, list):
        raise ValueError("Invalid assessment payload")
    return [
        field_from_payload(item, position)
        for position, item in enumerate(raw_fields)
        if isinstance(item, dict)
    ]


def config_from_settings(settings: object) -> AssessmentConfig:
    if not isinstance(settings, dict):
        return AssessmentConfig()
    return AssessmentConfig(
        randomize_fields=bool(settings.get("shuffleQuestions", False)),
        shuffle_options=bool(settings.get("shuffleOptions", False)),
    )


def shuffle_result_to_dict(result: ShuffleResult) -> dict[str, Any]:
    return {
        "fieldDisplayOrder": list(result.field_display_order),
        "optionPermutation": {
            field_id: list(permutation)
            for field_id, permutation in result.option_permutation.items()
        },
    }


def shuffle_result_from_dict(data: object) -> ShuffleResult:
    """Decode a persisted shuffle result. Raises ValueError when malformed."""
    if not isinstance(data, dict):
        raise ValueError("Shuffle result must be an object")

    order = data.get("fieldDisplayOrder")
    if not isinstance(order, list) or not all(isinstance(item, str) for item in order):
        raise ValueError("fieldDisplayOrder must be a list of field ids")
    if len(set(order)) != len(order):
        raise ValueError("fieldDisplayOrder contains duplicates")

    raw_permutations = data.get("optionPermutation", {})
    if not isinstance(raw_permutations, dict):
        raise ValueError("optionPermutation must be an object")

    permutations: dict[str, list[int]] = {}
    for field_id, permutation in raw_permutations.items():
        indices = _int_list(permutation)
        if not isinstance(permutation, list) or len(indices) != len(permutation):
            raise ValueError(f"Invalid permutation for field {field_id}")
        if sorted(indices) != list(range(len(indices))):
            raise ValueError(f"Invalid permutation for field {field_id}")
        permutations[str(field_id)] = indices

    return ShuffleResult(list(order), permutations)


def field_grade_to_dict(grade: FieldGrade) -> dict[str, Any]:
    return {
        "fieldId": grade.field_id,
        "isCorrect": grade.is_correct,
        "marksAwarded": grade.marks_awarded,
        "maxMarks": grade.max_marks,
    }


def answer_key_to_payload(entries: Iterable[AnswerKeyEntry]) -> list[dict[str, Any]]:
    return [
        {
            "fieldId": entry.field_id,
            "label": entry.label,
            "correct": entry.correct,
            "selected": entry.selected,
            "correctDisplayIndices": entry.correct_display_indices,
            "isCorrect": entry.is_correct,
        }
        for entry in entries
    ]
