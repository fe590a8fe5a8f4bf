import itertools

from grading import (
    accepted_texts,
    answer_key_from_selections,
    build_answer_key,
    grade_field,
    grade_submission,
    normalize_text,
)
from models import Field, FieldType, ShuffleResult
from remapper import display_options, to_display_index

CAPITALS = Field(
    "q1",
    FieldType.MULTIPLE_CHOICE,
    0,
    "Capital of France?",
    options=["Paris", "London", "Berlin", "Madrid"],
    correct_answers=[0],
)


def test_shuffled_choice_graded_in_original_space() -> None:
    result = ShuffleResult(["q1"], {"q1": [2, 0, 3, 1]})
    grade = grade_field(CAPITALS, 1, result)
    assert grade.is_correct
    assert grade.marks_awarded == 1
    assert grade.selected == [0]

    assert not grade_field(CAPITALS, 0, result).is_correct


def test_missing_permutation_grades_as_identity() -> None:
    field = Field("q1", FieldType.MULTIPLE_CHOICE, options=["A", "B", "C"], correct_answers=[1])
    assert grade_field(field, 1, ShuffleResult(["q1"])).is_correct
    assert grade_field(field, 1, None).is_correct


def test_grading_is_invariant_under_every_permutation() -> None:
    for permutation in itertools.permutations(range(4)):
        result = ShuffleResult(["q1"], {"q1": list(permutation)})
        for original in range(4):
            display_index = to_display_index(permutation, original)
            grade = grade_field(CAPITALS, display_index, result)
            assert grade.is_correct is (original == 0)
            assert grade.selected == [original]


def test_multi_select_requires_exact_set() -> None:
    field = Field(
        "q2",
        FieldType.CHECKBOXES,
        options=["2", "4", "5", "9"],
        correct_answers=[0, 2],
        marks=2,
    )
    for permutation in itertools.permutations(range(4)):
        result = ShuffleResult(["q2"], {"q2": list(permutation)})
        both = [to_display_index(permutation, 2), to_display_index(permutation, 0)]
        assert grade_field(field, both, result).marks_awarded == 2
        assert not grade_field(field, both[:1], result).is_correct
        extra = both + [to_display_index(permutation, 1)]
        assert not grade_field(field, extra, result).is_correct


def test_empty_selection_is_incorrect() -> None:
    assert not grade_field(CAPITALS, None, None).is_correct
    assert not grade_field(CAPITALS, [], None).is_correct


def test_text_answers_are_normalized() -> None:
    field = Field("t1", FieldType.SHORT_INPUT, accepted_answers=["Au", "Gold"], marks=3)
    assert normalize_text("  GoLd ") == "gold"
    assert grade_field(field, " au ", None).marks_awarded == 3
    assert grade_field(field, "gold", None).is_correct
    assert not grade_field(field, "silver", None).is_correct
    assert not grade_field(field, "   ", None).is_correct
    assert not grade_field(field, 1, None).is_correct


def test_accepted_texts_respect_marked_answers() -> None:
    field = Field("t1", FieldType.SHORT_INPUT, accepted_answers=["Au", "Gold"], correct_answers=[1])
    assert accepted_texts(field) == ["Gold"]
    assert not grade_field(field, "Au", None).is_correct


def test_fields_without_answer_key_are_not_graded(sample_fields) -> None:
    essay = Field("e1", FieldType.LONG_INPUT)
    assert grade_field(essay, "anything", None) is None
    info = next(item for item in sample_fields if item.id == "E")
    assert grade_field(info, None, None) is None


def test_grade_submission_totals(sample_fields) -> None:
    result = ShuffleResult(
        ["A", "B", "C", "PB", "D", "E"],
        {"A": [1, 0, 2], "B": [0, 1, 2, 3], "D": [2, 1, 0]},
    )
    responses = {"A": 0, "B": [0, 2], "C": "au", "D": 0}
    grade = grade_submission(sample_fields, responses, result, passing_score=60)
    assert [item.field_id for item in grade.grades] == ["A", "B", "C", "D"]
    assert grade.score == 4
    assert grade.max_score == 5
    assert grade.percentage == 80.0
    assert grade.passed is True


def test_passed_is_none_without_passing_score(sample_fields) -> None:
    grade = grade_submission(sample_fields, {}, None)
    assert grade.score == 0
    assert grade.passed is None


def test_answer_key_reports_display_positions() -> None:
    result = ShuffleResult(["q1"], {"q1": [2, 0, 3, 1]})
    [entry] = build_answer_key([CAPITALS], {"q1": 3}, result)
    assert entry.correct == ["Paris"]
    assert entry.selected == ["London"]
    assert entry.correct_display_indices == [1]
    assert entry.is_correct is False


def test_answer_key_from_resolved_selections(sample_fields) -> None:
    entries = answer_key_from_selections(sample_fields, {"A": [1], "C": "Au"})
    by_id = {entry.field_id: entry for entry in entries}
    assert by_id["A"].selected == ["Paris"]
    assert by_id["A"].correct_display_indices == [1]
    assert by_id["A"].is_correct
    assert by_id["C"].correct == ["Au"]
    assert by_id["C"].selected == ["Au"]
    assert by_id["B"].selected == []


def test_grading_matches_rendering_after_options_edited() -> None:
    edited = Field(
        "q1",
        FieldType.MULTIPLE_CHOICE,
        0,
        "Capital of France?",
        options=["Berlin", "Paris", "Madrid"],
        correct_answers=[1],
    )
    # permutation recorded while the field still had four options
    result = ShuffleResult(["q1"], {"q1": [2, 0, 3, 1]})
    shown = {text: display_index for display_index, _, text in display_options(edited, result)}

    grade = grade_field(edited, shown["Paris"], result)
    assert grade.is_correct
    assert grade.selected == [1]
    assert not grade_field(edited, shown["Madrid"], result).is_correct

    [entry] = build_answer_key([edited], {"q1": shown["Paris"]}, result)
    assert entry.correct_display_indices == [shown["Paris"]]
    assert entry.selected == ["Paris"]
    assert entry.is_correct
