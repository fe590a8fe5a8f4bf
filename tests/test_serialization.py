import pytest

from models import FieldType, ShuffleResult
from serialization import (
    config_from_settings,
    field_from_payload,
    field_to_payload,
    fields_from_payload,
    shuffle_result_from_dict,
    shuffle_result_to_dict,
)


def test_field_from_payload_reads_camel_case_keys() -> None:
    field = field_from_payload(
        {
            "id": "q1",
            "type": "checkboxes",
            "label": "Pick primes",
            "options": ["2", "4", "5"],
            "correctAnswers": [0, 2],
            "marks": 2,
            "required": True,
        },
        position=3,
    )
    assert field.type is FieldType.CHECKBOXES
    assert field.order == 3
    assert field.correct_answers == [0, 2]
    assert field.marks == 2
    assert field.required is True
    assert field_to_payload(field)["correctAnswers"] == [0, 2]


def test_field_from_payload_rejects_bad_input() -> None:
    with pytest.raises(ValueError):
        field_from_payload({"type": "shortInput"})
    with pytest.raises(ValueError):
        field_from_payload({"id": "q1", "type": "slider"})


def test_field_from_payload_defaults_invalid_marks() -> None:
    assert field_from_payload({"id": "q1", "type": "shortInput", "marks": -4}).marks == 1
    assert field_from_payload({"id": "q1", "type": "shortInput", "marks": True}).marks == 1


def test_fields_from_payload_skips_non_objects() -> None:
    fields = fields_from_payload({"fields": [{"id": "a", "type": "infoBlock"}, "junk"]})
    assert [item.id for item in fields] == ["a"]
    with pytest.raises(ValueError):
        fields_from_payload({"fields": "nope"})


def test_config_from_settings() -> None:
    config = config_from_settings({"shuffleQuestions": True})
    assert config.randomize_fields and not config.shuffle_options
    assert not config_from_settings(None).enabled


def test_shuffle_result_decodes_persisted_form() -> None:
    result = ShuffleResult(["b", "a"], {"a": [1, 0, 2]})
    data = shuffle_result_to_dict(result)
    assert data == {"fieldDisplayOrder": ["b", "a"], "optionPermutation": {"a": [1, 0, 2]}}
    assert shuffle_result_from_dict(data) == result


@pytest.mark.parametrize(
    "data",
    [
        None,
        {"fieldDisplayOrder": "a"},
        {"fieldDisplayOrder": ["a", "a"]},
        {"fieldDisplayOrder": ["a"], "optionPermutation": []},
        {"fieldDisplayOrder": ["a"], "optionPermutation": {"a": [0, 0]}},
        {"fieldDisplayOrder": ["a"], "optionPermutation": {"a": [0, 2]}},
        {"fieldDisplayOrder": ["a"], "optionPermutation": {"a": [0, "1"]}},
    ],
)
def test_shuffle_result_rejects_malformed_data(data) -> None:
    with pytest.raises(ValueError):
        shuffle_result_from_dict(data)
