import pytest

from models import FieldType


@pytest.mark.parametrize("field_type", list(FieldType))
def test_every_field_type_is_classified(field_type: FieldType) -> None:
    assert not (field_type.is_select and field_type.is_text)
    if field_type.is_multi_select:
        assert field_type.is_select
    assert field_type.is_answerable == (field_type.is_select or field_type.is_text)


def test_field_type_classification() -> None:
    assert [item for item in FieldType if item.is_multi_select] == [FieldType.CHECKBOXES]
    assert {item for item in FieldType if item.is_text} == {
        FieldType.SHORT_INPUT,
        FieldType.LONG_INPUT,
    }
    assert not FieldType.PAGE_BREAK.is_answerable
    assert not FieldType.INFO_BLOCK.is_answerable
