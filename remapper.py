"""
Translation between display index space and original index space.

Responses are captured in display space (the position a respondent clicked).
The answer key lives in original space (the authoring-time option position).
A permutation maps display -> original by construction:
``permutation[display_index] == original_index``.

Every lookup falls back to the identity mapping when the permutation is
missing or stale (its indices no longer cover the field's options).
Out-of-range indices map to themselves, so code paths shared with
non-randomized assessments never raise.
"""
from __future__ import annotations

from typing import Iterable, Sequence

from models import Field, ShuffleResult
from segmenter import sort_fields


def field_permutation(
    result: ShuffleResult | None, field: Field
) -> list[int] | None:
    """The field's option permutation, or None when it no longer fits.

    A permutation stored before the author edited the option list is
    ignored, so rendering, grading and the answer key all fall back to
    identity order together.
    """
    if result is None:
        return None
    permutation = result.option_permutation.get(field.id)
    if permutation is None:
        return None
    if sorted(permutation) != list(range(len(field.options))):
        return None
    return permutation


def to_original_index(permutation: Sequence[int] | None, display_index: int) -> int:
    if permutation is None or not 0 <= display_index < len(permutation):
        return display_index
    return permutation[display_index]


def to_display_index(permutation: Sequence[int] | None, original_index: int) -> int:
    if permutation is None:
        return original_index
    for display_index, candidate in enumerate(permutation):
        if candidate == original_index:
            return display_index
    return original_index


def _selection_indices(value: object) -> list[int]:
    if isinstance(value, bool):
        return []
    if isinstance(value, int):
        return [value]
    if isinstance(value, list):
        return [
            item for item in value if isinstance(item, int) and not isinstance(item, bool)
        ]
    return []


def resolve_selection(
    field: Field, result: ShuffleResult | None, value: object
) -> list[int]:
    """Map a stored select response to original indices, de-duplicated."""
    permutation = field_permutation(result, field)
    resolved: list[int] = []
    for display_index in _selection_indices(value):
        original = to_original_index(permutation, display_index)
        if original not in resolved:
            resolved.append(original)
    return resolved


def display_options(
    field: Field, result: ShuffleResult | None
) -> list[tuple[int, int, str]]:
    """Options in the order a respondent sees them.

    Returns ``(display_index, original_index, text)`` triples.
    """
    permutation = field_permutation(result, field)
    if permutation is None:
        permutation = list(range(len(field.options)))
    return [
        (display_index, original, field.options[original])
        for display_index, original in enumerate(permutation)
    ]


def ordered_fields(
    fields: Iterable[Field], result: ShuffleResult | None
) -> list[Field]:
    """Fields in session display order.

    Ids the result does not know (added after the session shuffled) are
    appended in authoring order; ids that no longer exist are skipped.
    """
    by_id = {item.id: item for item in fields}
    if result is None:
        return sort_fields(by_id.values())

    ordered: list[Field] = []
    seen: set[str] = set()
    for field_id in result.field_display_order:
        item = by_id.get(field_id)
        if item is None or field_id in seen:
            continue
        ordered.append(item)
        seen.add(field_id)

    ordered.extend(
        item for item in sort_fields(by_id.values()) if item.id not in seen
    )
    return ordered
