from __future__ import annotations

import logging
import random
from typing import Iterable, Sequence, TypeVar

from models import AssessmentConfig, Field, Page, ShuffleResult
from segmenter import segment_pages, sort_fields

T = TypeVar("T")

logger = logging.getLogger(__name__)


def fisher_yates(items: Sequence[T], rng: random.Random) -> list[T]:
    """Return a uniformly shuffled copy of ``items``."""
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def shuffle_field_order(pages: Iterable[Page], rng: random.Random) -> list[str]:
    """Shuffle fields inside each content page; page breaks stay put."""
    order: list[str] = []
    for page in pages:
        if page.is_break:
            order.append(page.fields[0].id)
            continue
        order.extend(item.id for item in fisher_yates(page.fields, rng))
    return order


def shuffle_option_order(
    fields: Iterable[Field], rng: random.Random
) -> dict[str, list[int]]:
    """Build a display -> original option permutation per select field."""
    permutations: dict[str, list[int]] = {}
    for item in fields:
        if not item.type.is_select:
            continue
        if not isinstance(item.options, list) or not item.options:
            logger.debug("Field %s has no options, skipping", item.id)
            continue
        permutations[item.id] = fisher_yates(range(len(item.options)), rng)
    return permutations


def build_shuffle_result(
    fields: Sequence[Field],
    config: AssessmentConfig,
    rng: random.Random | None = None,
) -> ShuffleResult:
    """
    Compute a fresh shuffle for one respondent session.

    Callers are expected to memoize the result for the session; see
    ``session_store.compute_or_load_shuffle``.
    """
    if rng is None:
        rng = random.Random()

    pages = segment_pages(fields)
    if config.randomize_fields:
        display_order = shuffle_field_order(pages, rng)
    else:
        display_order = [item.id for page in pages for item in page.fields]

    permutations: dict[str, list[int]] = {}
    if config.shuffle_options:
        permutations = shuffle_option_order(sort_fields(fields), rng)

    return ShuffleResult(display_order, permutations)
