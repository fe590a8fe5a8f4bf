from __future__ import annotations

from typing import Iterable

from models import Field, FieldType, Page


def sort_fields(fields: Iterable[Field]) -> list[Field]:
    """Order fields by authoring position; ties keep their list position."""
    return sorted(fields, key=lambda item: item.order)


def segment_pages(fields: Iterable[Field]) -> list[Page]:
    """
    Split fields into pages at page-break markers.

    Every marker becomes a page of its own. Runs of content fields between
    markers become one page each; empty runs are not emitted.
    """
    pages: list[Page] = []
    run: list[Field] = []

    for item in sort_fields(fields):
        if item.type is FieldType.PAGE_BREAK:
            if run:
                pages.append(Page(run))
                run = []
            pages.append(Page([item]))
            continue
        run.append(item)

    if run:
        pages.append(Page(run))
    return pages


def content_pages(pages: Iterable[Page]) -> list[Page]:
    """Pages a respondent actually sees (markers dropped)."""
    return [page for page in pages if not page.is_break]
