"""
Document search — linear predicate filtering plus a single-key sort.

Filters apply in a fixed order: text query, equality filters, the inclusive
upload date range, tag membership. Sorting is stable, so documents that tie
on the sort key keep the order they had after filtering.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from buildoffice.documents.models import Document, DocumentSearchFilters

_SORT_KEYS: Dict[str, Callable[[Document], Any]] = {
    "name": lambda d: d.file_name.lower(),
    "uploaded_at": lambda d: _aware(d.uploaded_at),
    "file_size": lambda d: d.file_size,
    "category": lambda d: d.category.value,
}

_EQUALITY_FIELDS = ("category", "file_type", "status", "folder_id", "project_id", "uploaded_by")


def _aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _matches_query(document: Document, query: str) -> bool:
    needle = query.lower()
    return (
        needle in document.file_name.lower()
        or needle in document.original_name.lower()
        or (document.description is not None and needle in document.description.lower())
    )


def filter_documents(
    documents: List[Document],
    filters: Optional[DocumentSearchFilters] = None,
) -> List[Document]:
    """
    Apply ``filters`` to ``documents`` and return the matching list.

    With no filters (or an empty filter object) every document is returned
    in the order given.
    """
    result = list(documents)
    if filters is None:
        return result

    if filters.query:
        result = [d for d in result if _matches_query(d, filters.query)]

    for field in _EQUALITY_FIELDS:
        wanted = getattr(filters, field)
        if wanted is not None:
            result = [d for d in result if getattr(d, field) == wanted]

    if filters.date_from is not None:
        start = _aware(filters.date_from)
        result = [d for d in result if _aware(d.uploaded_at) >= start]

    if filters.date_to is not None:
        end = _aware(filters.date_to)
        result = [d for d in result if _aware(d.uploaded_at) <= end]

    if filters.tags:
        wanted_tags = set(filters.tags)
        result = [d for d in result if wanted_tags.intersection(d.tag_ids)]

    if filters.sort_by:
        result.sort(key=_SORT_KEYS[filters.sort_by], reverse=filters.sort_order == "desc")

    return result
