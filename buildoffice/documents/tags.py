"""Tag Service — flat tag catalogue plus attach/detach helpers."""

from __future__ import annotations

import logging
import re
from typing import Iterable, List

from buildoffice.documents.models import Document, Tag
from buildoffice.documents.repository import DocumentRepository
from buildoffice.engine.errors import ValidationError
from buildoffice.engine.logging import log, log_tag_event

logger = logging.getLogger("buildoffice.documents.tags")

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


class TagService:
    def __init__(self, repository: DocumentRepository):
        self._repo = repository

    def list(self) -> List[Tag]:
        return self._repo.list_tags()

    def create(self, name: str, color: str) -> Tag:
        errors = []
        if not name or not name.strip():
            errors.append({"field": "name", "error": "blank"})
        if not _HEX_COLOR.match(color or ""):
            errors.append({"field": "color", "error": f"not a hex color: {color!r}"})
        if errors:
            raise ValidationError("Invalid tag", validation_errors=errors)

        tag = self._repo.add_tag(Tag(name=name.strip(), color=color))
        logger.info(f"Created tag {tag.id} '{tag.name}'")
        log(log_tag_event("created", tag.id, tag.name))
        return tag


def attach_tags(document: Document, tag_ids: Iterable[int]) -> List[int]:
    """Union of the document's tag ids and ``tag_ids``, existing order first."""
    result = list(document.tag_ids)
    for tag_id in tag_ids:
        if tag_id not in result:
            result.append(tag_id)
    return result


def detach_tags(document: Document, tag_ids: Iterable[int]) -> List[int]:
    """The document's tag ids minus ``tag_ids``."""
    removed = set(tag_ids)
    return [t for t in document.tag_ids if t not in removed]
