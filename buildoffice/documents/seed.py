"""
Default document-management data: the standard tag palette and folder tree.

Seeding is idempotent: tags are matched by name and folders by path, so
running it twice adds nothing the second time.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from buildoffice.documents.folders import FolderService
from buildoffice.documents.repository import DocumentRepository
from buildoffice.documents.tags import TagService
from buildoffice.engine.logging import log, log_system_event

logger = logging.getLogger("buildoffice.documents.seed")

DEFAULT_TAGS: List[Tuple[str, str]] = [
    ("Important", "#ef4444"),
    ("Contract", "#3b82f6"),
    ("Technical", "#10b981"),
    ("Financial", "#f59e0b"),
    ("Legal", "#8b5cf6"),
    ("Draft", "#6b7280"),
    ("Approved", "#059669"),
    ("Review", "#dc2626"),
]

# (name, parent name or None), parents listed before their children
DEFAULT_FOLDERS: List[Tuple[str, Optional[str]]] = [
    ("Projects", None),
    ("Water Treatment Plant", "Projects"),
    ("Sewerage System Upgrade", "Projects"),
    ("Contracts", None),
    ("Supplier Contracts", "Contracts"),
    ("Client Contracts", "Contracts"),
    ("Financial Documents", None),
    ("Technical Drawings", None),
]


def seed_defaults(repository: DocumentRepository) -> Dict[str, int]:
    """Create missing default tags and folders. Returns how many of each were added."""
    tags = TagService(repository)
    folders = FolderService(repository)

    existing_tags = {t.name for t in tags.list()}
    tags_added = 0
    for name, color in DEFAULT_TAGS:
        if name not in existing_tags:
            tags.create(name, color)
            tags_added += 1

    by_path = {f.path: f for f in folders.list()}
    folders_added = 0
    for name, parent_name in DEFAULT_FOLDERS:
        parent_path = f"/{parent_name}" if parent_name else ""
        path = f"{parent_path}/{name}"
        if path in by_path:
            continue
        parent = by_path.get(parent_path) if parent_name else None
        folder = folders.create(name, parent.id if parent else None)
        by_path[folder.path] = folder
        folders_added += 1

    result = {"tags": tags_added, "folders": folders_added}
    logger.info(f"Seeded defaults: {tags_added} tags, {folders_added} folders")
    log(log_system_event("seed_defaults", details=result))
    return result
