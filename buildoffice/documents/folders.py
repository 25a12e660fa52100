"""
Folder Service — folder tree create / rename / move / delete.

Paths are materialized: "/" + ancestor names + own name. A rename or move
recomputes the path of the folder and every descendant in one save.

Delete guards, checked in this order:
1. any document still references the folder -> FolderNotEmptyError
2. any folder has it as parent                -> FolderNotEmptyError
3. the folder does not exist                  -> NotFoundError
"""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from datetime import datetime, timezone
from typing import Dict, List, Optional

from buildoffice.documents.models import Folder, FolderUpdate
from buildoffice.documents.repository import DocumentRepository
from buildoffice.engine.errors import FolderNotEmptyError, NotFoundError, ValidationError
from buildoffice.engine.logging import log, log_folder_event

logger = logging.getLogger("buildoffice.documents.folders")


def build_path(name: str, parent: Optional[Folder]) -> str:
    parent_path = parent.path if parent else ""
    return f"{parent_path}/{name}"


def _folder_not_found(folder_id: Optional[int]) -> NotFoundError:
    return NotFoundError("Folder not found", record_type="folder", record_id=folder_id)


def _validate_name(name: str) -> str:
    stripped = name.strip()
    if not stripped:
        raise ValidationError(
            "Folder name is required",
            validation_errors=[{"field": "name", "error": "blank"}],
        )
    if "/" in stripped:
        raise ValidationError(
            "Folder name cannot contain '/'",
            validation_errors=[{"field": "name", "error": "contains path separator"}],
        )
    return stripped


class FolderService:
    """Folder tree operations over a DocumentRepository."""

    def __init__(self, repository: DocumentRepository):
        self._repo = repository

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------

    def list(self) -> List[Folder]:
        """All folders with ``document_count`` populated."""
        counts = Counter(
            d.folder_id for d in self._repo.list_documents() if d.folder_id is not None
        )
        folders = self._repo.list_folders()
        for folder in folders:
            folder.document_count = counts.get(folder.id, 0)
        return folders

    def get(self, folder_id: int) -> Optional[Folder]:
        return self._repo.get_folder(folder_id)

    def tree(self) -> List[Folder]:
        """Root folders with ``children`` nested recursively, in creation order."""
        folders = self.list()
        by_parent: Dict[Optional[int], List[Folder]] = defaultdict(list)
        for folder in folders:
            by_parent[folder.parent_id].append(folder)

        for folder in folders:
            folder.children = by_parent.get(folder.id, [])

        known_ids = {f.id for f in folders}
        # Folders whose parent vanished are shown at the root rather than dropped
        return [f for f in folders if f.parent_id is None or f.parent_id not in known_ids]

    # -------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------

    def create(self, name: str, parent_id: Optional[int] = None) -> Folder:
        name = _validate_name(name)
        parent = None
        if parent_id is not None:
            parent = self._repo.get_folder(parent_id)
            if parent is None:
                raise _folder_not_found(parent_id)

        now = datetime.now(timezone.utc)
        folder = self._repo.add_folder(
            Folder(
                name=name,
                parent_id=parent_id,
                path=build_path(name, parent),
                created_at=now,
                updated_at=now,
            )
        )
        folder.document_count = 0

        logger.info(f"Created folder {folder.id} at {folder.path}")
        log(log_folder_event("created", folder.id, path=folder.path))
        return folder

    def update(self, folder_id: int, changes: FolderUpdate) -> Folder:
        """
        Rename and/or move a folder.

        Moving under itself or one of its descendants raises ValidationError.
        """
        folders = {f.id: f for f in self._repo.list_folders()}
        folder = folders.get(folder_id)
        if folder is None:
            raise _folder_not_found(folder_id)

        if "name" in changes.model_fields_set and changes.name is not None:
            folder.name = _validate_name(changes.name)

        if "parent_id" in changes.model_fields_set:
            new_parent_id = changes.parent_id
            if new_parent_id is not None:
                if new_parent_id not in folders:
                    raise _folder_not_found(new_parent_id)
                self._check_no_cycle(folder_id, new_parent_id, folders)
            folder.parent_id = new_parent_id

        now = datetime.now(timezone.utc)
        folder.updated_at = now
        changed = self._repath(folder, folders)
        self._repo.save_folders(changed)

        logger.info(f"Updated folder {folder_id}: path={folder.path} ({len(changed) - 1} descendants re-pathed)")
        log(log_folder_event("updated", folder_id, path=folder.path))

        folder.document_count = self._repo.count_documents_in_folder(folder_id)
        folder.children = []
        return folder

    def delete(self, folder_id: int) -> None:
        if self._repo.count_documents_in_folder(folder_id) > 0:
            log(log_folder_event("delete_refused", folder_id, error="has documents"))
            raise FolderNotEmptyError(
                "Cannot delete folder with documents",
                folder_id=folder_id,
                reason="documents",
            )

        if self._repo.has_subfolders(folder_id):
            log(log_folder_event("delete_refused", folder_id, error="has subfolders"))
            raise FolderNotEmptyError(
                "Cannot delete folder with subfolders",
                folder_id=folder_id,
                reason="subfolders",
            )

        if not self._repo.remove_folder(folder_id):
            raise _folder_not_found(folder_id)

        logger.info(f"Deleted folder {folder_id}")
        log(log_folder_event("deleted", folder_id))

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------

    @staticmethod
    def _check_no_cycle(folder_id: int, new_parent_id: int, folders: Dict[int, Folder]) -> None:
        current: Optional[int] = new_parent_id
        seen = set()
        while current is not None and current not in seen:
            if current == folder_id:
                raise ValidationError(
                    "Cannot move a folder into itself or one of its subfolders",
                    object_ref=f"folders.{folder_id}",
                    validation_errors=[{"field": "parent_id", "error": "cycle"}],
                )
            seen.add(current)
            parent = folders.get(current)
            current = parent.parent_id if parent else None

    @staticmethod
    def _repath(folder: Folder, folders: Dict[int, Folder]) -> List[Folder]:
        """Recompute paths for ``folder`` and its descendants; return all touched folders."""
        children: Dict[Optional[int], List[Folder]] = defaultdict(list)
        for f in folders.values():
            if f.id != folder.id:
                children[f.parent_id].append(f)

        folder.path = build_path(folder.name, folders.get(folder.parent_id))
        changed = [folder]
        stack = [folder]
        while stack:
            parent = stack.pop()
            for child in children.get(parent.id, []):
                child.path = build_path(child.name, parent)
                child.updated_at = folder.updated_at
                changed.append(child)
                stack.append(child)
        return changed
