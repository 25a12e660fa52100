"""
BuildOffice Document Service — Upload, versioning, update, delete, search.

Handles:
- Document creation from an uploaded file's metadata (first version "1.0")
- New-version uploads (version + 0.1, single active version)
- Explicit update commands and deletes
- Search/filter over the document list

Only metadata is handled here; the bytes go to external file storage.
Progress callbacks are synchronous and cannot be cancelled; the document is
only touched after the last "uploading" step has been reported.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from buildoffice.documents.models import (
    Document,
    DocumentSearchFilters,
    DocumentStatus,
    DocumentUpdate,
    DocumentUploadOptions,
    DocumentVersion,
    FileType,
    ProgressCallback,
    UploadedFile,
    UploadProgress,
)
from buildoffice.documents.repository import DocumentRepository
from buildoffice.documents.search import filter_documents
from buildoffice.documents.versioning import INITIAL_VERSION, next_version_number
from buildoffice.engine.config import DocumentsConfig
from buildoffice.engine.errors import NotFoundError, ValidationError
from buildoffice.engine.logging import log, log_document_event

logger = logging.getLogger("buildoffice.documents.service")


def _document_not_found(document_id: int) -> NotFoundError:
    return NotFoundError("Document not found", record_type="document", record_id=document_id)


class DocumentService:
    """
    Document store and version workflow over a DocumentRepository.

    Folder and tag references are resolved through the same repository.
    """

    def __init__(self, repository: DocumentRepository, config: Optional[DocumentsConfig] = None):
        self._repo = repository
        self._config = config or DocumentsConfig()

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------

    def list(self, filters: Optional[DocumentSearchFilters] = None) -> List[Document]:
        return filter_documents(self._repo.list_documents(), filters)

    def get(self, document_id: int) -> Optional[Document]:
        return self._repo.get_document(document_id)

    def list_versions(self, document_id: int) -> List[DocumentVersion]:
        document = self._repo.get_document(document_id)
        return document.versions if document else []

    # -------------------------------------------------------------------
    # Create
    # -------------------------------------------------------------------

    def create(
        self,
        file: UploadedFile,
        options: DocumentUploadOptions,
        uploaded_by: int,
        on_progress: Optional[ProgressCallback] = None,
    ) -> Document:
        """
        Create a document from an uploaded file.

        1. Validate size and folder reference
        2. Report transfer progress
        3. Build the document with its first version "1.0" (active)
        4. Insert, then fill in the id-based URLs (the insert is undone if that fails)
        """
        self._validate_upload(file)
        if options.folder_id is not None and self._repo.get_folder(options.folder_id) is None:
            raise NotFoundError("Folder not found", record_type="folder", record_id=options.folder_id)

        self._report_transfer(file.name, on_progress)
        _notify(on_progress, UploadProgress(file_name=file.name, progress=100, status="processing"))

        now = datetime.now(timezone.utc)
        stored_name = self._stored_file_name(file.name, now)
        first_version = DocumentVersion(
            version=INITIAL_VERSION,
            file_name=stored_name,
            file_size=file.size,
            uploaded_by=uploaded_by,
            uploaded_at=now,
            is_active=True,
        )
        document = Document(
            file_name=stored_name,
            original_name=file.name,
            file_size=file.size,
            file_type=FileType.from_file_name(file.name),
            mime_type=file.mime_type,
            category=options.category,
            status=DocumentStatus.ACTIVE,
            description=options.description,
            folder_id=options.folder_id,
            project_id=options.project_id,
            uploaded_by=uploaded_by,
            uploaded_at=now,
            updated_at=now,
            tags=self._repo.get_tags(options.tag_ids),
            versions=[first_version],
        )

        document = self._repo.add_document(document)
        document.download_url, document.preview_url, document.thumbnail_url = self._urls(
            document.id, file.name
        )
        try:
            document = self._repo.save_document(document)
        except Exception:
            # URLs depend on the id; a document without them must not stay behind
            logger.error(f"Storing URLs for document {document.id} failed, removing it")
            self._repo.remove_document(document.id)
            raise

        logger.info(
            f"Created document {document.id} '{document.original_name}' "
            f"({document.file_size} bytes, folder={document.folder_id})"
        )
        log(log_document_event("created", document.id, user_id=uploaded_by, version=INITIAL_VERSION))
        _notify(on_progress, UploadProgress(file_name=file.name, progress=100, status="completed"))
        return document

    # -------------------------------------------------------------------
    # Version workflow
    # -------------------------------------------------------------------

    def upload_new_version(
        self,
        document_id: int,
        file: UploadedFile,
        uploaded_by: int,
        change_log: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> DocumentVersion:
        """
        Upload a new version of an existing document.

        The new version number is the current one + 0.1. The previous active
        version is deactivated and the document's file name/size follow the
        new version, all in one repository call.
        """
        document = self._repo.get_document(document_id)
        if document is None:
            raise _document_not_found(document_id)
        self._validate_upload(file)

        self._report_transfer(file.name, on_progress)

        current = document.current_version
        current_number = current.version if current else INITIAL_VERSION
        now = datetime.now(timezone.utc)
        new_version = DocumentVersion(
            document_id=document_id,
            version=next_version_number(current_number),
            file_name=self._stored_file_name(file.name, now),
            file_size=file.size,
            uploaded_by=uploaded_by,
            uploaded_at=now,
            change_log=change_log,
            is_active=True,
        )

        stored = self._repo.promote_version(document_id, new_version)
        if stored is None:
            # Deleted between the read and the promotion
            raise _document_not_found(document_id)

        logger.info(f"New version {stored.version} for document {document_id} ({stored.file_size} bytes)")
        log(log_document_event("version_uploaded", document_id, user_id=uploaded_by, version=stored.version))
        _notify(on_progress, UploadProgress(file_name=file.name, progress=100, status="completed"))
        return stored

    # -------------------------------------------------------------------
    # Update / Delete
    # -------------------------------------------------------------------

    def update(self, document_id: int, changes: DocumentUpdate) -> Document:
        document = self._repo.get_document(document_id)
        if document is None:
            raise _document_not_found(document_id)

        fields = changes.model_fields_set
        if "folder_id" in fields and changes.folder_id is not None:
            if self._repo.get_folder(changes.folder_id) is None:
                raise NotFoundError("Folder not found", record_type="folder", record_id=changes.folder_id)

        for name in ("description", "folder_id", "project_id"):
            if name in fields:
                setattr(document, name, getattr(changes, name))
        for name in ("category", "status", "metadata"):
            if name in fields and getattr(changes, name) is not None:
                setattr(document, name, getattr(changes, name))
        if "tag_ids" in fields:
            document.tags = self._repo.get_tags(changes.tag_ids or [])

        document.updated_at = datetime.now(timezone.utc)
        document = self._repo.save_document(document)

        logger.info(f"Updated document {document_id}: {sorted(fields)}")
        log(log_document_event("updated", document_id, fields_changed=sorted(fields)))
        return document

    def delete(self, document_id: int) -> None:
        if not self._repo.remove_document(document_id):
            raise _document_not_found(document_id)
        logger.info(f"Deleted document {document_id}")
        log(log_document_event("deleted", document_id))

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------

    def _validate_upload(self, file: UploadedFile) -> None:
        max_bytes = self._config.max_upload_size_mb * 1024 * 1024
        if file.size > max_bytes:
            raise ValidationError(
                f"File size ({file.size / 1024 / 1024:.1f} MB) exceeds "
                f"upload limit ({self._config.max_upload_size_mb} MB)",
                object_ref="documents.upload",
                validation_errors=[{"field": "size", "error": "too large"}],
            )

    def _report_transfer(self, file_name: str, on_progress: Optional[ProgressCallback]) -> None:
        if on_progress is None:
            return
        steps = max(self._config.progress_steps, 1)
        on_progress(UploadProgress(file_name=file_name, progress=0, status="uploading"))
        for i in range(1, steps + 1):
            on_progress(UploadProgress(file_name=file_name, progress=i * 100 // steps, status="uploading"))

    def _urls(self, document_id: int, file_name: str) -> Tuple[str, Optional[str], Optional[str]]:
        base = f"{self._config.url_prefix}/{document_id}"
        extension = _extension(file_name)
        preview = f"{base}/preview" if extension in self._config.previewable_types else None
        thumbnail = f"{base}/thumbnail" if extension in self._config.thumbnail_types else None
        return f"{base}/download", preview, thumbnail

    @staticmethod
    def _stored_file_name(file_name: str, now: datetime) -> str:
        """Millisecond timestamp prefix plus the sanitized original name."""
        return f"{int(now.timestamp() * 1000)}-{_safe_filename(file_name)}"

    def __repr__(self) -> str:
        return f"<DocumentService repo={type(self._repo).__name__}>"


def _notify(on_progress: Optional[ProgressCallback], progress: UploadProgress) -> None:
    if on_progress is not None:
        on_progress(progress)


def _extension(file_name: str) -> str:
    return file_name.rsplit(".", 1)[-1].lower() if "." in file_name else ""


def _safe_filename(filename: str) -> str:
    """
    Sanitize a filename for storage.

    Removes path components, control characters and leading dots.
    Preserves the extension.
    """
    name = os.path.basename(filename.replace("\\", "/"))
    name = "".join(c for c in name if c.isprintable() and c not in '<>:"/\\|?*')
    name = name.lstrip(".")
    if not name:
        name = "unnamed_document"
    if len(name) > 200:
        base, ext = os.path.splitext(name)
        name = base[:200 - len(ext)] + ext
    return name
