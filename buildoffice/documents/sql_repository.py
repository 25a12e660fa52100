"""
SQLAlchemy-backed DocumentRepository.

Each repository call runs in its own ``session_scope`` (commit on success,
rollback on error), so ``promote_version`` is a single transaction. Rows are
converted to pydantic records before the session closes; callers never see
ORM objects.

SQLAlchemy failures surface as ``RecordError``.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Generator, Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from buildoffice.db.models import (
    DocumentRecord,
    DocumentTagLink,
    DocumentVersionRecord,
    FolderRecord,
    TagRecord,
)
from buildoffice.db.session import as_utc, session_scope
from buildoffice.documents.models import (
    Document,
    DocumentCategory,
    DocumentStatus,
    DocumentVersion,
    FileType,
    Folder,
    Tag,
)
from buildoffice.documents.repository import DocumentRepository
from buildoffice.engine.errors import RecordError

logger = logging.getLogger("buildoffice.documents.sql_repository")


def _to_folder(record: FolderRecord) -> Folder:
    return Folder(
        id=record.id,
        name=record.name,
        parent_id=record.parent_id,
        path=record.path,
        created_at=as_utc(record.created_at),
        updated_at=as_utc(record.updated_at),
    )


def _to_tag(record: TagRecord) -> Tag:
    return Tag(id=record.id, name=record.name, color=record.color)


def _to_version(record: DocumentVersionRecord) -> DocumentVersion:
    return DocumentVersion(
        id=record.id,
        document_id=record.document_id,
        version=record.version,
        file_name=record.file_name,
        file_size=record.file_size,
        uploaded_by=record.uploaded_by,
        uploaded_at=as_utc(record.uploaded_at),
        change_log=record.change_log,
        is_active=record.is_active,
    )


def _to_document(record: DocumentRecord) -> Document:
    return Document(
        id=record.id,
        file_name=record.file_name,
        original_name=record.original_name,
        file_size=record.file_size,
        file_type=FileType(record.file_type),
        mime_type=record.mime_type,
        category=DocumentCategory(record.category),
        status=DocumentStatus(record.status),
        description=record.description,
        folder_id=record.folder_id,
        project_id=record.project_id,
        uploaded_by=record.uploaded_by,
        uploaded_at=as_utc(record.uploaded_at),
        updated_at=as_utc(record.updated_at),
        tags=[_to_tag(link.tag) for link in record.tag_links],
        versions=[_to_version(v) for v in record.versions],
        download_url=record.download_url,
        preview_url=record.preview_url,
        thumbnail_url=record.thumbnail_url,
        metadata=dict(record.extra_metadata or {}),
    )


def _version_record(version: DocumentVersion) -> DocumentVersionRecord:
    return DocumentVersionRecord(
        version=version.version,
        file_name=version.file_name,
        file_size=version.file_size,
        uploaded_by=version.uploaded_by,
        uploaded_at=version.uploaded_at,
        change_log=version.change_log,
        is_active=version.is_active,
    )


class SqlDocumentRepository(DocumentRepository):
    """
    DocumentRepository over the tables in ``buildoffice.db.models``.

    Usage:
        factory = init_db(get_config().database, create_tables=True)
        repo = SqlDocumentRepository(factory)
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    @contextmanager
    def _scope(self, operation: str, record_type: str) -> Generator[Session, None, None]:
        try:
            with session_scope(self._session_factory) as session:
                yield session
        except SQLAlchemyError as e:
            logger.error(f"{operation} {record_type} failed: {e}")
            raise RecordError(
                f"Failed to {operation} {record_type}: {e}",
                record_type=record_type,
                operation=operation,
            ) from e

    # -- folders -----------------------------------------------------------

    def list_folders(self) -> List[Folder]:
        with self._scope("list", "folder") as session:
            rows = session.scalars(select(FolderRecord).order_by(FolderRecord.id)).all()
            return [_to_folder(r) for r in rows]

    def get_folder(self, folder_id: int) -> Optional[Folder]:
        with self._scope("get", "folder") as session:
            record = session.get(FolderRecord, folder_id)
            return _to_folder(record) if record else None

    def add_folder(self, folder: Folder) -> Folder:
        with self._scope("create", "folder") as session:
            record = FolderRecord(
                name=folder.name,
                parent_id=folder.parent_id,
                path=folder.path,
                created_at=folder.created_at or datetime.now(timezone.utc),
                updated_at=folder.updated_at or datetime.now(timezone.utc),
            )
            session.add(record)
            session.flush()
            return _to_folder(record)

    def save_folders(self, folders: Iterable[Folder]) -> None:
        with self._scope("update", "folder") as session:
            for folder in folders:
                record = session.get(FolderRecord, folder.id)
                if record is None:
                    continue
                record.name = folder.name
                record.parent_id = folder.parent_id
                record.path = folder.path
                record.updated_at = folder.updated_at or datetime.now(timezone.utc)

    def remove_folder(self, folder_id: int) -> bool:
        with self._scope("delete", "folder") as session:
            record = session.get(FolderRecord, folder_id)
            if record is None:
                return False
            session.delete(record)
            return True

    # -- tags --------------------------------------------------------------

    def list_tags(self) -> List[Tag]:
        with self._scope("list", "tag") as session:
            rows = session.scalars(select(TagRecord).order_by(TagRecord.id)).all()
            return [_to_tag(r) for r in rows]

    def get_tags(self, tag_ids: Iterable[int]) -> List[Tag]:
        ids = list(tag_ids)
        if not ids:
            return []
        with self._scope("get", "tag") as session:
            rows = {r.id: r for r in session.scalars(select(TagRecord).where(TagRecord.id.in_(ids)))}
            return [_to_tag(rows[i]) for i in ids if i in rows]

    def add_tag(self, tag: Tag) -> Tag:
        with self._scope("create", "tag") as session:
            record = TagRecord(name=tag.name, color=tag.color)
            session.add(record)
            session.flush()
            return _to_tag(record)

    # -- documents ---------------------------------------------------------

    def list_documents(self) -> List[Document]:
        with self._scope("list", "document") as session:
            rows = session.scalars(select(DocumentRecord).order_by(DocumentRecord.id)).all()
            return [_to_document(r) for r in rows]

    def get_document(self, document_id: int) -> Optional[Document]:
        with self._scope("get", "document") as session:
            record = session.get(DocumentRecord, document_id)
            return _to_document(record) if record else None

    def add_document(self, document: Document) -> Document:
        with self._scope("create", "document") as session:
            record = DocumentRecord(versions=[_version_record(v) for v in document.versions])
            self._apply_document_fields(session, record, document)
            session.add(record)
            session.flush()
            return _to_document(record)

    def save_document(self, document: Document) -> Document:
        with self._scope("update", "document") as session:
            record = session.get(DocumentRecord, document.id)
            if record is None:
                raise RecordError(
                    f"Document {document.id} no longer exists",
                    record_type="document",
                    operation="update",
                )
            self._apply_document_fields(session, record, document)
            session.flush()
            return _to_document(record)

    def remove_document(self, document_id: int) -> bool:
        with self._scope("delete", "document") as session:
            record = session.get(DocumentRecord, document_id)
            if record is None:
                return False
            session.delete(record)
            return True

    def promote_version(self, document_id: int, version: DocumentVersion) -> Optional[DocumentVersion]:
        with self._scope("promote", "document_version") as session:
            record = session.get(DocumentRecord, document_id)
            if record is None:
                return None

            for existing in record.versions:
                existing.is_active = False
            stored = _version_record(version)
            stored.is_active = True
            record.versions.append(stored)
            record.file_name = stored.file_name
            record.file_size = stored.file_size
            record.updated_at = stored.uploaded_at
            session.flush()
            return _to_version(stored)

    # -- derived queries ---------------------------------------------------

    def count_documents_in_folder(self, folder_id: int) -> int:
        with self._scope("count", "document") as session:
            return session.scalar(
                select(func.count()).select_from(DocumentRecord).where(DocumentRecord.folder_id == folder_id)
            )

    def has_subfolders(self, folder_id: int) -> bool:
        with self._scope("get", "folder") as session:
            child = session.scalars(
                select(FolderRecord.id).where(FolderRecord.parent_id == folder_id).limit(1)
            ).first()
            return child is not None

    # -- helpers -----------------------------------------------------------

    @staticmethod
    def _apply_document_fields(session: Session, record: DocumentRecord, document: Document) -> None:
        """Copy document-level fields and tag links onto ``record``. Versions are not touched."""
        record.file_name = document.file_name
        record.original_name = document.original_name
        record.file_size = document.file_size
        record.file_type = document.file_type.value
        record.mime_type = document.mime_type
        record.category = document.category.value
        record.status = document.status.value
        record.description = document.description
        record.folder_id = document.folder_id
        record.project_id = document.project_id
        record.uploaded_by = document.uploaded_by
        record.uploaded_at = document.uploaded_at
        record.updated_at = document.updated_at
        record.download_url = document.download_url
        record.preview_url = document.preview_url
        record.thumbnail_url = document.thumbnail_url
        record.extra_metadata = dict(document.metadata)

        existing = {link.tag_id: link for link in record.tag_links}
        links = []
        for position, tag_id in enumerate(dict.fromkeys(document.tag_ids)):
            link = existing.get(tag_id)
            if link is None:
                tag = session.get(TagRecord, tag_id)
                if tag is None:
                    continue
                link = DocumentTagLink(tag=tag)
            link.position = position
            links.append(link)
        record.tag_links = links
