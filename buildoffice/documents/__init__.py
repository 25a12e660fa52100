"""
BuildOffice Document Management — folders, tags, documents and versions.

Usage:
    from buildoffice.documents import DocumentService, InMemoryDocumentRepository

    repo = InMemoryDocumentRepository()
    documents = DocumentService(repo)
    doc = documents.create(UploadedFile(name="plan.pdf", size=1024), options, uploaded_by=1)
"""

from buildoffice.documents.folders import FolderService
from buildoffice.documents.models import (
    Document,
    DocumentCategory,
    DocumentSearchFilters,
    DocumentStatus,
    DocumentUpdate,
    DocumentUploadOptions,
    DocumentVersion,
    FileType,
    Folder,
    FolderUpdate,
    Tag,
    UploadedFile,
    UploadProgress,
)
from buildoffice.documents.repository import DocumentRepository, InMemoryDocumentRepository
from buildoffice.documents.search import filter_documents
from buildoffice.documents.service import DocumentService
from buildoffice.documents.tags import TagService, attach_tags, detach_tags

__all__ = [
    "Document",
    "DocumentCategory",
    "DocumentRepository",
    "DocumentSearchFilters",
    "DocumentService",
    "DocumentStatus",
    "DocumentUpdate",
    "DocumentUploadOptions",
    "DocumentVersion",
    "FileType",
    "Folder",
    "FolderService",
    "FolderUpdate",
    "InMemoryDocumentRepository",
    "Tag",
    "TagService",
    "UploadedFile",
    "UploadProgress",
    "attach_tags",
    "detach_tags",
    "filter_documents",
]
