"""
BuildOffice Document & Folder Models — Pydantic definitions.

Document: File metadata with an append-only version history.
DocumentVersion: Immutable snapshot of one upload; only ``is_active`` flips.
Folder: Tree node with a materialized display path.
Tag: Colored label attached many-to-many to documents.

Only metadata is modeled; file bytes live in external storage.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, computed_field


class DocumentCategory(str, Enum):
    PROJECT_DOCUMENTS = "Project Documents"
    CONTRACTS = "Contracts"
    INVOICES = "Invoices"
    QUOTATIONS = "Quotations"
    PURCHASE_ORDERS = "Purchase Orders"
    TECHNICAL_DRAWINGS = "Technical Drawings"
    PERMITS = "Permits"
    REPORTS = "Reports"
    PHOTOS = "Photos"
    OTHER = "Other"


class DocumentStatus(str, Enum):
    ACTIVE = "Active"
    ARCHIVED = "Archived"
    DRAFT = "Draft"


class FileType(str, Enum):
    PDF = "pdf"
    DOC = "doc"
    DOCX = "docx"
    XLS = "xls"
    XLSX = "xlsx"
    JPG = "jpg"
    JPEG = "jpeg"
    PNG = "png"
    GIF = "gif"
    DWG = "dwg"
    ZIP = "zip"
    RAR = "rar"
    UNKNOWN = "unknown"

    @classmethod
    def from_file_name(cls, file_name: str) -> "FileType":
        """Map a file name's extension to a FileType; anything else is UNKNOWN."""
        if "." not in file_name:
            return cls.UNKNOWN
        extension = file_name.rsplit(".", 1)[-1].lower()
        try:
            return cls(extension)
        except ValueError:
            return cls.UNKNOWN


# ---------------------------------------------------------------------------
# Tag
# ---------------------------------------------------------------------------

class Tag(BaseModel):
    """Colored label. Independent lifecycle; documents reference it by id."""

    id: Optional[int] = Field(default=None, description="Auto-generated primary key")
    name: str = Field(min_length=1, max_length=100)
    color: str = Field(max_length=7, description="Hex color, e.g. #ef4444")


# ---------------------------------------------------------------------------
# Folder
# ---------------------------------------------------------------------------

class Folder(BaseModel):
    """
    Folder tree node.

    ``path`` is "/" followed by the ancestor names and the folder's own name,
    joined by "/". It is for display, never for lookup.
    ``document_count`` and ``children`` are populated by the folder service
    on read and are not persisted.
    """

    id: Optional[int] = Field(default=None, description="Auto-generated primary key")
    name: str = Field(min_length=1, max_length=255)
    parent_id: Optional[int] = Field(default=None, description="Parent folder ID, None at root")
    path: str = Field(max_length=1000)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    document_count: Optional[int] = None
    children: List["Folder"] = Field(default_factory=list)


class FolderUpdate(BaseModel):
    """
    Explicit folder update command.

    Only fields present in ``model_fields_set`` are applied, so
    ``FolderUpdate(parent_id=None)`` moves a folder to the root while
    ``FolderUpdate(name="x")`` leaves the parent alone.
    """

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    parent_id: Optional[int] = None


# ---------------------------------------------------------------------------
# Document versions
# ---------------------------------------------------------------------------

class DocumentVersion(BaseModel):
    """
    Snapshot of one uploaded file.

    Immutable once created except for ``is_active``, which is cleared when a
    newer version is promoted.
    """

    id: Optional[int] = Field(default=None, description="Auto-generated primary key")
    document_id: Optional[int] = Field(default=None, description="Parent document ID")
    version: str = Field(description="Decimal version number, e.g. '1.2'")
    file_name: str = Field(max_length=500)
    file_size: int = Field(ge=0)
    uploaded_by: int
    uploaded_at: datetime
    change_log: Optional[str] = Field(default=None, max_length=1000)
    is_active: bool = True


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

class Document(BaseModel):
    """
    Document metadata with its version history.

    ``versions`` is ordered by ascending version number and exactly one of
    them is active; ``current_version`` is derived from that flag rather
    than stored separately.
    """

    id: Optional[int] = Field(default=None, description="Auto-generated primary key")
    file_name: str = Field(max_length=500, description="Stored file name of the current version")
    original_name: str = Field(max_length=500, description="Name of the file as uploaded")
    file_size: int = Field(ge=0)
    file_type: FileType
    mime_type: str = Field(max_length=100)
    category: DocumentCategory
    status: DocumentStatus = DocumentStatus.ACTIVE
    description: Optional[str] = None
    folder_id: Optional[int] = None
    project_id: Optional[int] = None
    uploaded_by: int
    uploaded_at: datetime
    updated_at: datetime
    tags: List[Tag] = Field(default_factory=list)
    versions: List[DocumentVersion] = Field(default_factory=list)
    download_url: str = ""
    preview_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @computed_field  # type: ignore[misc]
    @property
    def current_version(self) -> Optional[DocumentVersion]:
        for version in self.versions:
            if version.is_active:
                return version
        return None

    @property
    def tag_ids(self) -> List[int]:
        return [t.id for t in self.tags if t.id is not None]


class DocumentUpdate(BaseModel):
    """
    Explicit document update command.

    Versions, file name/size and upload metadata are not updatable here;
    they change only through the version workflow. Only fields present in
    ``model_fields_set`` are applied, so ``folder_id=None`` removes the
    document from its folder.
    """

    description: Optional[str] = None
    category: Optional[DocumentCategory] = None
    status: Optional[DocumentStatus] = None
    folder_id: Optional[int] = None
    project_id: Optional[int] = None
    tag_ids: Optional[List[int]] = None
    metadata: Optional[Dict[str, Any]] = None


# ---------------------------------------------------------------------------
# Upload inputs
# ---------------------------------------------------------------------------

class UploadedFile(BaseModel):
    """Metadata of an incoming file. The bytes themselves are not modeled."""

    name: str = Field(min_length=1, max_length=255)
    size: int = Field(ge=0)
    mime_type: str = Field(default="application/octet-stream", max_length=100)


class DocumentUploadOptions(BaseModel):
    folder_id: Optional[int] = None
    project_id: Optional[int] = None
    category: DocumentCategory
    description: Optional[str] = None
    tag_ids: List[int] = Field(default_factory=list)


class UploadProgress(BaseModel):
    file_name: str
    progress: int = Field(ge=0, le=100)
    status: str = Field(description="uploading | processing | completed | error")
    error: Optional[str] = None


ProgressCallback = Callable[[UploadProgress], None]


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

class DocumentSearchFilters(BaseModel):
    query: Optional[str] = None
    category: Optional[DocumentCategory] = None
    file_type: Optional[FileType] = None
    status: Optional[DocumentStatus] = None
    folder_id: Optional[int] = None
    project_id: Optional[int] = None
    uploaded_by: Optional[int] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    tags: Optional[List[int]] = None
    sort_by: Optional[Literal["name", "uploaded_at", "file_size", "category"]] = None
    sort_order: Literal["asc", "desc"] = "asc"


Folder.model_rebuild()
