"""
Document repository interface and the in-memory implementation.

Services never hold records themselves; they go through a
``DocumentRepository`` so the same folder/tag/document logic runs against
the in-memory store (tests, demos) or the SQLAlchemy store
(``buildoffice.documents.sql_repository``).

Reads return copies: mutating a returned record has no effect until it is
passed back to a ``save_*`` call.
"""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from buildoffice.documents.models import Document, DocumentVersion, Folder, Tag


class DocumentRepository(ABC):
    """Persistence port for folders, tags, documents and versions."""

    # -- folders -----------------------------------------------------------

    @abstractmethod
    def list_folders(self) -> List[Folder]:
        """All folders in creation order."""

    @abstractmethod
    def get_folder(self, folder_id: int) -> Optional[Folder]:
        ...

    @abstractmethod
    def add_folder(self, folder: Folder) -> Folder:
        """Insert a folder and return it with its assigned id."""

    @abstractmethod
    def save_folders(self, folders: Iterable[Folder]) -> None:
        """Persist name/parent/path/updated_at of existing folders in one unit."""

    @abstractmethod
    def remove_folder(self, folder_id: int) -> bool:
        """Delete a folder row. Returns False if it did not exist."""

    # -- tags --------------------------------------------------------------

    @abstractmethod
    def list_tags(self) -> List[Tag]:
        ...

    @abstractmethod
    def get_tags(self, tag_ids: Iterable[int]) -> List[Tag]:
        """Resolve ids to tags in the order given, skipping unknown ids."""

    @abstractmethod
    def add_tag(self, tag: Tag) -> Tag:
        ...

    # -- documents ---------------------------------------------------------

    @abstractmethod
    def list_documents(self) -> List[Document]:
        """All documents in insertion order."""

    @abstractmethod
    def get_document(self, document_id: int) -> Optional[Document]:
        ...

    @abstractmethod
    def add_document(self, document: Document) -> Document:
        """
        Insert a document together with its initial version(s).
        Assigns ids to the document and its versions and sets
        ``version.document_id``.
        """

    @abstractmethod
    def save_document(self, document: Document) -> Document:
        """Persist the document's own fields and tag links. Versions are left as stored."""

    @abstractmethod
    def remove_document(self, document_id: int) -> bool:
        """Delete a document, its versions and its tag links."""

    @abstractmethod
    def promote_version(self, document_id: int, version: DocumentVersion) -> Optional[DocumentVersion]:
        """
        Atomically append ``version`` as the active version of a document.

        Clears ``is_active`` on every existing version, appends the new one,
        copies its file name/size onto the document and sets the document's
        ``updated_at`` to ``version.uploaded_at``.
        Returns the stored version, or None when the document does not exist.
        """

    # -- derived queries ---------------------------------------------------

    def count_documents_in_folder(self, folder_id: int) -> int:
        return sum(1 for d in self.list_documents() if d.folder_id == folder_id)

    def has_subfolders(self, folder_id: int) -> bool:
        return any(f.parent_id == folder_id for f in self.list_folders())


class InMemoryDocumentRepository(DocumentRepository):
    """
    Dict-backed repository. Insertion order is preserved by the dicts.

    Ids come from per-table counters, so ids are never reused after a delete.
    Version ids are global across documents.
    """

    def __init__(self):
        self._folders: Dict[int, Folder] = {}
        self._tags: Dict[int, Tag] = {}
        self._documents: Dict[int, Document] = {}
        self._folder_ids = itertools.count(1)
        self._tag_ids = itertools.count(1)
        self._document_ids = itertools.count(1)
        self._version_ids = itertools.count(1)

    # -- folders -----------------------------------------------------------

    def list_folders(self) -> List[Folder]:
        return [f.model_copy(deep=True) for f in self._folders.values()]

    def get_folder(self, folder_id: int) -> Optional[Folder]:
        folder = self._folders.get(folder_id)
        return folder.model_copy(deep=True) if folder else None

    def add_folder(self, folder: Folder) -> Folder:
        stored = folder.model_copy(deep=True, update={"id": next(self._folder_ids)})
        stored.children = []
        stored.document_count = None
        self._folders[stored.id] = stored
        return stored.model_copy(deep=True)

    def save_folders(self, folders: Iterable[Folder]) -> None:
        for folder in folders:
            existing = self._folders.get(folder.id)
            if existing is None:
                continue
            existing.name = folder.name
            existing.parent_id = folder.parent_id
            existing.path = folder.path
            existing.updated_at = folder.updated_at

    def remove_folder(self, folder_id: int) -> bool:
        return self._folders.pop(folder_id, None) is not None

    # -- tags --------------------------------------------------------------

    def list_tags(self) -> List[Tag]:
        return [t.model_copy() for t in self._tags.values()]

    def get_tags(self, tag_ids: Iterable[int]) -> List[Tag]:
        return [self._tags[i].model_copy() for i in tag_ids if i in self._tags]

    def add_tag(self, tag: Tag) -> Tag:
        stored = tag.model_copy(update={"id": next(self._tag_ids)})
        self._tags[stored.id] = stored
        return stored.model_copy()

    # -- documents ---------------------------------------------------------

    def list_documents(self) -> List[Document]:
        return [d.model_copy(deep=True) for d in self._documents.values()]

    def get_document(self, document_id: int) -> Optional[Document]:
        document = self._documents.get(document_id)
        return document.model_copy(deep=True) if document else None

    def add_document(self, document: Document) -> Document:
        stored = document.model_copy(deep=True, update={"id": next(self._document_ids)})
        for version in stored.versions:
            version.id = next(self._version_ids)
            version.document_id = stored.id
        self._documents[stored.id] = stored
        return stored.model_copy(deep=True)

    def save_document(self, document: Document) -> Document:
        existing = self._documents[document.id]
        stored = document.model_copy(deep=True, update={"versions": existing.versions})
        self._documents[document.id] = stored
        return stored.model_copy(deep=True)

    def remove_document(self, document_id: int) -> bool:
        return self._documents.pop(document_id, None) is not None

    def promote_version(self, document_id: int, version: DocumentVersion) -> Optional[DocumentVersion]:
        document = self._documents.get(document_id)
        if document is None:
            return None

        stored = version.model_copy(
            update={"id": next(self._version_ids), "document_id": document_id, "is_active": True}
        )
        for existing in document.versions:
            existing.is_active = False
        document.versions.append(stored)
        document.file_name = stored.file_name
        document.file_size = stored.file_size
        document.updated_at = stored.uploaded_at
        return stored.model_copy()
