"""
BuildOffice Test Suite — Shared fixtures and configuration.

Run:  pytest tests/ -v
"""

from __future__ import annotations

import pytest

from buildoffice.documents.folders import FolderService
from buildoffice.documents.models import DocumentCategory, DocumentUploadOptions, UploadedFile
from buildoffice.documents.repository import InMemoryDocumentRepository
from buildoffice.documents.service import DocumentService
from buildoffice.documents.tags import TagService
from buildoffice.engine.config import DatabaseConfig, DocumentsConfig
from buildoffice.financial.repository import InMemoryFinancialRepository
from buildoffice.financial.service import FinancialService
from buildoffice.inventory.repository import InMemoryInventoryRepository
from buildoffice.inventory.service import InventoryService


@pytest.fixture(autouse=True)
def _isolate_globals():
    """Reset the config singleton and the audit log queue between tests."""
    import buildoffice.engine.config as cfg_mod
    from buildoffice.engine.logging import shutdown_logging

    cfg_mod._config = None
    yield
    shutdown_logging()
    cfg_mod._config = None


# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------

@pytest.fixture
def memory_repo():
    return InMemoryDocumentRepository()


@pytest.fixture
def sql_factory():
    """Session factory for a fresh in-memory SQLite database with all tables."""
    from buildoffice.db.session import close_db, init_db

    yield init_db(DatabaseConfig(url="sqlite://"), create_tables=True)
    close_db()


@pytest.fixture
def sql_repo(sql_factory):
    from buildoffice.documents.sql_repository import SqlDocumentRepository

    return SqlDocumentRepository(sql_factory)


@pytest.fixture(params=["memory", "sql"])
def repo(request):
    """Both repository implementations, for behaviour that must match."""
    return request.getfixturevalue(f"{request.param}_repo")


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------

@pytest.fixture
def documents(repo):
    return DocumentService(repo, DocumentsConfig(max_upload_size_mb=1))


@pytest.fixture
def folders(repo):
    return FolderService(repo)


@pytest.fixture
def tags(repo):
    return TagService(repo)


@pytest.fixture(params=["memory", "sql"])
def finance(request):
    """FinancialService over both repository implementations."""
    if request.param == "sql":
        from buildoffice.financial.sql_repository import SqlFinancialRepository

        return FinancialService(SqlFinancialRepository(request.getfixturevalue("sql_factory")))
    return FinancialService(InMemoryFinancialRepository())


@pytest.fixture(params=["memory", "sql"])
def inventory(request):
    """InventoryService over both repository implementations."""
    if request.param == "sql":
        from buildoffice.inventory.sql_repository import SqlInventoryRepository

        return InventoryService(SqlInventoryRepository(request.getfixturevalue("sql_factory")))
    return InventoryService(InMemoryInventoryRepository())


# ---------------------------------------------------------------------------
# Upload helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def make_file():
    def _make(name: str = "site-plan.pdf", size: int = 2048, mime_type: str = "application/pdf"):
        return UploadedFile(name=name, size=size, mime_type=mime_type)
    return _make


@pytest.fixture
def upload(documents, make_file):
    """Create a document with sensible defaults; keyword overrides go to the options."""
    def _upload(name: str = "site-plan.pdf", size: int = 2048, uploaded_by: int = 1, **options):
        options.setdefault("category", DocumentCategory.PROJECT_DOCUMENTS)
        return documents.create(
            make_file(name=name, size=size),
            DocumentUploadOptions(**options),
            uploaded_by=uploaded_by,
        )
    return _upload
