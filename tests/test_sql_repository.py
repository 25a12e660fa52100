"""Unit tests for buildoffice.documents.sql_repository and buildoffice.db."""

from datetime import datetime, timezone

import pytest
from sqlalchemy import inspect, select

from buildoffice.db.base import EngineRegistry, engine_registry
from buildoffice.db.models import DocumentTagLink, DocumentVersionRecord
from buildoffice.db.session import ENGINE_NAME, session_scope
from buildoffice.documents.models import (
    Document,
    DocumentCategory,
    DocumentVersion,
    FileType,
    Folder,
    Tag,
)
from buildoffice.engine.errors import RecordError

NOW = datetime(2026, 5, 4, 12, 30, tzinfo=timezone.utc)


def _document(**overrides):
    fields = dict(
        file_name="1-plan.pdf",
        original_name="plan.pdf",
        file_size=10,
        file_type=FileType.PDF,
        mime_type="application/pdf",
        category=DocumentCategory.TECHNICAL_DRAWINGS,
        uploaded_by=1,
        uploaded_at=NOW,
        updated_at=NOW,
        versions=[
            DocumentVersion(version="1.0", file_name="1-plan.pdf", file_size=10, uploaded_by=1, uploaded_at=NOW)
        ],
    )
    fields.update(overrides)
    return Document(**fields)


class TestEngineRegistry:
    def test_register_sqlite_memory(self):
        registry = EngineRegistry()
        registry.register("scratch", "sqlite://")
        assert registry.registered_names == ["scratch"]
        assert registry.health_check("scratch")
        registry.dispose()
        assert registry.registered_names == []

    def test_unknown_engine(self):
        registry = EngineRegistry()
        with pytest.raises(KeyError):
            registry.get("nope")
        assert registry.health_check("nope") is False


class TestSchema:
    def test_tables_created(self, sql_repo):
        tables = set(inspect(engine_registry.get(ENGINE_NAME)).get_table_names())
        assert {
            "document_folders", "document_tags", "documents", "document_versions", "document_tag_links",
            "record_sequences", "quotations", "quotation_items", "purchase_orders", "purchase_order_items",
            "invoices", "invoice_items", "payments", "suppliers", "products", "stock_movements",
        } <= tables


class TestSqlDocumentRepository:
    def test_add_and_get_document(self, sql_repo):
        stored = sql_repo.add_document(_document())
        assert stored.id is not None
        assert stored.versions[0].id is not None
        assert stored.versions[0].document_id == stored.id

        loaded = sql_repo.get_document(stored.id)
        assert loaded.uploaded_at == NOW
        assert loaded.uploaded_at.tzinfo is not None
        assert loaded.current_version.version == "1.0"

    def test_missing_returns_none(self, sql_repo):
        assert sql_repo.get_document(1) is None
        assert sql_repo.get_folder(1) is None
        assert sql_repo.remove_document(1) is False
        assert sql_repo.remove_folder(1) is False
        assert sql_repo.promote_version(1, _document().versions[0]) is None

    def test_promote_version_is_atomic_unit(self, sql_repo):
        doc = sql_repo.add_document(_document())
        new = DocumentVersion(version="1.1", file_name="2-plan.pdf", file_size=20, uploaded_by=2, uploaded_at=NOW)
        stored = sql_repo.promote_version(doc.id, new)
        assert stored.is_active and stored.document_id == doc.id

        loaded = sql_repo.get_document(doc.id)
        assert [(v.version, v.is_active) for v in loaded.versions] == [("1.0", False), ("1.1", True)]
        assert loaded.file_name == "2-plan.pdf"
        assert loaded.file_size == 20

    def test_duplicate_version_number_raises_record_error(self, sql_repo):
        doc = sql_repo.add_document(_document())
        dup = DocumentVersion(version="1.0", file_name="x", file_size=1, uploaded_by=1, uploaded_at=NOW)
        with pytest.raises(RecordError) as exc_info:
            sql_repo.promote_version(doc.id, dup)
        assert exc_info.value.operation == "promote"
        # rolled back: the original version is still the active one
        loaded = sql_repo.get_document(doc.id)
        assert [(v.version, v.is_active) for v in loaded.versions] == [("1.0", True)]

    def test_save_document_replaces_tag_links(self, sql_repo):
        a = sql_repo.add_tag(Tag(name="A", color="#000000"))
        b = sql_repo.add_tag(Tag(name="B", color="#ffffff"))
        doc = sql_repo.add_document(_document(tags=[a]))
        doc.tags = [b, a]
        saved = sql_repo.save_document(doc)
        assert saved.tag_ids == [b.id, a.id]

        doc.tags = [b]
        sql_repo.save_document(doc)
        assert sql_repo.get_document(doc.id).tag_ids == [b.id]

    def test_remove_document_cascades(self, sql_repo):
        tag = sql_repo.add_tag(Tag(name="A", color="#000000"))
        doc = sql_repo.add_document(_document(tags=[tag]))
        assert sql_repo.remove_document(doc.id)
        with session_scope(engine_registry.get_session_factory(ENGINE_NAME)) as session:
            assert session.scalars(select(DocumentVersionRecord)).all() == []
            assert session.scalars(select(DocumentTagLink)).all() == []
        assert [t.id for t in sql_repo.list_tags()] == [tag.id]

    def test_get_tags_preserves_order(self, sql_repo):
        a = sql_repo.add_tag(Tag(name="A", color="#000"))
        b = sql_repo.add_tag(Tag(name="B", color="#111"))
        assert [t.id for t in sql_repo.get_tags([b.id, 77, a.id])] == [b.id, a.id]
        assert sql_repo.get_tags([]) == []

    def test_folders(self, sql_repo):
        root = sql_repo.add_folder(Folder(name="A", path="/A", created_at=NOW, updated_at=NOW))
        child = sql_repo.add_folder(Folder(name="B", parent_id=root.id, path="/A/B"))
        assert sql_repo.has_subfolders(root.id)
        assert not sql_repo.has_subfolders(child.id)

        child.path = "/Z/B"
        sql_repo.save_folders([child])
        assert sql_repo.get_folder(child.id).path == "/Z/B"

        sql_repo.add_document(_document(folder_id=root.id))
        assert sql_repo.count_documents_in_folder(root.id) == 1
        assert sql_repo.count_documents_in_folder(child.id) == 0

    def test_save_missing_document(self, sql_repo):
        with pytest.raises(RecordError):
            sql_repo.save_document(_document(id=99))
