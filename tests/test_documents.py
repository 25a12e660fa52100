"""Unit tests for buildoffice.documents.service — create, update, delete, version workflow."""

from datetime import datetime, timezone

import pytest

from buildoffice.documents.models import (
    DocumentCategory,
    DocumentStatus,
    DocumentUpdate,
    DocumentUploadOptions,
    FileType,
    UploadedFile,
)
from buildoffice.engine.errors import NotFoundError, RecordError, ValidationError


def _assert_single_active(document):
    active = [v for v in document.versions if v.is_active]
    assert len(active) == 1
    assert document.current_version == active[0]


class TestCreate:
    def test_first_version(self, upload):
        doc = upload("site-plan.pdf", size=4096, uploaded_by=7)
        assert doc.id is not None
        assert doc.original_name == "site-plan.pdf"
        assert doc.file_name.endswith("-site-plan.pdf")
        assert doc.file_size == 4096
        assert doc.file_type == FileType.PDF
        assert doc.status == DocumentStatus.ACTIVE
        assert doc.uploaded_by == 7
        assert [v.version for v in doc.versions] == ["1.0"]
        assert doc.versions[0].document_id == doc.id
        assert doc.versions[0].file_name == doc.file_name
        _assert_single_active(doc)

    def test_stored_name_has_millisecond_prefix(self, upload):
        doc = upload("report.docx")
        prefix, rest = doc.file_name.split("-", 1)
        assert prefix.isdigit() and len(prefix) >= 13
        assert rest == "report.docx"

    def test_stored_name_sanitized(self, upload):
        doc = upload("../../etc/pass<wd>.pdf")
        assert doc.original_name == "../../etc/pass<wd>.pdf"
        assert doc.file_name.split("-", 1)[1] == "passwd.pdf"

    def test_urls_for_previewable_file(self, upload):
        doc = upload("photo.png")
        assert doc.download_url == f"/api/documents/{doc.id}/download"
        assert doc.preview_url == f"/api/documents/{doc.id}/preview"
        assert doc.thumbnail_url == f"/api/documents/{doc.id}/thumbnail"

    def test_urls_for_text_and_drawing(self, upload):
        txt = upload("notes.txt")
        assert txt.file_type == FileType.UNKNOWN
        assert txt.preview_url is not None
        assert txt.thumbnail_url is None

        dwg = upload("layout.dwg")
        assert dwg.preview_url is None
        assert dwg.thumbnail_url is None
        assert dwg.download_url.endswith("/download")

    def test_urls_persisted(self, documents, upload):
        doc = upload("photo.jpg")
        assert documents.get(doc.id).preview_url == doc.preview_url

    def test_tags_resolved_unknown_ignored(self, tags, upload):
        legal = tags.create("Legal", "#8b5cf6")
        draft = tags.create("Draft", "#6b7280")
        doc = upload(tag_ids=[draft.id, 999, legal.id])
        assert doc.tag_ids == [draft.id, legal.id]

    def test_unknown_folder(self, upload):
        with pytest.raises(NotFoundError, match="Folder not found"):
            upload(folder_id=404)

    def test_in_folder(self, folders, upload):
        folder = folders.create("Contracts")
        doc = upload(folder_id=folder.id)
        assert doc.folder_id == folder.id

    def test_too_large(self, documents, make_file):
        with pytest.raises(ValidationError):
            documents.create(
                make_file(size=2 * 1024 * 1024),
                DocumentUploadOptions(category=DocumentCategory.OTHER),
                uploaded_by=1,
            )
        assert documents.list() == []

    def test_failed_url_write_leaves_no_document(self, documents, repo, make_file, monkeypatch):
        def fail(document):
            raise RecordError("disk full", record_type="document", operation="update")

        monkeypatch.setattr(repo, "save_document", fail)
        with pytest.raises(RecordError, match="disk full"):
            documents.create(
                make_file(), DocumentUploadOptions(category=DocumentCategory.OTHER), uploaded_by=1
            )
        assert documents.list() == []

    def test_progress_sequence(self, documents, make_file):
        seen = []
        documents.create(
            make_file(name="a.pdf"),
            DocumentUploadOptions(category=DocumentCategory.REPORTS),
            uploaded_by=1,
            on_progress=lambda p: seen.append((p.progress, p.status)),
        )
        assert seen[0] == (0, "uploading")
        assert [p for p, s in seen if s == "uploading"] == [0, 10, 20, 30, 40, 50, 60, 70, 80, 90, 100]
        assert seen[-2:] == [(100, "processing"), (100, "completed")]

    def test_get_missing_returns_none(self, documents):
        assert documents.get(12345) is None


class TestVersionWorkflow:
    def test_two_uploads(self, documents, upload, make_file):
        doc = upload("drawing.pdf", size=100)
        documents.upload_new_version(doc.id, make_file("drawing-rev1.pdf", size=200), uploaded_by=2)
        latest = documents.upload_new_version(
            doc.id, make_file("drawing-rev2.pdf", size=300), uploaded_by=3, change_log="Revised levels"
        )
        assert latest.version == "1.2"
        assert latest.change_log == "Revised levels"

        doc = documents.get(doc.id)
        assert [(v.version, v.is_active) for v in doc.versions] == [
            ("1.0", False), ("1.1", False), ("1.2", True),
        ]
        assert doc.current_version.version == "1.2"
        assert doc.file_size == 300
        assert doc.file_name == latest.file_name
        assert doc.original_name == "drawing.pdf"
        assert doc.updated_at == latest.uploaded_at
        _assert_single_active(doc)

    def test_prior_versions_unchanged_except_active(self, documents, upload, make_file):
        doc = upload("method-statement.pdf", size=100)
        before = documents.get(doc.id).versions[0]
        documents.upload_new_version(doc.id, make_file("method-statement.pdf", size=999), uploaded_by=1)
        after = documents.get(doc.id).versions[0]
        assert after.model_dump(exclude={"is_active"}) == before.model_dump(exclude={"is_active"})
        assert after.is_active is False

    def test_list_versions(self, documents, upload, make_file):
        doc = upload()
        documents.upload_new_version(doc.id, make_file(), uploaded_by=1)
        assert [v.version for v in documents.list_versions(doc.id)] == ["1.0", "1.1"]
        assert documents.list_versions(999) == []

    def test_missing_document(self, documents, make_file):
        with pytest.raises(NotFoundError, match="Document not found"):
            documents.upload_new_version(999, make_file(), uploaded_by=1)

    def test_oversized_version_leaves_document_untouched(self, documents, upload, make_file):
        doc = upload()
        with pytest.raises(ValidationError):
            documents.upload_new_version(doc.id, make_file(size=5 * 1024 * 1024), uploaded_by=1)
        assert [v.version for v in documents.get(doc.id).versions] == ["1.0"]

    def test_progress_completes(self, documents, upload, make_file):
        doc = upload()
        seen = []
        documents.upload_new_version(doc.id, make_file(), uploaded_by=1, on_progress=seen.append)
        assert seen[-1].status == "completed"
        assert seen[-1].progress == 100


class TestUpdate:
    def test_only_given_fields_change(self, documents, upload):
        doc = upload(description="Original", project_id=4)
        updated = documents.update(doc.id, DocumentUpdate(status=DocumentStatus.ARCHIVED))
        assert updated.status == DocumentStatus.ARCHIVED
        assert updated.description == "Original"
        assert updated.project_id == 4
        assert updated.updated_at >= doc.updated_at

    def test_explicit_none_clears_folder(self, documents, folders, upload):
        folder = folders.create("Permits")
        doc = upload(folder_id=folder.id)
        updated = documents.update(doc.id, DocumentUpdate(folder_id=None))
        assert updated.folder_id is None

    def test_replace_tags(self, documents, tags, upload):
        a = tags.create("Important", "#ef4444")
        b = tags.create("Review", "#dc2626")
        doc = upload(tag_ids=[a.id])
        updated = documents.update(doc.id, DocumentUpdate(tag_ids=[b.id, a.id]))
        assert updated.tag_ids == [b.id, a.id]
        assert documents.get(doc.id).tag_ids == [b.id, a.id]

    def test_versions_not_touched(self, documents, upload, make_file):
        doc = upload()
        documents.upload_new_version(doc.id, make_file(), uploaded_by=1)
        updated = documents.update(doc.id, DocumentUpdate(description="x"))
        assert [v.version for v in updated.versions] == ["1.0", "1.1"]
        _assert_single_active(updated)

    def test_metadata(self, documents, upload):
        doc = upload()
        updated = documents.update(doc.id, DocumentUpdate(metadata={"sheet": "A-101"}))
        assert documents.get(updated.id).metadata == {"sheet": "A-101"}

    def test_missing_document(self, documents):
        with pytest.raises(NotFoundError, match="Document not found"):
            documents.update(999, DocumentUpdate(description="x"))

    def test_unknown_folder(self, documents, upload):
        doc = upload()
        with pytest.raises(NotFoundError, match="Folder not found"):
            documents.update(doc.id, DocumentUpdate(folder_id=404))


class TestDelete:
    def test_delete(self, documents, upload):
        doc = upload()
        documents.delete(doc.id)
        assert documents.get(doc.id) is None
        assert documents.list() == []

    def test_delete_missing(self, documents):
        with pytest.raises(NotFoundError):
            documents.delete(1)


class TestDocumentModel:
    def test_current_version_serialized(self, upload):
        doc = upload()
        dumped = doc.model_dump()
        assert dumped["current_version"]["version"] == "1.0"

    def test_file_type_from_name(self):
        assert FileType.from_file_name("PLAN.PDF") == FileType.PDF
        assert FileType.from_file_name("README") == FileType.UNKNOWN

    def test_uploaded_file_defaults(self):
        f = UploadedFile(name="x.bin", size=0)
        assert f.mime_type == "application/octet-stream"

    def test_created_timestamps_are_aware(self, upload):
        doc = upload()
        assert doc.uploaded_at.tzinfo is not None
        assert doc.uploaded_at <= datetime.now(timezone.utc)
