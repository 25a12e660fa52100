"""Unit tests for buildoffice.documents.folders — tree, rename/move, delete guards."""

import pytest

from buildoffice.documents.models import DocumentUpdate, FolderUpdate
from buildoffice.engine.errors import FolderNotEmptyError, NotFoundError, ValidationError


class TestCreate:
    def test_root_and_child_paths(self, folders):
        a = folders.create("A")
        b = folders.create("B", parent_id=a.id)
        assert a.path == "/A"
        assert b.path == "/A/B"
        assert b.parent_id == a.id
        assert b.document_count == 0

    def test_unknown_parent(self, folders):
        with pytest.raises(NotFoundError, match="Folder not found"):
            folders.create("X", parent_id=77)

    @pytest.mark.parametrize("name", ["", "   ", "a/b"])
    def test_invalid_names(self, folders, name):
        with pytest.raises(ValidationError):
            folders.create(name)

    def test_name_is_stripped(self, folders):
        assert folders.create("  Permits ").path == "/Permits"


class TestDeleteGuards:
    def test_scenario_parent_then_child(self, folders):
        a = folders.create("A")
        b = folders.create("B", parent_id=a.id)

        with pytest.raises(FolderNotEmptyError, match="Cannot delete folder with subfolders") as exc_info:
            folders.delete(a.id)
        assert exc_info.value.reason == "subfolders"

        folders.delete(b.id)
        folders.delete(a.id)
        assert folders.list() == []

    def test_folder_with_documents(self, folders, upload):
        folder = folders.create("Invoices")
        upload(folder_id=folder.id)
        with pytest.raises(FolderNotEmptyError, match="Cannot delete folder with documents") as exc_info:
            folders.delete(folder.id)
        assert exc_info.value.reason == "documents"
        assert folders.get(folder.id) is not None

    def test_documents_checked_before_subfolders(self, folders, upload):
        parent = folders.create("P")
        folders.create("C", parent_id=parent.id)
        upload(folder_id=parent.id)
        with pytest.raises(FolderNotEmptyError) as exc_info:
            folders.delete(parent.id)
        assert exc_info.value.reason == "documents"

    def test_succeeds_after_document_moves_out(self, folders, documents, upload):
        folder = folders.create("Temp")
        doc = upload(folder_id=folder.id)
        documents.update(doc.id, DocumentUpdate(folder_id=None))
        folders.delete(folder.id)
        assert folder.id not in [f.id for f in folders.list()]

    def test_missing(self, folders):
        with pytest.raises(NotFoundError):
            folders.delete(999)


class TestListAndTree:
    def test_document_counts(self, folders, upload):
        a = folders.create("A")
        b = folders.create("B")
        upload(folder_id=a.id)
        upload(folder_id=a.id)
        upload()
        counts = {f.name: f.document_count for f in folders.list()}
        assert counts == {"A": 2, "B": 0}
        assert b.id in [f.id for f in folders.list()]

    def test_tree(self, folders):
        projects = folders.create("Projects")
        plant = folders.create("Water Treatment Plant", parent_id=projects.id)
        folders.create("Drawings", parent_id=plant.id)
        folders.create("Contracts")

        roots = folders.tree()
        assert [r.name for r in roots] == ["Projects", "Contracts"]
        assert [c.name for c in roots[0].children] == ["Water Treatment Plant"]
        assert [c.name for c in roots[0].children[0].children] == ["Drawings"]
        assert roots[1].children == []


class TestUpdate:
    def test_rename_repaths_descendants(self, folders):
        a = folders.create("A")
        b = folders.create("B", parent_id=a.id)
        c = folders.create("C", parent_id=b.id)

        renamed = folders.update(a.id, FolderUpdate(name="Alpha"))
        assert renamed.path == "/Alpha"
        assert folders.get(b.id).path == "/Alpha/B"
        assert folders.get(c.id).path == "/Alpha/B/C"

    def test_move(self, folders):
        a = folders.create("A")
        x = folders.create("X")
        b = folders.create("B", parent_id=a.id)
        moved = folders.update(b.id, FolderUpdate(parent_id=x.id))
        assert moved.parent_id == x.id
        assert moved.path == "/X/B"

    def test_move_to_root(self, folders):
        a = folders.create("A")
        b = folders.create("B", parent_id=a.id)
        moved = folders.update(b.id, FolderUpdate(parent_id=None))
        assert moved.parent_id is None
        assert moved.path == "/B"

    def test_rename_keeps_parent(self, folders):
        a = folders.create("A")
        b = folders.create("B", parent_id=a.id)
        renamed = folders.update(b.id, FolderUpdate(name="Beta"))
        assert renamed.parent_id == a.id
        assert renamed.path == "/A/Beta"

    def test_move_into_descendant_rejected(self, folders):
        a = folders.create("A")
        b = folders.create("B", parent_id=a.id)
        with pytest.raises(ValidationError):
            folders.update(a.id, FolderUpdate(parent_id=b.id))
        with pytest.raises(ValidationError):
            folders.update(a.id, FolderUpdate(parent_id=a.id))
        assert folders.get(a.id).parent_id is None

    def test_unknown_folder_or_parent(self, folders):
        a = folders.create("A")
        with pytest.raises(NotFoundError):
            folders.update(999, FolderUpdate(name="x"))
        with pytest.raises(NotFoundError):
            folders.update(a.id, FolderUpdate(parent_id=999))
