"""Unit tests for buildoffice.engine.errors — Error hierarchy & serialization."""

import json

import pytest

from buildoffice.engine.errors import (
    BuildOfficeError,
    ConfigError,
    FolderNotEmptyError,
    NotFoundError,
    RecordError,
    ValidationError,
)


class TestBuildOfficeError:
    """Base error class tests."""

    def test_basic_creation(self):
        err = BuildOfficeError("something broke")
        assert err.message == "something broke"
        assert str(err) == "something broke"
        assert err.error_type == "BuildOfficeError"
        assert err.object_ref is None

    def test_to_dict(self):
        err = BuildOfficeError("fail", object_ref="documents.3", user_id=9)
        d = err.to_dict()
        assert d["error_type"] == "BuildOfficeError"
        assert d["message"] == "fail"
        assert d["object_ref"] == "documents.3"
        assert d["context"] == {"user_id": "9"}
        assert "timestamp" in d

    def test_to_json(self):
        parsed = json.loads(BuildOfficeError("fail").to_json())
        assert parsed["error_type"] == "BuildOfficeError"
        assert parsed["message"] == "fail"

    def test_repr(self):
        err = BuildOfficeError("fail", object_ref="folders.2")
        assert repr(err) == "BuildOfficeError: fail | object_ref=folders.2"


class TestSubclasses:
    @pytest.mark.parametrize("cls", [
        NotFoundError, FolderNotEmptyError, ValidationError, RecordError, ConfigError,
    ])
    def test_inherit_from_base(self, cls):
        err = cls("x")
        assert isinstance(err, BuildOfficeError)
        assert err.error_type == cls.__name__

    def test_not_found_fields(self):
        err = NotFoundError("Document not found", record_type="document", record_id=42)
        assert str(err) == "Document not found"
        d = err.to_dict()
        assert d["record_type"] == "document"
        assert d["record_id"] == 42

    def test_folder_not_empty_fields(self):
        err = FolderNotEmptyError("Cannot delete folder with documents", folder_id=3, reason="documents")
        assert err.folder_id == 3
        assert err.to_dict()["reason"] == "documents"

    def test_validation_errors_list(self):
        err = ValidationError("bad", validation_errors=[{"field": "color", "error": "x"}])
        assert err.to_dict()["validation_errors"] == [{"field": "color", "error": "x"}]

    def test_record_error_fields(self):
        err = RecordError("db down", record_type="document", operation="create")
        assert err.record_type == "document"
        assert err.operation == "create"

    def test_catchable_as_base(self):
        with pytest.raises(BuildOfficeError):
            raise NotFoundError("Folder not found")
