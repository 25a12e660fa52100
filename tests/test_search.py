"""Unit tests for buildoffice.documents.search — filtering and sorting."""

from datetime import datetime, timedelta, timezone

import pytest

from buildoffice.documents.models import (
    Document,
    DocumentCategory,
    DocumentSearchFilters,
    DocumentStatus,
    FileType,
    Tag,
)
from buildoffice.documents.search import filter_documents

BASE = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


def _doc(doc_id, name, *, size=100, category=DocumentCategory.OTHER, day=0, tags=(), **fields):
    return Document(
        id=doc_id,
        file_name=f"1700000000000-{name}",
        original_name=name,
        file_size=size,
        file_type=FileType.from_file_name(name),
        mime_type="application/octet-stream",
        category=category,
        uploaded_by=fields.pop("uploaded_by", 1),
        uploaded_at=BASE + timedelta(days=day),
        updated_at=BASE + timedelta(days=day),
        tags=[Tag(id=t, name=f"t{t}", color="#000000") for t in tags],
        **fields,
    )


@pytest.fixture
def corpus():
    return [
        _doc(1, "contract.pdf", size=300, category=DocumentCategory.CONTRACTS, day=0, tags=(1,),
             description="Main supplier contract"),
        _doc(2, "site-photo.jpg", size=100, category=DocumentCategory.PHOTOS, day=1, folder_id=5,
             uploaded_by=2),
        _doc(3, "Budget.xlsx", size=200, category=DocumentCategory.INVOICES, day=2, tags=(2, 3),
             status=DocumentStatus.ARCHIVED, project_id=9),
        _doc(4, "contract-annex.pdf", size=200, category=DocumentCategory.CONTRACTS, day=3, folder_id=5),
    ]


class TestFilters:
    def test_empty_filters_keep_insertion_order(self, corpus):
        assert [d.id for d in filter_documents(corpus)] == [1, 2, 3, 4]
        assert [d.id for d in filter_documents(corpus, DocumentSearchFilters())] == [1, 2, 3, 4]

    def test_query_matches_names_and_description(self, corpus):
        result = filter_documents(corpus, DocumentSearchFilters(query="CONTRACT"))
        assert [d.id for d in result] == [1, 4]
        result = filter_documents(corpus, DocumentSearchFilters(query="supplier"))
        assert [d.id for d in result] == [1]

    def test_equality_filters(self, corpus):
        f = DocumentSearchFilters
        assert [d.id for d in filter_documents(corpus, f(category=DocumentCategory.CONTRACTS))] == [1, 4]
        assert [d.id for d in filter_documents(corpus, f(file_type=FileType.PDF))] == [1, 4]
        assert [d.id for d in filter_documents(corpus, f(status=DocumentStatus.ARCHIVED))] == [3]
        assert [d.id for d in filter_documents(corpus, f(folder_id=5))] == [2, 4]
        assert [d.id for d in filter_documents(corpus, f(project_id=9))] == [3]
        assert [d.id for d in filter_documents(corpus, f(uploaded_by=2))] == [2]

    def test_filters_combine(self, corpus):
        result = filter_documents(
            corpus, DocumentSearchFilters(folder_id=5, category=DocumentCategory.CONTRACTS)
        )
        assert [d.id for d in result] == [4]

    def test_date_range_inclusive(self, corpus):
        result = filter_documents(
            corpus,
            DocumentSearchFilters(date_from=BASE + timedelta(days=1), date_to=BASE + timedelta(days=2)),
        )
        assert [d.id for d in result] == [2, 3]

    def test_naive_dates_treated_as_utc(self, corpus):
        result = filter_documents(corpus, DocumentSearchFilters(date_from=datetime(2026, 3, 3, 9, 0)))
        assert [d.id for d in result] == [3, 4]

    def test_any_tag(self, corpus):
        assert [d.id for d in filter_documents(corpus, DocumentSearchFilters(tags=[3, 1]))] == [1, 3]
        assert filter_documents(corpus, DocumentSearchFilters(tags=[42])) == []

    def test_empty_tag_list_is_no_filter(self, corpus):
        assert len(filter_documents(corpus, DocumentSearchFilters(tags=[]))) == 4


class TestSort:
    def test_file_size_ties_keep_order(self, corpus):
        result = filter_documents(corpus, DocumentSearchFilters(sort_by="file_size"))
        assert [d.id for d in result] == [2, 3, 4, 1]

    def test_file_size_desc_stable(self, corpus):
        result = filter_documents(corpus, DocumentSearchFilters(sort_by="file_size", sort_order="desc"))
        assert [d.id for d in result] == [1, 3, 4, 2]

    def test_uploaded_at_desc(self, corpus):
        result = filter_documents(corpus, DocumentSearchFilters(sort_by="uploaded_at", sort_order="desc"))
        assert [d.id for d in result] == [4, 3, 2, 1]

    def test_name_case_insensitive(self, corpus):
        result = filter_documents(corpus, DocumentSearchFilters(sort_by="name"))
        assert [d.original_name for d in result] == [
            "Budget.xlsx", "contract-annex.pdf", "contract.pdf", "site-photo.jpg",
        ]

    def test_category(self, corpus):
        result = filter_documents(corpus, DocumentSearchFilters(sort_by="category"))
        assert [d.category.value for d in result] == ["Contracts", "Contracts", "Invoices", "Photos"]

    def test_result_is_permutation(self, corpus):
        for key in ("name", "uploaded_at", "file_size", "category"):
            result = filter_documents(corpus, DocumentSearchFilters(sort_by=key))
            assert sorted(d.id for d in result) == [1, 2, 3, 4]

    def test_invalid_sort_key_rejected(self):
        with pytest.raises(ValueError):
            DocumentSearchFilters(sort_by="color")

    def test_input_not_mutated(self, corpus):
        filter_documents(corpus, DocumentSearchFilters(sort_by="file_size"))
        assert [d.id for d in corpus] == [1, 2, 3, 4]


class TestServiceList:
    def test_list_through_service(self, documents, upload):
        upload("b.pdf", size=10)
        upload("a.pdf", size=20)
        assert [d.original_name for d in documents.list()] == ["b.pdf", "a.pdf"]
        ordered = documents.list(DocumentSearchFilters(sort_by="file_size", sort_order="desc"))
        assert [d.original_name for d in ordered] == ["a.pdf", "b.pdf"]
