"""Unit tests for buildoffice.documents.seed — default tags and folder tree."""

from buildoffice.documents.seed import DEFAULT_FOLDERS, DEFAULT_TAGS, seed_defaults


class TestSeedDefaults:
    def test_creates_tags_and_folders(self, repo, tags, folders):
        added = seed_defaults(repo)
        assert added == {"tags": len(DEFAULT_TAGS), "folders": len(DEFAULT_FOLDERS)}
        assert [(t.name, t.color) for t in tags.list()] == DEFAULT_TAGS

        paths = sorted(f.path for f in folders.list())
        assert "/Projects/Water Treatment Plant" in paths
        assert "/Contracts/Client Contracts" in paths
        assert "/Technical Drawings" in paths
        assert [r.name for r in folders.tree()] == [
            "Projects", "Contracts", "Financial Documents", "Technical Drawings",
        ]

    def test_idempotent(self, repo, folders):
        seed_defaults(repo)
        assert seed_defaults(repo) == {"tags": 0, "folders": 0}
        assert len(folders.list()) == len(DEFAULT_FOLDERS)
