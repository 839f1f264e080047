"""
Diff classification against a cache snapshot
"""

from pathlib import Path

from slugpush.core.diff_engine import DiffEngine
from slugpush.models import CacheEntry, DiffStatus, FileEntry, Manifest


def make_manifest(*entries):
    return Manifest(base_dir=Path("/workspace"), entries=tuple(FileEntry(p, h, 10) for p, h in entries))


class TestDiffEngine:
    def test_empty_cache_marks_everything_new(self):
        manifest = make_manifest(("a.txt", "h1"), ("b.txt", "h2"))

        result = DiffEngine().diff(manifest, {})

        assert result.paths_with(DiffStatus.NEW) == ["a.txt", "b.txt"]
        assert result.upload_count == 2
        assert result.total_files == 2

    def test_cached_hash_is_unchanged(self):
        manifest = make_manifest(("a.txt", "h1"), ("b.txt", "h2"))
        snapshot = {"h1": CacheEntry("h1", "ref1", "a.txt")}

        result = DiffEngine().diff(manifest, snapshot)

        assert result.classifications == {"a.txt": DiffStatus.UNCHANGED, "b.txt": DiffStatus.NEW}
        assert [e.path for e in result.to_upload] == ["b.txt"]

    def test_changed_content_at_known_path_is_modified(self):
        manifest = make_manifest(("a.txt", "h1-new"))
        snapshot = {"h1": CacheEntry("h1", "ref1", "a.txt")}

        result = DiffEngine().diff(manifest, snapshot)

        assert result.classifications["a.txt"] == DiffStatus.MODIFIED
        assert result.upload_count == 1

    def test_known_content_under_another_path_is_unchanged(self):
        manifest = make_manifest(("renamed.txt", "h1"))
        snapshot = {"h1": CacheEntry("h1", "ref1", "original.txt")}

        result = DiffEngine().diff(manifest, snapshot)

        assert result.classifications["renamed.txt"] == DiffStatus.UNCHANGED
        assert result.upload_count == 0

    def test_read_cache_disabled_ignores_snapshot(self):
        manifest = make_manifest(("a.txt", "h1"))
        snapshot = {"h1": CacheEntry("h1", "ref1", "a.txt")}

        result = DiffEngine().diff(manifest, snapshot, read_cache=False)

        assert result.classifications["a.txt"] == DiffStatus.NEW

    def test_upload_count_counts_distinct_contents(self):
        manifest = make_manifest(("a/logo.png", "same"), ("b/logo.png", "same"), ("c.txt", "other"))

        result = DiffEngine().diff(manifest, None)

        assert len(result.to_upload) == 3
        assert result.upload_count == 2
        assert result.to_dict()["new"] == 3
