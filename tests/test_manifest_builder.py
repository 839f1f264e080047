"""
Manifest building: scanning, fingerprinting, diff-start
"""

import hashlib

import pytest

from slugpush.api.exceptions import ScanError
from slugpush.core.manifest_builder import ManifestBuilder
from slugpush.models import EventType, FileEntry, Manifest
from conftest import write_files


class TestManifestBuilder:
    @pytest.mark.asyncio
    async def test_entries_are_sorted_and_hashed(self, workspace, bus, recorder):
        manifest = await ManifestBuilder(bus).build(workspace)

        assert [e.path for e in manifest] == ["Procfile", "app.py", "requirements.txt", "static/style.css"]
        app = manifest.get("app.py")
        assert app.checksum == hashlib.sha256(b"print('hello')\n").hexdigest()
        assert app.size == len(b"print('hello')\n")

    @pytest.mark.asyncio
    async def test_emits_diff_start_with_file_count(self, workspace, bus, recorder):
        await ManifestBuilder(bus).build(workspace, excludes="static/")

        assert recorder.types == [EventType.DIFF_START]
        assert recorder.payloads(EventType.DIFF_START) == [3]

    @pytest.mark.asyncio
    async def test_hashing_is_deterministic(self, workspace):
        first = await ManifestBuilder().build(workspace)
        second = await ManifestBuilder().build(workspace)

        assert first.to_build_dict() == second.to_build_dict()

    @pytest.mark.asyncio
    async def test_identical_content_shares_a_hash(self, tmp_path):
        write_files(tmp_path, {"a/logo.txt": "same", "b/logo.txt": "same"})

        manifest = await ManifestBuilder().build(tmp_path)

        assert len(manifest) == 2
        assert len(manifest.checksums()) == 1

    @pytest.mark.asyncio
    async def test_missing_base_dir(self, tmp_path, bus, recorder):
        with pytest.raises(ScanError):
            await ManifestBuilder(bus).build(tmp_path / "missing")

        assert recorder.events == []

    @pytest.mark.asyncio
    async def test_malformed_glob(self, workspace, bus, recorder):
        with pytest.raises(ScanError) as exc_info:
            await ManifestBuilder(bus).build(workspace, includes="[unclosed")

        assert "[unclosed" in str(exc_info.value)
        assert recorder.events == []


class TestManifestModel:
    def test_duplicate_paths_rejected(self, tmp_path):
        entry = FileEntry("a.txt", "00", 1)
        with pytest.raises(ValueError):
            Manifest(base_dir=tmp_path, entries=(entry, entry))

    def test_build_dict_shape(self, tmp_path):
        manifest = Manifest(base_dir=tmp_path, entries=(FileEntry("b", "22", 2), FileEntry("a", "11", 1)))

        assert manifest.to_build_dict() == {"a": {"hash": "11", "size": 1}, "b": {"hash": "22", "size": 2}}
        assert manifest.total_size == 3
