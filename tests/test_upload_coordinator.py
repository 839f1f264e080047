"""
Upload coordination: dedupe, cache writes, partial failure
"""

import pytest

from slugpush.api.exceptions import PlatformError, UploadError
from slugpush.cache import InMemoryCacheStore
from slugpush.core.diff_engine import DiffEngine
from slugpush.core.manifest_builder import ManifestBuilder
from slugpush.core.upload_coordinator import UploadCoordinator
from slugpush.models import EventType
from slugpush.utils.hash_utils import content_slot
from conftest import MemoryStorage, write_files


async def plan(base_dir, cache):
    manifest = await ManifestBuilder().build(base_dir)
    return manifest, DiffEngine().diff(manifest, await cache.snapshot())


class BrokenCacheStore(InMemoryCacheStore):
    async def put(self, entry):
        raise PlatformError("Writing cache entry failed: HTTP 503", status_code=503)


class TestUploadCoordinator:
    @pytest.mark.asyncio
    async def test_uploads_and_records_every_new_file(self, workspace, storage, cache, bus, recorder):
        manifest, diff = await plan(workspace, cache)

        result = await UploadCoordinator(storage, cache, bus).upload(manifest, diff)

        assert result.upload_count == 4
        assert len(cache) == 4
        for entry in manifest:
            assert storage.blobs[content_slot(entry.checksum)] == manifest.local_path(entry).read_bytes()
        assert recorder.types == [EventType.UPLOADS_START, EventType.UPLOADS_END]
        assert recorder.payloads(EventType.UPLOADS_START) == [4]
        assert recorder.payloads(EventType.UPLOADS_END) == [4]

    @pytest.mark.asyncio
    async def test_identical_content_is_uploaded_once(self, tmp_path, storage, cache, bus, recorder):
        write_files(tmp_path, {"a/logo.txt": "same bytes", "b/logo.txt": "same bytes"})
        manifest, diff = await plan(tmp_path, cache)

        result = await UploadCoordinator(storage, cache, bus).upload(manifest, diff)

        assert storage.uploads == ["logo.txt"]
        assert result.upload_count == 1
        assert recorder.payloads(EventType.UPLOADS_START) == [1]

    @pytest.mark.asyncio
    async def test_nothing_to_upload_emits_nothing(self, workspace, storage, cache, bus, recorder):
        manifest, diff = await plan(workspace, cache)
        await UploadCoordinator(storage, cache).upload(manifest, diff)

        manifest, diff = await plan(workspace, cache)
        result = await UploadCoordinator(storage, cache, bus).upload(manifest, diff)

        assert result.upload_count == 0
        assert recorder.events == []

    @pytest.mark.asyncio
    async def test_write_cache_disabled_still_uploads(self, workspace, storage, cache):
        manifest, diff = await plan(workspace, cache)

        await UploadCoordinator(storage, cache).upload(manifest, diff, write_cache=False)

        assert len(storage.uploads) == 4
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_partial_failure_keeps_earlier_uploads_cached(self, tmp_path, cache, bus, recorder):
        write_files(tmp_path, {"file1.txt": "one", "file2.txt": "two", "file3.txt": "three"})
        storage = MemoryStorage(fail_names={"file2.txt": 1})
        manifest, diff = await plan(tmp_path, cache)

        with pytest.raises(UploadError):
            await UploadCoordinator(storage, cache, bus, max_workers=1).upload(manifest, diff)

        assert storage.uploads == ["file1.txt"]
        assert [e.path for e in (await cache.snapshot()).values()] == ["file1.txt"]
        assert EventType.UPLOADS_END not in recorder.types

        # Retry picks up only what is still missing
        manifest, diff = await plan(tmp_path, cache)
        assert [e.path for e in diff.to_upload] == ["file2.txt", "file3.txt"]

        await UploadCoordinator(storage, cache, max_workers=1).upload(manifest, diff)
        assert storage.uploads == ["file1.txt", "file2.txt", "file3.txt"]

    @pytest.mark.asyncio
    async def test_cache_write_failure_is_an_upload_error(self, workspace, storage):
        cache = BrokenCacheStore("my-app")
        manifest, diff = await plan(workspace, cache)

        with pytest.raises(UploadError) as exc_info:
            await UploadCoordinator(storage, cache).upload(manifest, diff)

        assert exc_info.value.content_hash is not None

    def test_group_by_content(self, tmp_path):
        from slugpush.models import FileEntry
        entries = [FileEntry("a", "h1", 1), FileEntry("b", "h2", 1), FileEntry("c", "h1", 1)]

        groups = UploadCoordinator.group_by_content(entries)

        assert list(groups) == ["h1", "h2"]
        assert [e.path for e in groups["h1"]] == ["a", "c"]
