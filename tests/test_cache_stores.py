"""
Local cache stores
"""

import json

import pytest

from slugpush.cache import FileCacheStore, InMemoryCacheStore
from slugpush.models import CacheEntry


class TestFileCacheStore:
    @pytest.mark.asyncio
    async def test_entries_persist_across_instances(self, tmp_path):
        store = FileCacheStore("my-app", tmp_path)
        await store.put(CacheEntry("h1", "ref1", "a.txt"))
        await store.put(CacheEntry("h2", "ref2"))

        reopened = FileCacheStore("my-app", tmp_path)

        assert await reopened.snapshot() == {
            "h1": CacheEntry("h1", "ref1", "a.txt"),
            "h2": CacheEntry("h2", "ref2"),
        }
        assert json.loads((tmp_path / "my-app.json").read_text())["app"] == "my-app"

    @pytest.mark.asyncio
    async def test_scoped_per_application(self, tmp_path):
        await FileCacheStore("app-one", tmp_path).put(CacheEntry("h1", "ref1"))

        assert await FileCacheStore("app-two", tmp_path).snapshot() == {}

    @pytest.mark.asyncio
    async def test_corrupt_file_reads_as_empty(self, tmp_path):
        (tmp_path / "my-app.json").write_text("{not json")

        assert await FileCacheStore("my-app", tmp_path).snapshot() == {}

    @pytest.mark.asyncio
    async def test_wrongly_shaped_file_reads_as_empty(self, tmp_path):
        (tmp_path / "my-app.json").write_text('{"entries": {"h1": "not-an-object"}}')

        assert await FileCacheStore("my-app", tmp_path).snapshot() == {}

    @pytest.mark.asyncio
    async def test_put_into_unusable_directory_raises_oserror(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")

        with pytest.raises(OSError):
            await FileCacheStore("my-app", blocker).put(CacheEntry("h1", "ref1"))

    @pytest.mark.asyncio
    async def test_get(self, tmp_path):
        store = FileCacheStore("my-app", tmp_path)
        await store.put(CacheEntry("h1", "ref1"))

        assert (await store.get("h1")).remote_ref == "ref1"
        assert await store.get("missing") is None


class TestInMemoryCacheStore:
    @pytest.mark.asyncio
    async def test_snapshot_is_a_copy(self):
        store = InMemoryCacheStore("my-app", {"h1": CacheEntry("h1", "ref1")})

        snapshot = await store.snapshot()
        await store.put(CacheEntry("h2", "ref2"))

        assert list(snapshot) == ["h1"]
        assert "h2" in store
        assert store.snapshot_calls == 1
        assert store.put_calls == 1
