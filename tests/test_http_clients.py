"""
HTTP clients against httpx.MockTransport
"""

import json

import httpx
import pytest

from slugpush.api.exceptions import PlatformError, UploadError
from slugpush.cache import RemoteCacheStore
from slugpush.clients import HttpBuildService, HttpPlatformClient
from slugpush.models import BuildConfig, CacheEntry, FileEntry, Manifest
from slugpush.storage import HttpStorage, StorageFactory
from slugpush.utils.hash_utils import content_slot, hash_bytes
from conftest import SLUG_URL


@pytest.fixture
def build_config():
    return BuildConfig(
        api_key="secret-key",
        consumer_user_agent="slugpush/test",
        app_name="my-app",
        app_user="ci@example.com",
        read_cache=False,
        env={"FOO": "baz"},
    )


class TestPlatformClient:
    @pytest.mark.asyncio
    async def test_get_user_info_sends_bearer_token(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers["Authorization"]
            seen["path"] = request.url.path
            return httpx.Response(200, json={"email": "ci@example.com"})

        async with HttpPlatformClient("secret-key", "https://api.test",
                                      transport=httpx.MockTransport(handler)) as client:
            user = await client.get_user_info()

        assert user.email == "ci@example.com"
        assert seen == {"auth": "Bearer secret-key", "path": "/account"}

    @pytest.mark.asyncio
    async def test_release_to_app(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json={"version": 12, "app": {"web_url": "https://my-app.test/"}})

        async with HttpPlatformClient("secret-key", "https://api.test",
                                      transport=httpx.MockTransport(handler)) as client:
            info = await client.release_to_app("my-app", SLUG_URL, "Build #7")

        assert info.version == "v12"
        assert info.web_url == "https://my-app.test/"
        assert seen["path"] == "/apps/my-app/releases"
        assert seen["body"] == {"slug_url": SLUG_URL, "description": "Build #7"}

    @pytest.mark.asyncio
    async def test_http_error_becomes_platform_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"message": "Invalid credentials provided."})

        async with HttpPlatformClient("bad-key", "https://api.test",
                                      transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(PlatformError) as exc_info:
                await client.get_user_info()

        assert exc_info.value.status_code == 401
        assert "Invalid credentials" in str(exc_info.value)


class TestBuildService:
    @pytest.mark.asyncio
    async def test_build_request_and_stream(self, tmp_path, build_config):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "POST":
                seen["payload"] = json.loads(request.content)
                seen["user_agent"] = request.headers["User-Agent"]
                return httpx.Response(
                    200,
                    headers={"X-Manifest-Id": "m-1"},
                    text="-----> Building\n-----> Done\n",
                )
            seen["exit_path"] = request.url.path
            return httpx.Response(200, text="0\n")

        manifest = Manifest(base_dir=tmp_path, entries=(FileEntry("app.py", "abc", 3),))
        service = HttpBuildService("secret-key", "https://build.test", transport=httpx.MockTransport(handler))

        async with service:
            stream = await service.start_build(manifest, build_config, "https://example.com/bp.tgz")
            async with stream:
                lines = [line async for line in stream]
                status = await stream.exit_status()

        assert lines == ["-----> Building", "-----> Done"]
        assert status == 0
        assert seen["exit_path"] == "/exit/m-1"
        assert seen["user_agent"] == "slugpush/test"
        assert seen["payload"]["manifest"] == {"app.py": {"hash": "abc", "size": 3}}
        assert seen["payload"]["env"] == {"FOO": "baz"}
        assert seen["payload"]["cache"] == {"read": False, "write": True}
        assert seen["payload"]["buildpack"] == "https://example.com/bp.tgz"

    @pytest.mark.asyncio
    async def test_exit_status_and_slug_headers(self, tmp_path, build_config):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, headers={"X-Exit-Status": "3", "X-Slug-Url": SLUG_URL}, text="")

        manifest = Manifest(base_dir=tmp_path)
        async with HttpBuildService("k", "https://build.test", transport=httpx.MockTransport(handler)) as service:
            stream = await service.start_build(manifest, build_config)
            assert stream.artifact_ref == SLUG_URL
            assert await stream.exit_status() == 3
            await stream.close()

    @pytest.mark.asyncio
    async def test_rejected_build(self, tmp_path, build_config):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="maintenance")

        async with HttpBuildService("k", "https://build.test", transport=httpx.MockTransport(handler)) as service:
            with pytest.raises(PlatformError) as exc_info:
                await service.start_build(Manifest(base_dir=tmp_path), build_config)

        assert exc_info.value.status_code == 503


class TestHttpStorage:
    @pytest.mark.asyncio
    async def test_upload_puts_file_into_its_slot(self, tmp_path):
        seen = {}
        local = tmp_path / "app.py"
        local.write_bytes(b"print('hi')\n")
        slot = content_slot(hash_bytes(b"print('hi')\n"))

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["body"] = request.content
            return httpx.Response(200, json={"url": "https://build.test/file/ref"})

        storage = StorageFactory().create("http", {
            "endpoint": "https://build.test",
            "api_key": "k",
            "transport": httpx.MockTransport(handler),
        })
        async with storage:
            ref = await storage.upload(local, slot)

        assert isinstance(storage, HttpStorage)
        assert ref == "https://build.test/file/ref"
        assert seen == {"method": "PUT", "path": f"/file/{slot}", "body": b"print('hi')\n"}

    @pytest.mark.asyncio
    async def test_upload_failure(self, tmp_path):
        local = tmp_path / "a.txt"
        local.write_text("a")

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        async with HttpStorage({"endpoint": "https://build.test",
                                "transport": httpx.MockTransport(handler)}) as storage:
            with pytest.raises(UploadError):
                await storage.upload(local, "aa/aaaa")


class TestRemoteCacheStore:
    @pytest.mark.asyncio
    async def test_missing_cache_is_empty(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404)

        async with RemoteCacheStore("my-app", "k", "https://build.test",
                                    transport=httpx.MockTransport(handler)) as store:
            assert await store.snapshot() == {}

    @pytest.mark.asyncio
    async def test_snapshot_and_put(self):
        writes = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return httpx.Response(200, json={"h1": {"remote_ref": "ref1", "path": "a.txt"}})
            writes.append((request.url.path, json.loads(request.content)))
            return httpx.Response(204)

        async with RemoteCacheStore("my-app", "k", "https://build.test",
                                    transport=httpx.MockTransport(handler)) as store:
            snapshot = await store.snapshot()
            await store.put(CacheEntry("h2", "ref2", "b.txt"))

        assert snapshot == {"h1": CacheEntry("h1", "ref1", "a.txt")}
        assert writes == [("/cache/my-app/h2", {"remote_ref": "ref2", "path": "b.txt"})]

    @pytest.mark.asyncio
    async def test_malformed_snapshot(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"h1": "ref1"})

        async with RemoteCacheStore("my-app", "k", "https://build.test",
                                    transport=httpx.MockTransport(handler)) as store:
            with pytest.raises(PlatformError, match="malformed"):
                await store.snapshot()


class BrokenBuildOutput(httpx.AsyncByteStream):
    """Response body that drops the connection after its first line"""

    async def __aiter__(self):
        yield b"-----> Building\n"
        raise httpx.ReadError("connection reset by peer")


class TestMalformedResponses:
    @pytest.mark.asyncio
    async def test_html_account_page(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>maintenance</html>")

        async with HttpPlatformClient("k", "https://api.test", transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(PlatformError, match="malformed response"):
                await client.get_user_info()

    @pytest.mark.asyncio
    async def test_account_without_email(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=["not", "an", "account"])

        async with HttpPlatformClient("k", "https://api.test", transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(PlatformError, match="no email"):
                await client.get_user_info()

    @pytest.mark.asyncio
    async def test_connection_lost_during_build_output(self, tmp_path, build_config):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, stream=BrokenBuildOutput())

        async with HttpBuildService("k", "https://build.test", transport=httpx.MockTransport(handler)) as service:
            stream = await service.start_build(Manifest(base_dir=tmp_path), build_config)
            with pytest.raises(PlatformError, match="Reading build output failed"):
                async with stream:
                    async for _ in stream:
                        pass

    @pytest.mark.asyncio
    async def test_non_numeric_exit_status(self, tmp_path, build_config):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "POST":
                return httpx.Response(200, headers={"X-Manifest-Id": "m-1"}, text="-----> Done\n")
            return httpx.Response(200, text="<html>gateway</html>")

        async with HttpBuildService("k", "https://build.test", transport=httpx.MockTransport(handler)) as service:
            stream = await service.start_build(Manifest(base_dir=tmp_path), build_config)
            async with stream:
                assert [line async for line in stream] == ["-----> Done"]
                with pytest.raises(PlatformError, match="invalid exit status"):
                    await stream.exit_status()


class TestStorageFactory:
    def test_registration_is_local_to_one_factory(self):
        first = StorageFactory()
        first.register_backend("memory", HttpStorage)

        assert "memory" in first.get_supported_types()
        assert "memory" not in StorageFactory().get_supported_types()

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Unsupported storage type: s3"):
            StorageFactory().create("s3")

    def test_explicit_backends(self):
        factory = StorageFactory({"http": HttpStorage})

        assert factory.get_supported_types() == ["http"]
