"""
Shared fixtures: in-memory fakes of the remote collaborators
"""

from pathlib import Path
from typing import Dict, List, Optional

import pytest

from slugpush.api.exceptions import PlatformError, UploadError
from slugpush.cache import InMemoryCacheStore
from slugpush.clients.base import BuildService, BuildStream, PlatformClient
from slugpush.core.event_bus import EventBus, EventRecorder
from slugpush.models import DeployOptions, ReleaseInfo, UserInfo
from slugpush.services import DeployService
from slugpush.storage.base import StorageBackend

SLUG_URL = "https://slugs.example.com/slugs/abc123.tgz"


class FakeBuildStream(BuildStream):
    """Build stream replaying canned lines"""

    def __init__(self, lines: List[str], exit_status: int = 0, artifact_ref: Optional[str] = None):
        self._lines = list(lines)
        self._exit_status = exit_status
        self._artifact_ref = artifact_ref
        self.closed = False

    @property
    def artifact_ref(self) -> Optional[str]:
        return self._artifact_ref

    async def lines(self):
        for line in self._lines:
            yield line

    async def exit_status(self) -> int:
        return self._exit_status

    async def close(self) -> None:
        self.closed = True


class FakeBuildService(BuildService):
    """Build service answering every build with the same output"""

    def __init__(self,
                 lines: Optional[List[str]] = None,
                 exit_status: int = 0,
                 slug_url: Optional[str] = SLUG_URL,
                 report_in_header: bool = False):
        self.lines = lines if lines is not None else ["-----> Python app detected", "-----> Compiled slug"]
        self.exit_status = exit_status
        self.slug_url = slug_url
        self.report_in_header = report_in_header
        self.builds = []
        self.streams: List[FakeBuildStream] = []

    async def start_build(self, manifest, config, buildpack_url=None) -> FakeBuildStream:
        self.builds.append({'manifest': manifest, 'config': config, 'buildpack_url': buildpack_url})

        lines = list(self.lines)
        artifact_ref = None
        if self.slug_url and self.exit_status == 0:
            if self.report_in_header:
                artifact_ref = self.slug_url
            else:
                lines.append(f"Success, slug is {self.slug_url}")

        stream = FakeBuildStream(lines, self.exit_status, artifact_ref)
        self.streams.append(stream)
        return stream


class FakePlatformClient(PlatformClient):
    """Platform recording releases in memory"""

    def __init__(self,
                 email: str = "ci@example.com",
                 web_url: Optional[str] = "https://my-app.example.com/",
                 fail_release: bool = False):
        self.email = email
        self.web_url = web_url
        self.fail_release = fail_release
        self.releases = []
        self.procfiles = []
        self.user_info_calls = 0

    async def get_user_info(self) -> UserInfo:
        self.user_info_calls += 1
        return UserInfo(email=self.email)

    async def get_app(self, app_name: str) -> Dict:
        return {"name": app_name, "web_url": self.web_url}

    async def release_to_app(self, app_name, artifact_ref, description=None, procfile_ref=None) -> ReleaseInfo:
        if self.fail_release:
            raise PlatformError(f"Release to {app_name} failed: HTTP 422", status_code=422)
        self.releases.append((app_name, artifact_ref, description))
        self.procfiles.append(procfile_ref)
        return ReleaseInfo(version=f"v{len(self.releases)}")


class MemoryStorage(StorageBackend):
    """Storage keeping uploaded bytes by slot; can fail chosen files once or always"""

    def __init__(self, fail_names: Optional[Dict[str, int]] = None):
        super().__init__({})
        self.blobs: Dict[str, bytes] = {}
        self.uploads: List[str] = []  # local file names, in upload order
        self.fail_names = dict(fail_names or {})  # file name -> remaining failures

    async def upload(self, local_path, slot) -> str:
        name = Path(local_path).name
        if self.fail_names.get(name, 0) > 0:
            self.fail_names[name] -= 1
            raise UploadError(f"Failed to upload {name}: connection reset", path=name)

        self.blobs[slot] = Path(local_path).read_bytes()
        self.uploads.append(name)
        return f"mem://{slot}"


def write_files(base: Path, files: Dict[str, str]) -> Path:
    """Create files (relative path -> text) under base"""
    for relative, content in files.items():
        path = base / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return base


@pytest.fixture
def workspace(tmp_path) -> Path:
    """Small application workspace"""
    root = tmp_path / "app"
    root.mkdir()
    return write_files(root, {
        "Procfile": "web: python app.py\n",
        "app.py": "print('hello')\n",
        "requirements.txt": "flask\n",
        "static/style.css": "body { color: red; }\n",
    })


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def recorder(bus) -> EventRecorder:
    return EventRecorder(bus)


@pytest.fixture
def cache() -> InMemoryCacheStore:
    return InMemoryCacheStore("my-app")


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def platform() -> FakePlatformClient:
    return FakePlatformClient()


@pytest.fixture
def build_service() -> FakeBuildService:
    return FakeBuildService()


@pytest.fixture
def options(workspace) -> DeployOptions:
    return DeployOptions(api_key="secret-key", app_name="my-app", base_dir=str(workspace))


@pytest.fixture
def service(platform, build_service, storage, cache, bus) -> DeployService:
    return DeployService(platform, build_service, storage, cache,
                         event_bus=bus, environ={"BAR": "baz"})
