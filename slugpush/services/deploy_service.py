"""Deploy service: manifest -> diff -> upload -> build -> release, or bundle -> release"""

import asyncio
import dataclasses
import logging
from pathlib import Path
from typing import Awaitable, Mapping, Optional, Tuple

import httpx

from ..api.exceptions import (
    BuildError,
    CancellationError,
    ConfigError,
    ReleaseError,
    SlugPushError,
    UnexpectedError,
    UploadError,
)
from ..cache import CacheStore, FileCacheStore, InMemoryCacheStore, RemoteCacheStore
from ..clients import BuildService, HttpBuildService, HttpPlatformClient, PlatformClient
from ..constants import DEFAULT_CACHE_DIR
from ..core.build_driver import BuildDriver
from ..core.bundler import WorkspaceBundler
from ..core.config_builder import ConfigBuilder
from ..core.diff_engine import DiffEngine
from ..core.event_bus import EventBus
from ..core.manifest_builder import ManifestBuilder
from ..core.release_coordinator import ReleaseCoordinator
from ..core.upload_coordinator import UploadCoordinator
from ..models import (
    DeployOptions,
    DeployResult,
    DiffResult,
    EventType,
    Manifest,
    OperationStatus,
    ServiceSettings,
)
from ..storage import StorageBackend, StorageFactory
from ..utils.formatting import format_size
from ..utils.hash_utils import content_slot, hash_file
from ..__version__ import get_user_agent

logger = logging.getLogger(__name__)


class DeployService:
    """Runs one push against injected collaborators

    Every stage starts only after the previous one completed. The event bus
    receives progress; the returned DeployResult carries the outcome.
    """

    def __init__(self,
                 platform: PlatformClient,
                 build_service: BuildService,
                 storage: StorageBackend,
                 cache_store: CacheStore,
                 event_bus: Optional[EventBus] = None,
                 environ: Optional[Mapping[str, str]] = None,
                 user_agent: Optional[str] = None):
        """
        Initialize deploy service

        Args:
            platform: Platform API client
            build_service: Build service client
            storage: Content storage for uploads
            cache_store: Cache of previously uploaded content
            event_bus: Progress event bus
            environ: Variables for build environment expansion
            user_agent: Consumer user agent
        """
        self.platform = platform
        self.build_service = build_service
        self.storage = storage
        self.cache_store = cache_store
        self.event_bus = event_bus or EventBus()
        self.config_builder = ConfigBuilder(environ, user_agent)

        self.manifest_builder = ManifestBuilder(self.event_bus)
        self.diff_engine = DiffEngine()
        self.build_driver = BuildDriver(build_service, self.event_bus)
        self.release_coordinator = ReleaseCoordinator(platform, self.event_bus)

    @classmethod
    def from_settings(cls,
                      options: DeployOptions,
                      settings: Optional[ServiceSettings] = None,
                      event_bus: Optional[EventBus] = None,
                      environ: Optional[Mapping[str, str]] = None,
                      transport: Optional[httpx.AsyncBaseTransport] = None,
                      storage_factory: Optional[StorageFactory] = None) -> 'DeployService':
        """
        Create a service wired to the HTTP clients and configured backends

        Args:
            options: Push options (api key and app name are used for wiring)
            settings: Endpoints and backend selection
            event_bus: Progress event bus
            environ: Variables for build environment expansion
            transport: httpx transport shared by every client (tests)
            storage_factory: Registry the storage backend is created from

        Raises:
            ConfigError: If a backend type is unknown
        """
        settings = settings or ServiceSettings()
        user_agent = get_user_agent()

        storage_config = {
            'endpoint': settings.build_url,
            'api_key': options.api_key,
            'user_agent': user_agent,
            'transport': transport,
            **settings.storage_config,
        }
        try:
            storage = (storage_factory or StorageFactory()).create(settings.storage_type, storage_config)
        except ValueError as e:
            raise ConfigError(str(e)) from e

        cache_store = cls.create_cache_store(options, settings, transport)

        platform = HttpPlatformClient(options.api_key, settings.platform_url,
                                      user_agent=user_agent, transport=transport)
        build_service = HttpBuildService(options.api_key, settings.build_url,
                                         user_agent=user_agent, transport=transport)

        return cls(platform, build_service, storage, cache_store,
                   event_bus=event_bus, environ=environ, user_agent=user_agent)

    @staticmethod
    def create_cache_store(options: DeployOptions,
                           settings: ServiceSettings,
                           transport: Optional[httpx.AsyncBaseTransport] = None) -> CacheStore:
        """Create the cache store selected by settings.cache_type"""
        cache_type = settings.cache_type
        if cache_type == "remote":
            endpoint = settings.cache_config.get('endpoint') or settings.build_url
            return RemoteCacheStore(options.app_name, options.api_key, endpoint, transport=transport)
        if cache_type == "file":
            cache_dir = settings.cache_config.get('path') or Path(options.base_dir) / DEFAULT_CACHE_DIR
            return FileCacheStore(options.app_name, Path(cache_dir))
        if cache_type == "memory":
            return InMemoryCacheStore(options.app_name)
        raise ConfigError(f"Unsupported cache type: {cache_type}")

    def _precheck(self, options: DeployOptions) -> None:
        """Reject bad options before any network activity"""
        if not options.api_key:
            raise ConfigError("API key is required")
        if not options.app_name:
            raise ConfigError("Application name is required")
        self.config_builder.check_buildpack_url(options.buildpack_url)
        self.config_builder.parse_build_env(options.build_env)

    async def plan(self, options: DeployOptions) -> Tuple[Manifest, DiffResult]:
        """
        Compute what a push would upload, without uploading

        Args:
            options: Push options

        Returns:
            (manifest, diff)
        """
        manifest = await self.manifest_builder.build(
            Path(options.base_dir), options.glob_includes, options.glob_excludes
        )
        snapshot = await self.cache_store.snapshot() if options.use_cache else {}
        return manifest, self.diff_engine.diff(manifest, snapshot, options.use_cache)

    async def deploy(self, options: DeployOptions, write_slug: bool = False) -> DeployResult:
        """
        Push a workspace

        Args:
            options: Push options
            write_slug: Also write the artifact reference to the workspace

        Returns:
            DeployResult; failures are reported in it, not raised
        """
        result = DeployResult(status=OperationStatus.IN_PROGRESS, app_name=options.app_name)
        return await self._run(result, self._deploy(options, result, write_slug))

    async def _deploy(self, options: DeployOptions, result: DeployResult, write_slug: bool) -> None:
        self._precheck(options)

        manifest = await self.manifest_builder.build(
            Path(options.base_dir), options.glob_includes, options.glob_excludes
        )

        user = await self.platform.get_user_info()
        config = self.config_builder.build(options, user.email)
        if write_slug:
            config = dataclasses.replace(config, write_slug=True)
        logger.debug(f"Build configuration: {config!r}")

        snapshot = await self.cache_store.snapshot() if config.read_cache else {}
        diff = self.diff_engine.diff(manifest, snapshot, config.read_cache)
        result.diff = diff

        uploader = UploadCoordinator(self.storage, self.cache_store, self.event_bus,
                                     max_workers=options.upload_workers)
        uploaded = await uploader.upload(manifest, diff, write_cache=config.write_cache)
        result.uploaded_count = uploaded.upload_count

        artifact_ref = await self.build_driver.build(manifest, config, config.buildpack_url)
        result.artifact_ref = artifact_ref

        result.release = await self.release_coordinator.release(
            options.app_name, artifact_ref, options.release_desc
        )

    async def deploy_workspace(self,
                               options: DeployOptions,
                               procfile_path: Optional[str] = None) -> DeployResult:
        """
        Release the workspace as one archive, without a remote build

        The selected files are packed into a temporary .tar.gz, which is
        uploaded and released directly; the archive is removed afterwards
        whatever the outcome.

        Args:
            options: Push options (buildpack and build env are not used)
            procfile_path: Procfile relative to the workspace, released
                alongside the bundle

        Returns:
            DeployResult; bundle_size holds the archive size in bytes
        """
        result = DeployResult(status=OperationStatus.IN_PROGRESS, app_name=options.app_name)
        return await self._run(result, self._deploy_workspace(options, result, procfile_path))

    async def _deploy_workspace(self,
                                options: DeployOptions,
                                result: DeployResult,
                                procfile_path: Optional[str]) -> None:
        self._precheck(options)
        base_dir = Path(options.base_dir)
        procfile = self._resolve_procfile(base_dir, procfile_path) if procfile_path else None

        bundler = WorkspaceBundler(options.glob_includes, options.glob_excludes)
        async with bundler.bundle(base_dir) as (archive, count):
            self.event_bus.emit(EventType.DIFF_START, count)
            result.bundle_size = archive.stat().st_size
            logger.info(f"Bundled {count} files, {format_size(result.bundle_size)}")

            uploads = [archive] if procfile is None else [archive, procfile]
            self.event_bus.emit(EventType.UPLOADS_START, len(uploads))
            refs = [await self._store(path) for path in uploads]
            self.event_bus.emit(EventType.UPLOADS_END, len(uploads))

        result.uploaded_count = len(refs)
        result.artifact_ref = refs[0]
        procfile_ref = refs[1] if procfile is not None else None

        result.release = await self.release_coordinator.release(
            options.app_name, result.artifact_ref, options.release_desc, procfile_ref
        )

    @staticmethod
    def _resolve_procfile(base_dir: Path, procfile_path: str) -> Path:
        """Procfile inside the workspace"""
        procfile = (base_dir / procfile_path).resolve()
        if base_dir.resolve() not in procfile.parents or not procfile.is_file():
            raise ConfigError(f"Procfile not found in {base_dir}: {procfile_path}")
        return procfile

    async def _store(self, local_path: Path) -> str:
        """Upload one file to its content slot"""
        try:
            slot = content_slot(await hash_file(local_path))
            return await self.storage.upload(local_path, slot)
        except UploadError:
            raise
        except (OSError, SlugPushError) as e:
            raise UploadError(f"Failed to upload {local_path.name}: {e}", path=str(local_path)) from e

    async def _run(self, result: DeployResult, stages: Awaitable[None]) -> DeployResult:
        """Await the pipeline stages, turning any failure into a failed result

        A cancellation request on the running task is recorded, then re-raised.
        """
        try:
            await stages

            result.message = f"Released {result.app_name} {result.release.version}"
            result.complete(OperationStatus.SUCCESS)
            logger.info(result.message)

        except asyncio.CancelledError:
            self._fail(result, CancellationError())
            cancelling = getattr(asyncio.current_task(), "cancelling", None)
            if cancelling is None or cancelling():
                raise

        except KeyboardInterrupt:
            self._fail(result, CancellationError())

        except SlugPushError as e:
            self._fail(result, e)

        except Exception as e:
            logger.debug("Unexpected error during deployment", exc_info=True)
            self._fail(result, UnexpectedError(e))

        return result

    def _fail(self, result: DeployResult, error: SlugPushError) -> None:
        # The build driver reports its own failures
        if not isinstance(error, BuildError):
            logger.debug(str(error))
            self.event_bus.emit(EventType.DEPLOY_ERROR, str(error))

        if isinstance(error, ReleaseError):
            result.artifact_ref = error.artifact_ref

        result.error = error
        result.message = str(error)
        result.add_error(error.error_code, str(error))
        result.complete(OperationStatus.FAILED)

    async def close(self) -> None:
        """Close every collaborator"""
        await self.platform.close()
        await self.build_service.close()
        await self.storage.close()
        await self.cache_store.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
