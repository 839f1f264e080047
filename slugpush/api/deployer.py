"""Deployer API for push operations"""

import logging
from pathlib import Path
from typing import Callable, Mapping, Optional, Tuple, Union, Any

import httpx

from .exceptions import SlugPushError
from ..core.config_builder import load_project_config, resolve_options, resolve_settings
from ..core.event_bus import EventBus
from ..models import (
    DeployOptions,
    DeployResult,
    DiffResult,
    EventType,
    Manifest,
    OperationStatus,
    ServiceSettings,
)
from ..services.deploy_service import DeployService
from ..utils.async_utils import run_async

logger = logging.getLogger(__name__)

ServiceFactory = Callable[[DeployOptions], DeployService]


class Deployer:
    """Deployer class for push operations"""

    def __init__(self,
                 settings: Optional[ServiceSettings] = None,
                 event_bus: Optional[EventBus] = None,
                 environ: Optional[Mapping[str, str]] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None,
                 service_factory: Optional[ServiceFactory] = None):
        """
        Initialize deployer

        Args:
            settings: Endpoints and backend selection
            event_bus: Bus receiving progress events
            environ: Variables for build environment expansion
            transport: httpx transport used by the default clients
            service_factory: Builds the DeployService for given options
        """
        self.settings = settings or ServiceSettings()
        self.event_bus = event_bus or EventBus()
        self.environ = environ
        self.transport = transport
        self.service_factory = service_factory or self._default_service

    def _default_service(self, options: DeployOptions) -> DeployService:
        return DeployService.from_settings(
            options,
            self.settings,
            event_bus=self.event_bus,
            environ=self.environ,
            transport=self.transport,
        )

    @staticmethod
    def _options(options: Union[DeployOptions, str, Path, None], **kwargs) -> DeployOptions:
        if isinstance(options, DeployOptions):
            return options
        if options is not None:
            kwargs['base_dir'] = str(options)
        return DeployOptions.from_dict(kwargs)

    def deploy(self,
               options: Union[DeployOptions, str, Path, None] = None,
               write_slug: bool = False,
               **kwargs) -> DeployResult:
        """
        Push a workspace

        Args:
            options: DeployOptions, or the base directory with options as kwargs
            write_slug: Write the artifact reference into the workspace
            **kwargs: DeployOptions fields when options is not DeployOptions

        Returns:
            DeployResult: is_success, release and error describe the outcome
        """
        return run_async(self.deploy_async(options, write_slug=write_slug, **kwargs))

    async def deploy_async(self,
                           options: Union[DeployOptions, str, Path, None] = None,
                           write_slug: bool = False,
                           **kwargs) -> DeployResult:
        """Async implementation of deploy"""
        options = self._options(options, **kwargs)
        try:
            service = self.service_factory(options)
        except SlugPushError as e:
            return self._setup_failed(options, e)
        async with service:
            return await service.deploy(options, write_slug=write_slug)

    def deploy_workspace(self,
                         options: Union[DeployOptions, str, Path, None] = None,
                         procfile_path: Optional[str] = None,
                         **kwargs) -> DeployResult:
        """
        Release the workspace as one bundle, skipping the remote build

        Args:
            options: DeployOptions, or the base directory with options as kwargs
            procfile_path: Procfile relative to the workspace
            **kwargs: DeployOptions fields when options is not DeployOptions

        Returns:
            DeployResult with bundle_size set
        """
        return run_async(self.deploy_workspace_async(options, procfile_path=procfile_path, **kwargs))

    async def deploy_workspace_async(self,
                                     options: Union[DeployOptions, str, Path, None] = None,
                                     procfile_path: Optional[str] = None,
                                     **kwargs) -> DeployResult:
        """Async implementation of deploy_workspace"""
        options = self._options(options, **kwargs)
        try:
            service = self.service_factory(options)
        except SlugPushError as e:
            return self._setup_failed(options, e)
        async with service:
            return await service.deploy_workspace(options, procfile_path=procfile_path)

    def _setup_failed(self, options: DeployOptions, error: SlugPushError) -> DeployResult:
        """Failed result for a push whose service could not be created"""
        self.event_bus.emit(EventType.DEPLOY_ERROR, str(error))
        result = DeployResult(status=OperationStatus.FAILED, app_name=options.app_name,
                              message=str(error), error=error)
        result.add_error(error.error_code, str(error))
        result.complete()
        return result

    def plan(self,
             options: Union[DeployOptions, str, Path, None] = None,
             **kwargs) -> Tuple[Manifest, DiffResult]:
        """Compute the manifest and upload set without pushing"""
        return run_async(self.plan_async(options, **kwargs))

    async def plan_async(self,
                         options: Union[DeployOptions, str, Path, None] = None,
                         **kwargs) -> Tuple[Manifest, DiffResult]:
        """Async implementation of plan"""
        options = self._options(options, **kwargs)
        async with self.service_factory(options) as service:
            return await service.plan(options)


def deploy(base_dir: Union[str, Path] = ".",
           event_bus: Optional[EventBus] = None,
           **options: Any) -> DeployResult:
    """
    Push a workspace

    This is a convenience function that reads the project file in base_dir
    (if any), applies SLUGPUSH_* environment variables and the given options
    on top, and performs the push.

    Args:
        base_dir: Workspace root
        event_bus: Bus receiving progress events
        **options: DeployOptions fields

    Returns:
        DeployResult
    """
    file_data = load_project_config(Path(base_dir))
    resolved = resolve_options(file_data, {**options, 'base_dir': str(base_dir)})
    settings = resolve_settings(file_data)

    deployer = Deployer(settings=settings, event_bus=event_bus)
    return deployer.deploy(resolved)
