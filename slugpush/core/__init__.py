"""Core deployment pipeline components"""

from .event_bus import EventBus, EventRecorder
from .manifest_builder import ManifestBuilder
from .diff_engine import DiffEngine
from .upload_coordinator import UploadCoordinator
from .build_driver import BuildDriver
from .release_coordinator import ReleaseCoordinator
from .config_builder import (
    ConfigBuilder,
    load_project_config,
    resolve_options,
    resolve_settings,
    validate_options,
)
from .bundler import WorkspaceBundler

__all__ = [
    'EventBus',
    'EventRecorder',
    'ManifestBuilder',
    'DiffEngine',
    'UploadCoordinator',
    'BuildDriver',
    'ReleaseCoordinator',
    'ConfigBuilder',
    'load_project_config',
    'resolve_options',
    'resolve_settings',
    'validate_options',
    'WorkspaceBundler',
]
