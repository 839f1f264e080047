"""slugpush - incremental application deployment for CI pipelines.

Scans a workspace into a content-addressed manifest, uploads only the files
the remote cache does not know yet, builds the result with a buildpack and
releases it to the application.
"""

from .__version__ import __version__, __version_info__, __license__

# Core API
from .api import (
    Deployer,
    deploy,
    SlugPushError,
    ConfigError,
    ScanError,
    UploadError,
    BuildError,
    ReleaseError,
    CancellationError,
    PlatformError,
    UnexpectedError,
)

# Data models
from .models import (
    DeployOptions,
    DeployResult,
    ReleaseInfo,
    Manifest,
    FileEntry,
    Event,
    EventType,
)

# Pipeline components
from .core import EventBus, validate_options
from .utils import GlobScanner, EnvExpander

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__license__",

    # Main classes
    "Deployer",
    "EventBus",

    # Core API functions
    "deploy",
    "validate_options",

    # Data models
    "DeployOptions",
    "DeployResult",
    "ReleaseInfo",
    "Manifest",
    "FileEntry",
    "Event",
    "EventType",

    # Collaborators
    "GlobScanner",
    "EnvExpander",

    # Exceptions
    "SlugPushError",
    "ConfigError",
    "ScanError",
    "UploadError",
    "BuildError",
    "ReleaseError",
    "CancellationError",
    "PlatformError",
    "UnexpectedError",
]
