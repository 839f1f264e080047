# slugpush/api/__init__.py
"""API layer for slugpush"""

from .exceptions import (
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
from .deployer import Deployer, deploy

__all__ = [
    # Main classes
    "Deployer",

    # Convenience functions
    "deploy",

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
