# slugpush/models/__init__.py
"""Data models for slugpush"""

from .manifest import Manifest, FileEntry
from .cache import CacheEntry
from .config import DeployOptions, BuildConfig, ServiceSettings
from .events import Event, EventType
from .result import (
    OperationStatus,
    DiffStatus,
    ErrorDetail,
    DiffResult,
    UploadResult,
    UserInfo,
    ReleaseInfo,
    DeployResult,
    ValidationResult,
)

__all__ = [
    # Manifest models
    "Manifest",
    "FileEntry",
    "CacheEntry",

    # Config models
    "DeployOptions",
    "BuildConfig",
    "ServiceSettings",

    # Event models
    "Event",
    "EventType",

    # Result models
    "OperationStatus",
    "DiffStatus",
    "ErrorDetail",
    "DiffResult",
    "UploadResult",
    "UserInfo",
    "ReleaseInfo",
    "DeployResult",
    "ValidationResult",
]
