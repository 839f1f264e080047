"""Operation result models"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Any

from .manifest import FileEntry


class OperationStatus(Enum):
    """Operation status"""
    SUCCESS = "success"
    FAILED = "failed"
    IN_PROGRESS = "in_progress"


class DiffStatus(Enum):
    """Classification of a manifest entry against the cache"""
    UNCHANGED = "unchanged"
    NEW = "new"
    MODIFIED = "modified"


@dataclass
class ErrorDetail:
    """Detailed error information"""

    code: str
    message: str
    context: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat()
        }


@dataclass
class DiffResult:
    """Classification of a manifest against a cache snapshot"""

    classifications: Dict[str, DiffStatus] = field(default_factory=dict)
    to_upload: List[FileEntry] = field(default_factory=list)
    total_files: int = 0

    @property
    def upload_count(self) -> int:
        """Number of distinct contents that need uploading"""
        return len({e.checksum for e in self.to_upload})

    def count(self, status: DiffStatus) -> int:
        """Count entries with a given classification"""
        return sum(1 for s in self.classifications.values() if s == status)

    def paths_with(self, status: DiffStatus) -> List[str]:
        """Get paths with a given classification"""
        return sorted(p for p, s in self.classifications.items() if s == status)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "total_files": self.total_files,
            "upload_count": self.upload_count,
            "unchanged": self.count(DiffStatus.UNCHANGED),
            "new": self.count(DiffStatus.NEW),
            "modified": self.count(DiffStatus.MODIFIED),
        }


@dataclass
class UploadResult:
    """Outcome of the upload phase"""

    uploaded: Dict[str, str] = field(default_factory=dict)  # content hash -> remote ref
    bytes_uploaded: int = 0

    @property
    def upload_count(self) -> int:
        return len(self.uploaded)


@dataclass(frozen=True)
class UserInfo:
    """Platform account"""
    email: str


@dataclass(frozen=True)
class ReleaseInfo:
    """Release registered on the platform"""
    version: str
    web_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"version": self.version, "web_url": self.web_url}


@dataclass
class DeployResult:
    """Result of a push

    Failures are reported here rather than raised: error holds the exception
    that stopped the pipeline and errors its code and message.
    """

    status: OperationStatus
    message: str = ""
    app_name: Optional[str] = None
    release: Optional[ReleaseInfo] = None
    artifact_ref: Optional[str] = None
    diff: Optional[DiffResult] = None
    uploaded_count: int = 0
    bundle_size: Optional[int] = None  # bytes, workspace bundle pushes only
    error: Optional[Exception] = None
    errors: List[ErrorDetail] = field(default_factory=list)
    start_time: datetime = field(default_factory=datetime.utcnow)
    end_time: Optional[datetime] = None

    @property
    def is_success(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    @property
    def duration(self) -> Optional[float]:
        """Seconds from start to complete(), None while running"""
        if self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds()

    def add_error(self, code: str, message: str, **context) -> None:
        self.errors.append(ErrorDetail(code=code, message=message, context=context))

    def complete(self, status: Optional[OperationStatus] = None) -> None:
        """Stamp the end time, optionally setting the final status"""
        self.end_time = datetime.utcnow()
        if status:
            self.status = status

    @property
    def failed_stage(self) -> Optional[str]:
        """Name of the error class that stopped the pipeline"""
        return type(self.error).__name__ if self.error else None

    @property
    def built_but_not_released(self) -> bool:
        """An artifact exists but the release step did not succeed"""
        return self.artifact_ref is not None and self.release is None

    def __bool__(self) -> bool:
        return self.is_success

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "status": self.status.value,
            "message": self.message,
            "app_name": self.app_name,
            "release": self.release.to_dict() if self.release else None,
            "artifact_ref": self.artifact_ref,
            "diff": self.diff.to_dict() if self.diff else None,
            "uploaded_count": self.uploaded_count,
            "bundle_size": self.bundle_size,
            "errors": [e.to_dict() for e in self.errors],
            "duration": self.duration
        }


@dataclass
class ValidationResult:
    """Validation result with detailed findings"""
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    info: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add error message"""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add warning message"""
        self.warnings.append(message)

    def add_info(self, message: str) -> None:
        """Add info message"""
        self.info.append(message)

    def __bool__(self) -> bool:
        """Boolean evaluation returns is_valid"""
        return self.is_valid
