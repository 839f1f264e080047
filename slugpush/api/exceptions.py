"""Exception definitions for slugpush API"""

from typing import Optional

from ..constants import ErrorCode, MSG_BUILD_ERROR


class SlugPushError(Exception):
    """Base exception for slugpush"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class ConfigError(SlugPushError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_ERROR)


class ScanError(SlugPushError):
    """Workspace could not be scanned (bad base directory or glob)"""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, ErrorCode.SCAN_ERROR)
        self.path = path


class UploadError(SlugPushError):
    """File transfer failed; content uploaded before the failure stays cached"""

    def __init__(self, message: str, path: Optional[str] = None, content_hash: Optional[str] = None):
        super().__init__(message, ErrorCode.UPLOAD_ERROR)
        self.path = path
        self.content_hash = content_hash


class BuildError(SlugPushError):
    """Remote build exited with a nonzero status"""

    def __init__(self, exit_status: int, reason: Optional[str] = None):
        message = MSG_BUILD_ERROR.format(exit_status=exit_status)
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, ErrorCode.BUILD_ERROR)
        self.exit_status = exit_status
        self.reason = reason


class ReleaseError(SlugPushError):
    """Artifact was built but could not be released"""

    def __init__(self, message: str, artifact_ref: Optional[str] = None):
        super().__init__(message, ErrorCode.RELEASE_ERROR)
        self.artifact_ref = artifact_ref


class CancellationError(SlugPushError):
    """Deployment aborted from outside"""

    def __init__(self, message: str = "Deployment cancelled"):
        super().__init__(message, ErrorCode.CANCELLED)


class PlatformError(SlugPushError):
    """Platform API request failed"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message, ErrorCode.PLATFORM_ERROR)
        self.status_code = status_code


class UnexpectedError(SlugPushError):
    """Failure outside the error hierarchy, reported instead of raised"""

    def __init__(self, error: BaseException):
        super().__init__(f"Unexpected error during deployment: {type(error).__name__}: {error}",
                         ErrorCode.UNEXPECTED_ERROR)
        self.original = error
