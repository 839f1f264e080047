"""Storage backends for slugpush"""

from .base import StorageBackend
from .filesystem import FileSystemStorage
from .http import HttpStorage
from .factory import StorageFactory

__all__ = [
    'StorageBackend',
    'FileSystemStorage',
    'HttpStorage',
    'StorageFactory',
]
