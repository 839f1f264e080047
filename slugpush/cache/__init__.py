"""Content-addressed cache stores"""

from .base import CacheStore
from .memory import InMemoryCacheStore
from .filesystem import FileCacheStore
from .remote import RemoteCacheStore

__all__ = [
    'CacheStore',
    'InMemoryCacheStore',
    'FileCacheStore',
    'RemoteCacheStore',
]
