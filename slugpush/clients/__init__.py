"""Clients of the remote platform and build service"""

from .base import PlatformClient, BuildService, BuildStream
from .http import create_http_client
from .platform import HttpPlatformClient
from .build import HttpBuildService, HttpBuildStream

__all__ = [
    'PlatformClient',
    'BuildService',
    'BuildStream',
    'create_http_client',
    'HttpPlatformClient',
    'HttpBuildService',
    'HttpBuildStream',
]
