"""Configuration data models"""

from dataclasses import dataclass, field, asdict
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Any

from ..constants import (
    DEFAULT_BASE_DIR,
    DEFAULT_GLOB_INCLUDES,
    DEFAULT_GLOB_EXCLUDES,
    DEFAULT_UPLOAD_WORKERS,
    DEFAULT_PLATFORM_URL,
    DEFAULT_BUILD_URL,
)


@dataclass
class DeployOptions:
    """User-facing options of a push"""

    api_key: str
    app_name: str
    buildpack_url: Optional[str] = None
    build_env: str = ""  # KEY=VALUE lines, Java properties syntax
    release_desc: Optional[str] = None
    base_dir: str = DEFAULT_BASE_DIR
    glob_includes: str = DEFAULT_GLOB_INCLUDES
    glob_excludes: str = DEFAULT_GLOB_EXCLUDES
    use_cache: bool = True
    upload_workers: int = DEFAULT_UPLOAD_WORKERS

    def to_dict(self, redact: bool = True) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = asdict(self)
        if redact and data.get('api_key'):
            data['api_key'] = '********'
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DeployOptions':
        """Create from dictionary (unknown keys are ignored)"""
        return cls(
            api_key=data.get('api_key', ''),
            app_name=data.get('app_name', ''),
            buildpack_url=data.get('buildpack_url'),
            build_env=data.get('build_env') or "",
            release_desc=data.get('release_desc'),
            base_dir=data.get('base_dir', DEFAULT_BASE_DIR),
            glob_includes=data.get('glob_includes', DEFAULT_GLOB_INCLUDES),
            glob_excludes=data.get('glob_excludes', DEFAULT_GLOB_EXCLUDES),
            use_cache=bool(data.get('use_cache', True)),
            upload_workers=int(data.get('upload_workers', DEFAULT_UPLOAD_WORKERS))
        )


@dataclass(frozen=True)
class BuildConfig:
    """Immutable configuration handed to the build and release stages

    env values are already expanded against the CI environment.
    """

    api_key: str
    consumer_user_agent: str
    app_name: str
    app_user: str
    read_cache: bool = True
    write_cache: bool = True
    write_slug: bool = False
    buildpack_url: Optional[str] = None
    env: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'env', MappingProxyType(dict(self.env)))

    def __repr__(self) -> str:
        return (
            f"BuildConfig(app_name={self.app_name!r}, app_user={self.app_user!r}, "
            f"read_cache={self.read_cache}, write_cache={self.write_cache}, "
            f"write_slug={self.write_slug}, buildpack_url={self.buildpack_url!r}, "
            f"env={dict(self.env)!r})"
        )


@dataclass
class ServiceSettings:
    """Remote endpoints and the storage/cache backends used by a push"""

    platform_url: str = DEFAULT_PLATFORM_URL
    build_url: str = DEFAULT_BUILD_URL
    storage_type: str = "http"
    storage_config: Dict[str, Any] = field(default_factory=dict)
    cache_type: str = "remote"
    cache_config: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'platform_url': self.platform_url,
            'build_url': self.build_url,
            'storage': {'type': self.storage_type, **self.storage_config},
            'cache': {'type': self.cache_type, **self.cache_config},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ServiceSettings':
        """Create from dictionary"""
        storage = dict(data.get('storage') or {})
        cache = dict(data.get('cache') or {})
        return cls(
            platform_url=data.get('platform_url') or DEFAULT_PLATFORM_URL,
            build_url=data.get('build_url') or DEFAULT_BUILD_URL,
            storage_type=storage.pop('type', 'http'),
            storage_config=storage,
            cache_type=cache.pop('type', 'remote'),
            cache_config=cache,
        )
