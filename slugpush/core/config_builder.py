"""Deployment configuration: project file loading, validation and BuildConfig creation"""

import logging
import os
from pathlib import Path
from typing import Dict, Mapping, Optional, Any
from urllib.parse import urlparse

import yaml

from ..__version__ import get_user_agent
from ..api.exceptions import ConfigError
from ..constants import (
    ALLOWED_BUILDPACK_SCHEMES,
    APP_NAME_PATTERN,
    ENV_KEY_PATTERN,
    ENV_API_KEY,
    ENV_APP_NAME,
    ENV_PLATFORM_URL,
    ENV_BUILD_URL,
    PROJECT_CONFIG_FILE,
)
from ..models import BuildConfig, DeployOptions, ServiceSettings, ValidationResult
from ..utils.env_utils import EnvExpander, PropertiesSyntaxError, parse_properties
from ..utils.glob_utils import GlobScanner, GlobPatternError

logger = logging.getLogger(__name__)

# Project file keys accepted as aliases of DeployOptions fields
_OPTION_ALIASES = {
    'app': 'app_name',
    'includes': 'glob_includes',
    'excludes': 'glob_excludes',
    'description': 'release_desc',
}


def load_project_config(config_path: Path) -> Dict[str, Any]:
    """
    Load a project file

    Environment variables in the file are expanded before parsing. A missing
    file yields an empty mapping.

    Args:
        config_path: Path to .slugpush.yaml (or the directory holding it)

    Returns:
        Raw configuration mapping

    Raises:
        ConfigError: If the file is not a YAML mapping
    """
    config_path = Path(config_path)
    if config_path.is_dir():
        config_path = config_path / PROJECT_CONFIG_FILE

    if not config_path.exists():
        return {}

    with open(config_path, 'r', encoding='utf-8') as f:
        content = f.read()

    content = os.path.expandvars(content)

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping")

    logger.debug(f"Loaded project configuration from {config_path}")
    return {_OPTION_ALIASES.get(k, k): v for k, v in data.items()}


def resolve_options(file_data: Optional[Mapping[str, Any]] = None,
                    overrides: Optional[Mapping[str, Any]] = None,
                    environ: Optional[Mapping[str, str]] = None) -> DeployOptions:
    """
    Merge option sources: explicit overrides, then environment, then project file

    None values in overrides are treated as unset.
    """
    environ = os.environ if environ is None else environ
    data: Dict[str, Any] = dict(file_data or {})

    if environ.get(ENV_API_KEY):
        data['api_key'] = environ[ENV_API_KEY]
    if environ.get(ENV_APP_NAME):
        data['app_name'] = environ[ENV_APP_NAME]

    for key, value in (overrides or {}).items():
        if value is not None:
            data[_OPTION_ALIASES.get(key, key)] = value

    try:
        return DeployOptions.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid option value: {e}") from e


def resolve_settings(file_data: Optional[Mapping[str, Any]] = None,
                     overrides: Optional[Mapping[str, Any]] = None,
                     environ: Optional[Mapping[str, str]] = None) -> ServiceSettings:
    """Resolve remote endpoints and backends with the same precedence as resolve_options"""
    environ = os.environ if environ is None else environ
    data: Dict[str, Any] = dict(file_data or {})

    if environ.get(ENV_PLATFORM_URL):
        data['platform_url'] = environ[ENV_PLATFORM_URL]
    if environ.get(ENV_BUILD_URL):
        data['build_url'] = environ[ENV_BUILD_URL]

    overrides = dict(overrides or {})
    for key in ('platform_url', 'build_url'):
        if overrides.get(key):
            data[key] = overrides[key]
    if overrides.get('storage_type'):
        data['storage'] = {**(data.get('storage') or {}), 'type': overrides['storage_type']}
    if overrides.get('cache_type'):
        data['cache'] = {**(data.get('cache') or {}), 'type': overrides['cache_type']}

    return ServiceSettings.from_dict(data)


class ConfigBuilder:
    """Turns DeployOptions into an immutable BuildConfig"""

    def __init__(self,
                 environ: Optional[Mapping[str, str]] = None,
                 user_agent: Optional[str] = None):
        """
        Args:
            environ: Variables used for ${VAR} expansion (default: os.environ)
            user_agent: Consumer user agent sent to the build service
        """
        self.expander = EnvExpander(environ)
        self.user_agent = user_agent or get_user_agent()

    @staticmethod
    def parse_build_env(text: Optional[str]) -> Dict[str, str]:
        """Parse KEY=VALUE lines, raising ConfigError on bad syntax"""
        try:
            return parse_properties(text)
        except PropertiesSyntaxError as e:
            raise ConfigError(f"Invalid build environment: {e}") from e

    @staticmethod
    def check_buildpack_url(url: Optional[str]) -> Optional[str]:
        """Validate a buildpack URL; blank means auto-detect"""
        if url is None or not url.strip():
            return None

        url = url.strip()
        parsed = urlparse(url)
        if parsed.scheme not in ALLOWED_BUILDPACK_SCHEMES or not parsed.netloc:
            raise ConfigError(
                f"Invalid buildpack URL '{url}': must be an http, https or git URL"
            )
        return url

    def validate(self, options: DeployOptions) -> ValidationResult:
        """
        Check every option and collect all findings

        Args:
            options: Options to check

        Returns:
            ValidationResult
        """
        result = ValidationResult()

        if not options.api_key:
            result.add_error("API key is required")

        if not options.app_name:
            result.add_error("Application name is required")
        elif not APP_NAME_PATTERN.match(options.app_name):
            result.add_error(
                f"Invalid application name '{options.app_name}': "
                "use lowercase letters, digits and dashes, starting with a letter"
            )

        try:
            buildpack = self.check_buildpack_url(options.buildpack_url)
            result.add_info(f"Buildpack: {buildpack}" if buildpack else "Buildpack: auto-detect")
        except ConfigError as e:
            result.add_error(str(e))

        try:
            env = self.parse_build_env(options.build_env)
            for key in env:
                if not ENV_KEY_PATTERN.match(key):
                    result.add_warning(f"Build environment key '{key}' is not a valid variable name")
            result.add_info(f"Build environment: {len(env)} variable(s)")
        except ConfigError as e:
            result.add_error(str(e))

        base_dir = Path(options.base_dir)
        if not base_dir.is_dir():
            result.add_error(f"Base directory not found: {base_dir}")

        try:
            GlobScanner(options.glob_includes, options.glob_excludes)
        except GlobPatternError as e:
            result.add_error(str(e))

        if options.upload_workers < 1:
            result.add_error("Upload workers must be at least 1")

        if not options.use_cache:
            result.add_warning("Cache disabled: every file will be uploaded")

        return result

    def build(self, options: DeployOptions, app_user: str) -> BuildConfig:
        """
        Create the BuildConfig for a push

        Build environment values are expanded here, once.

        Args:
            options: User options
            app_user: Email of the account owning the API key

        Returns:
            BuildConfig

        Raises:
            ConfigError: If an option is invalid
        """
        if not options.api_key:
            raise ConfigError("API key is required")
        if not options.app_name:
            raise ConfigError("Application name is required")

        buildpack_url = self.check_buildpack_url(options.buildpack_url)
        env = self.expander.expand_all(self.parse_build_env(options.build_env))

        return BuildConfig(
            api_key=options.api_key,
            consumer_user_agent=self.user_agent,
            app_name=options.app_name,
            app_user=app_user,
            read_cache=options.use_cache,
            write_cache=True,
            write_slug=False,
            buildpack_url=buildpack_url,
            env=env,
        )


def validate_options(options: DeployOptions,
                     environ: Optional[Mapping[str, str]] = None) -> ValidationResult:
    """Validate options without touching the network"""
    return ConfigBuilder(environ).validate(options)
