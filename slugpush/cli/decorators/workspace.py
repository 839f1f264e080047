"""Workspace option decorators for CLI commands"""

from functools import wraps
from pathlib import Path
from typing import Callable

import click

from ..utils.output import console
from ...api.exceptions import ConfigError
from ...constants import PROJECT_CONFIG_FILE, EMOJI_ERROR
from ...core.config_builder import load_project_config, resolve_options, resolve_settings
from ...storage import StorageFactory

_WORKSPACE_OPTIONS = [
    click.argument('base_dir', required=False, type=click.Path(file_okay=False, path_type=Path)),
    click.option('-c', '--config', 'config_file', type=click.Path(dir_okay=False, path_type=Path),
                 help=f'Project file (default: BASE_DIR/{PROJECT_CONFIG_FILE})'),
    click.option('-a', '--app', 'app_name', help='Target application name'),
    click.option('--api-key', help='Platform API key (or SLUGPUSH_API_KEY)'),
    click.option('--include', 'glob_includes', help="Comma-separated include globs (default '**')"),
    click.option('--exclude', 'glob_excludes', help='Comma-separated exclude globs'),
    click.option('--cache/--no-cache', 'use_cache', default=None,
                 help='Read the remote cache to skip unchanged files'),
    click.option('--cache-store', 'cache_type', type=click.Choice(['remote', 'file', 'memory']),
                 help='Where upload state is kept'),
    click.option('--storage', 'storage_type', type=click.Choice(StorageFactory().get_supported_types()),
                 help='Upload destination'),
    click.option('--platform-url', help='Platform API root URL'),
    click.option('--build-url', help='Build service root URL'),
]

# Command values that map onto DeployOptions / ServiceSettings
_OPTION_KEYS = ('app_name', 'api_key', 'glob_includes', 'glob_excludes', 'use_cache',
                'buildpack_url', 'release_desc', 'upload_workers')
_SETTINGS_KEYS = ('platform_url', 'build_url', 'storage_type', 'cache_type')


def workspace_options(func: Callable) -> Callable:
    """Decorator adding workspace options and resolving them

    The wrapped command receives 'options' (DeployOptions) and 'settings'
    (ServiceSettings) instead of the individual option values. Project
    file values are overridden by SLUGPUSH_* variables, which are
    overridden by command line options.

    Args:
        func: Command function to decorate

    Returns:
        Decorated function
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        ctx = click.get_current_context()

        base_dir = kwargs.pop('base_dir', None) or Path('.')
        config_file = kwargs.pop('config_file', None) or base_dir

        overrides = {key: kwargs.pop(key) for key in _OPTION_KEYS if key in kwargs}
        overrides['base_dir'] = str(base_dir)
        settings_overrides = {key: kwargs.pop(key, None) for key in _SETTINGS_KEYS}

        try:
            file_data = load_project_config(config_file)
            kwargs['options'] = resolve_options(file_data, overrides)
            kwargs['settings'] = resolve_settings(file_data, settings_overrides)
        except ConfigError as e:
            console.print(f"{EMOJI_ERROR} {e}")
            ctx.exit(1)

        return func(*args, **kwargs)

    for option in reversed(_WORKSPACE_OPTIONS):
        wrapper = option(wrapper)

    return wrapper
