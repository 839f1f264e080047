"""Check command implementation"""

import sys

import click

from ..decorators import workspace_options
from ..utils.output import console, format_validation_result
from ...core.config_builder import validate_options


@click.command()
@click.option('-b', '--buildpack', 'buildpack_url', help='Buildpack URL to check')
@click.option('-w', '--workers', 'upload_workers', type=int, help='Concurrent uploads')
@workspace_options
def check(options, settings):
    """Validate push options without contacting any service

    Checks the API key and application name, the buildpack URL, the build
    environment syntax, the base directory and the glob patterns.
    """
    console.print(f"Checking [cyan]{options.app_name or '<no app>'}[/cyan] "
                  f"in [cyan]{options.base_dir}[/cyan]")
    console.print(f"[dim]Platform: {settings.platform_url}  Build: {settings.build_url}[/dim]")

    result = validate_options(options)
    format_validation_result(result)

    if not result.is_valid:
        sys.exit(1)
