"""Diff command implementation"""

import sys

import click

from ..decorators import workspace_options
from ..utils.output import console, format_diff, print_error
from ...api import Deployer
from ...api.exceptions import SlugPushError


@click.command()
@click.option('--all', 'show_all', is_flag=True, help='Also list unchanged files')
@workspace_options
def diff(options, settings, show_all):
    """Show what a push would upload

    Scans the workspace and compares it with the cache without uploading,
    building or releasing anything.

    Examples:

        slugpush diff -a my-app

        slugpush diff -a my-app --cache-store file --all
    """
    deployer = Deployer(settings=settings)

    try:
        manifest, result = deployer.plan(options)
    except SlugPushError as e:
        print_error("Diff failed", e)
        sys.exit(1)

    format_diff(manifest, result, show_unchanged=show_all)
    if result.upload_count == 0:
        console.print("[green]Nothing to upload[/green]")
