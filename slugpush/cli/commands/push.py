"""Push command implementation"""

import dataclasses
import sys

import click

from ..decorators import workspace_options
from ..utils.output import console, format_deploy_result
from ..utils.progress import ProgressReporter
from ...api import Deployer
from ...core.event_bus import EventBus


@click.command()
@click.option('-b', '--buildpack', 'buildpack_url', help='Buildpack URL (http, https or git)')
@click.option('-e', '--env', 'env_pairs', multiple=True, metavar='KEY=VALUE',
              help='Build environment entry; ${VAR} is expanded (repeatable)')
@click.option('--env-file', type=click.File('r'), help='Build environment in properties format')
@click.option('-m', '--description', 'release_desc', help='Release description')
@click.option('-w', '--workers', 'upload_workers', type=click.IntRange(min=1),
              help='Concurrent uploads')
@click.option('--write-slug', is_flag=True, help='Write the slug URL to .slugpush/slug')
@click.option('--no-build-output', is_flag=True, help='Hide build output lines')
@click.option('--bundle', is_flag=True,
              help='Release the workspace as one archive instead of building it')
@click.option('--procfile', 'procfile_path', metavar='PATH',
              help='Procfile released with --bundle, relative to the workspace')
@workspace_options
@click.pass_context
def push(ctx, options, settings, env_pairs, env_file, write_slug, no_build_output,
         bundle, procfile_path):
    """Push a workspace: upload changes, build and release

    Files are fingerprinted and only content the cache has not seen is
    uploaded. The build runs remotely and its output is streamed here.

    Examples:

        # Push the current directory
        slugpush push -a my-app

        # Push a build output directory with a pinned buildpack
        slugpush push dist/ -a my-app -b https://github.com/heroku/heroku-buildpack-python

        # Pass build environment, expanded from the CI job
        slugpush push -a my-app -e GIT_COMMIT='${GIT_COMMIT}'

        # Release prebuilt content as is, with its process types
        slugpush push build/ -a my-app --bundle --procfile Procfile
    """
    if procfile_path and not bundle:
        raise click.UsageError("--procfile requires --bundle")

    env_lines = [options.build_env] if options.build_env else []
    if env_file is not None:
        env_lines.append(env_file.read())
    env_lines.extend(env_pairs)
    if env_lines:
        options = dataclasses.replace(options, build_env="\n".join(env_lines))

    bus = EventBus()
    ProgressReporter(console, show_build_output=not no_build_output).attach(bus)

    deployer = Deployer(settings=settings, event_bus=bus)
    if bundle:
        result = deployer.deploy_workspace(options, procfile_path=procfile_path)
    else:
        result = deployer.deploy(options, write_slug=write_slug)

    format_deploy_result(result)

    if ctx.obj and ctx.obj.get('debug') and result.error is not None:
        console.print(f"[dim]{result.to_dict()}[/dim]")

    if not result.is_success:
        sys.exit(1)
