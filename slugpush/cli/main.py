# slugpush/cli/main.py
"""Main CLI entry point for slugpush"""

import logging
import os
import sys

import click
from rich.logging import RichHandler

from ..__version__ import __version__
from ..constants import APP_NAME, LOG_FORMAT, ENV_LOG_LEVEL
from .utils.output import console

# Import all commands
from .commands import (
    push,
    diff,
    check,
    bundle,
)


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Setup logging configuration

    Args:
        verbose: Enable verbose output (INFO level)
        debug: Enable debug output (DEBUG level)
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = os.environ.get(ENV_LOG_LEVEL, "WARNING").upper()

    # Configure rich handler
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ],
        force=True
    )

    # Request logs would interleave with build output
    for name in ("asyncio", "aiofiles", "httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


@click.group(name=APP_NAME)
@click.version_option(__version__, prog_name=APP_NAME)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-q', '--quiet', is_flag=True, help='Suppress all output except errors')
@click.pass_context
def cli(ctx, verbose, debug, quiet):
    """slugpush - incremental deploys from CI

    Uploads only the files that changed since the last push, builds the
    application remotely with a buildpack and releases the result.

    Options can come from a .slugpush.yaml project file, SLUGPUSH_*
    environment variables and the command line, in increasing priority.
    """
    # Setup logging
    if quiet:
        logging.disable(logging.ERROR)
    else:
        setup_logging(verbose=verbose, debug=debug)

    ctx.obj = {'verbose': verbose, 'debug': debug, 'quiet': quiet}


# Register commands
cli.add_command(push.push)
cli.add_command(diff.diff)
cli.add_command(check.check)
cli.add_command(bundle.bundle)


def main():
    """Console script entry: 130 on interrupt, 1 on unexpected errors"""
    try:
        cli(prog_name=APP_NAME)

    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)

    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        if '--debug' in sys.argv or '-d' in sys.argv:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
