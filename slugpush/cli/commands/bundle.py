"""Bundle command implementation"""

import sys
from pathlib import Path

import click

from ..decorators import workspace_options
from ..utils.output import print_error, print_success
from ...api.exceptions import SlugPushError
from ...core.bundler import WorkspaceBundler
from ...utils.async_utils import run_async
from ...utils.formatting import format_size


@click.command()
@click.option('-o', '--output', required=True, type=click.Path(dir_okay=False, path_type=Path),
              help='Archive to write (.tar.gz)')
@workspace_options
def bundle(options, settings, output):
    """Pack the selected workspace files into a .tar.gz archive

    Uses the same include/exclude globs as push; the archive never
    contains itself.
    """
    try:
        bundler = WorkspaceBundler(options.glob_includes, options.glob_excludes)
        count = run_async(bundler.create(Path(options.base_dir), output))
    except SlugPushError as e:
        print_error("Bundle failed", e)
        sys.exit(1)

    print_success(f"Packed {count} files into {output} ({format_size(output.stat().st_size)})")
