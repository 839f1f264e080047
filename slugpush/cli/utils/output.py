# slugpush/cli/utils/output.py
"""Output formatting utilities"""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ...constants import MSG_RELEASE_END, EMOJI_SUCCESS, EMOJI_ERROR, EMOJI_WARNING
from ...models import DeployResult, DiffResult, DiffStatus, Manifest, ValidationResult
from ...utils.formatting import format_duration, format_size

console = Console()


def format_deploy_result(result: DeployResult) -> None:
    """Format and display push result"""
    if result.is_success:
        release = result.release
        console.print(MSG_RELEASE_END.format(version=release.version,
                                             web_url=release.web_url or "-"))
        if result.bundle_size is not None:
            console.print(f"[dim]Bundle: {format_size(result.bundle_size)}[/dim]")
        if result.duration is not None:
            console.print(f"[dim]Duration: {format_duration(result.duration)}[/dim]")
        return

    lines = [f"[red]{EMOJI_ERROR} Push failed:[/red] {result.message}"]
    if result.errors:
        lines.append(f"[bold]Code:[/bold] {result.errors[-1].code}")
    if result.built_but_not_released:
        lines.append(f"[bold]Built artifact:[/bold] {result.artifact_ref}")
        lines.append("The build succeeded; only the release step needs repeating.")

    console.print(Panel("\n".join(lines), title="Push Error", border_style="red"))


def format_diff(manifest: Manifest, diff: DiffResult, show_unchanged: bool = False) -> None:
    """Format and display what a push would upload"""
    table = Table(title=f"Workspace {manifest.base_dir}")
    table.add_column("Path", style="cyan")
    table.add_column("Status")
    table.add_column("Size", justify="right")

    styles = {
        DiffStatus.NEW: "[green]new[/green]",
        DiffStatus.MODIFIED: "[yellow]modified[/yellow]",
        DiffStatus.UNCHANGED: "[dim]unchanged[/dim]",
    }

    for entry in manifest:
        status = diff.classifications[entry.path]
        if status == DiffStatus.UNCHANGED and not show_unchanged:
            continue
        table.add_row(entry.path, styles[status], format_size(entry.size))

    if table.row_count:
        console.print(table)

    console.print(
        f"{diff.total_files} files: "
        f"{diff.count(DiffStatus.NEW)} new, "
        f"{diff.count(DiffStatus.MODIFIED)} modified, "
        f"{diff.count(DiffStatus.UNCHANGED)} unchanged; "
        f"{diff.upload_count} uploads needed"
    )


def format_validation_result(result: ValidationResult) -> None:
    """Format and display option validation findings"""
    for message in result.info:
        console.print(f"  [blue]•[/blue] {message}")
    for message in result.warnings:
        console.print(f"  [yellow]{EMOJI_WARNING}[/yellow] {message}")
    for message in result.errors:
        console.print(f"  [red]{EMOJI_ERROR}[/red] {message}")

    if result.is_valid:
        console.print(f"[green]{EMOJI_SUCCESS} Configuration is valid[/green]")
    else:
        console.print(f"[red]{EMOJI_ERROR} Configuration has {len(result.errors)} error(s)[/red]")


def print_error(message: str, error: Optional[Exception] = None) -> None:
    """Print error message"""
    if error:
        console.print(f"[red]Error:[/red] {message}: {str(error)}")
    else:
        console.print(f"[red]Error:[/red] {message}")


def print_success(message: str) -> None:
    """Print success message"""
    console.print(f"[green]Success:[/green] {message}")
