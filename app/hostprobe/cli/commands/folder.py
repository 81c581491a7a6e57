"""Directory size command."""

import json
from typing import Annotated

import typer
from rich.markup import escape

from hostprobe.cli.types import OutputFormat, load_config_or_exit
from hostprobe.core.errors import ProbeError
from hostprobe.filesystem.aggregator import DirectorySizeAggregator
from hostprobe.filesystem.models import FailurePolicy, FolderSizeReport
from hostprobe.utils.formatting import console, format_size, print_error, print_warning


def folder(
    path: Annotated[
        str,
        typer.Argument(help="File or directory to measure."),
    ],
    best_effort: Annotated[
        bool | None,
        typer.Option(
            "--best-effort/--fail-fast",
            help="Skip permission-denied entries instead of failing. Defaults to config.",
        ),
    ] = None,
    details: Annotated[
        bool,
        typer.Option("--details", "-d", help="Show file and directory counts."),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format.", case_sensitive=False),
    ] = OutputFormat.TABLE,
) -> None:
    """Compute the total size of a directory tree."""
    if best_effort is None:
        best_effort = load_config_or_exit().traversal.skip_permission_denied
    policy = FailurePolicy.BEST_EFFORT if best_effort else FailurePolicy.FAIL_FAST

    try:
        report = DirectorySizeAggregator(policy=policy).measure(path)
    except ProbeError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if output_format == OutputFormat.JSON:
        _print_json(report)
        return

    console.print(f"[size]{format_size(report.size_bytes)}[/]  [path]{escape(path)}[/]")
    if details:
        console.print(
            f"[dim]{report.size_bytes} bytes in {report.file_count} files, "
            f"{report.directory_count} directories[/dim]"
        )
    if report.skipped:
        print_warning(f"Skipped {len(report.skipped)} unreadable entries")
        for skipped in report.skipped:
            console.print(f"  [dim]{escape(skipped)}[/dim]")


def _print_json(report: FolderSizeReport) -> None:
    """Display a size report as JSON."""
    data = {
        "path": report.path,
        "size_bytes": report.size_bytes,
        "file_count": report.file_count,
        "directory_count": report.directory_count,
        "skipped": list(report.skipped),
    }
    console.print_json(json.dumps(data))
