"""Volume capacity commands.

Reports total and available bytes for a mount point, or lists every
mounted volume.
"""

import json
from typing import Annotated

import typer
from rich.markup import escape

from hostprobe.api import get_drive_size
from hostprobe.cli.types import OutputFormat
from hostprobe.core.errors import ProbeError
from hostprobe.utils.formatting import (
    console,
    create_volume_table,
    format_size,
    format_volume_row,
    print_error,
    print_info,
)
from hostprobe.volumes.table import PsutilVolumeEnumerator, list_volumes


def drive(
    path: Annotated[
        str,
        typer.Argument(help="Mount point to look up (exact match, e.g. '/')."),
    ],
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format.", case_sensitive=False),
    ] = OutputFormat.TABLE,
) -> None:
    """Show total and available capacity of a mounted volume."""
    try:
        total, available = get_drive_size(path)
    except ProbeError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if output_format == OutputFormat.JSON:
        data = {"mount_point": path, "total": total, "available": available}
        console.print_json(json.dumps(data))
        return

    console.print(
        f"[path]{escape(path)}[/]  total [size]{format_size(total)}[/]"
        f"  available [size]{format_size(available)}[/]"
    )


def volumes(
    include_virtual: Annotated[
        bool,
        typer.Option("--all", "-a", help="Include pseudo filesystems (tmpfs, proc, ...)."),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format.", case_sensitive=False),
    ] = OutputFormat.TABLE,
) -> None:
    """List mounted volumes with their capacity."""
    try:
        found = list_volumes(PsutilVolumeEnumerator(include_virtual=include_virtual))
    except ProbeError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if output_format == OutputFormat.JSON:
        data = [
            {
                "mount_point": v.mount_point,
                "device": v.device,
                "fstype": v.fstype,
                "total": v.total,
                "available": v.available,
            }
            for v in found
        ]
        console.print_json(json.dumps(data))
        return

    if not found:
        print_info("No mounted volumes found.")
        return

    table = create_volume_table()
    for volume in found:
        table.add_row(*format_volume_row(volume))
    console.print(table)
