"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from hostprobe.core.theme import get_theme
from hostprobe.volumes.models import VolumeUsage


def _detect_color_system() -> str | None:
    """Return "truecolor" for interactive terminals, None to let Rich auto-detect."""
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def format_size(size_bytes: int | None) -> str:
    """Format a byte count as a human-readable string (binary units).

    Args:
        size_bytes: Number of bytes, or None if unknown.

    Returns:
        String such as "512 B", "1.5 KB" or "3.2 TB".
    """
    if size_bytes is None or size_bytes == 0:
        return "0 B"
    size = float(size_bytes)
    for unit in ("B", "KB", "MB", "GB", "TB", "PB"):
        if abs(size) < 1024:
            return f"{size:.1f} {unit}" if unit != "B" else f"{int(size)} B"
        size /= 1024
    return f"{size:.1f} EB"


def usage_style(volume: VolumeUsage) -> str:
    """Pick a theme style for a volume based on how full it is.

    Args:
        volume: Volume to classify.

    Returns:
        "usage_low" below 75% used, "usage_medium" below 90%, else "usage_high".
    """
    if volume.total == 0:
        return "usage_low"
    ratio = volume.used / volume.total
    if ratio < 0.75:
        return "usage_low"
    if ratio < 0.90:
        return "usage_medium"
    return "usage_high"


def create_volume_table(title: str = "Mounted Volumes") -> Table:
    """Create a pre-configured table for displaying volume capacity.

    Args:
        title: Table title.

    Returns:
        Rich Table configured for volume display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("Mount Point", style="path", no_wrap=True)
    table.add_column("Device", style="muted")
    table.add_column("Type", style="muted")
    table.add_column("Total", style="info", justify="right")
    table.add_column("Available", justify="right")
    return table


def format_volume_row(volume: VolumeUsage) -> tuple[str, str, str, str, str]:
    """Format a volume as a table row, coloring available space by usage.

    Args:
        volume: The volume to format.

    Returns:
        Tuple of (mount point, device, fstype, total, available) with Rich markup.
    """
    style = usage_style(volume)
    return (
        escape(volume.mount_point),
        volume.device or "-",
        volume.fstype or "-",
        format_size(volume.total),
        f"[{style}]{format_size(volume.available)}[/]",
    )


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{escape(message)}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{escape(message)}[/]")
