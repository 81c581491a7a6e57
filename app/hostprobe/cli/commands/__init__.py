"""CLI commands for hostprobe.

This package contains all subcommand implementations.
"""

from hostprobe.cli.commands import config, drive, folder, invoke, send

__all__ = ["config", "drive", "folder", "invoke", "send"]
