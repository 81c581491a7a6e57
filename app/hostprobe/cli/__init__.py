"""CLI package for hostprobe.

This package contains the Typer application and all subcommands.
"""

from hostprobe.cli.main import app

__all__ = ["app"]
