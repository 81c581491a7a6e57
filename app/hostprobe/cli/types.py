"""Shared types and helpers for CLI commands."""

from enum import Enum

import typer

from hostprobe.core.config import ConfigError, ProbeConfig, load_config
from hostprobe.utils.formatting import print_error


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def load_config_or_exit() -> ProbeConfig:
    """Load the user configuration, exiting with code 1 if it is invalid.

    Returns:
        Validated ProbeConfig (defaults if no config file exists).

    Raises:
        typer.Exit: If the configuration cannot be loaded.
    """
    try:
        return load_config()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
