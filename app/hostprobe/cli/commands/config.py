"""Configuration commands.

Shows the effective configuration or writes a default config file.
"""

from typing import Annotated

import tomli_w
import typer
from rich.markup import escape

from hostprobe.cli.types import load_config_or_exit
from hostprobe.core.config import ConfigError, ProbeConfig, save_config
from hostprobe.core.paths import get_config_path
from hostprobe.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show or initialize the hostprobe configuration.",
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Print the effective configuration as TOML."""
    config = load_config_or_exit()
    path = get_config_path()
    if path.exists():
        print_info(f"Loaded from {path}")
    else:
        print_info(f"No config file at {path}, showing defaults")
    console.print(escape(tomli_w.dumps(config.model_dump(mode="json", exclude_none=True))))


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with default settings."""
    path = get_config_path()
    if path.exists() and not force:
        print_error(f"Config already exists: {path} (use --force to overwrite)")
        raise typer.Exit(code=1)

    try:
        saved = save_config(ProbeConfig(), path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {saved}")
