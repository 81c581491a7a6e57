"""Command dispatch for frontends.

Runs one host command by name and prints the JSON response envelope
that a desktop frontend consumes.
"""

import json
from typing import Annotated

import typer

from hostprobe.api import COMMANDS, invoke as invoke_command
from hostprobe.utils.formatting import print_error


def invoke(
    command: Annotated[
        str,
        typer.Argument(help=f"Command name: {', '.join(COMMANDS)}."),
    ],
    args: Annotated[
        str,
        typer.Argument(help="JSON object of command arguments, e.g. '{\"path\": \"/\"}'."),
    ] = "{}",
) -> None:
    """Invoke a host command and print its JSON response.

    Exits with code 1 when the response reports an error.
    """
    try:
        parsed = json.loads(args)
    except json.JSONDecodeError as e:
        print_error(f"Arguments are not valid JSON: {e}")
        raise typer.Exit(code=1) from e
    if not isinstance(parsed, dict):
        print_error("Arguments must be a JSON object")
        raise typer.Exit(code=1)

    response = invoke_command(command, parsed)
    typer.echo(response.model_dump_json())
    if not response.ok:
        raise typer.Exit(code=1)
