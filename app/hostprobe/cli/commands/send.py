"""TCP message command.

Sends one JSON message to a TCP endpoint and prints the raw reply.
"""

import json
from typing import Annotated, Any

import typer

from hostprobe.cli.types import load_config_or_exit
from hostprobe.core.errors import ProbeError
from hostprobe.net.client import send_message
from hostprobe.net.models import ResponseFraming
from hostprobe.utils.formatting import print_error


def send(
    address: Annotated[
        str,
        typer.Argument(help="Host to connect to (IP address or hostname)."),
    ],
    port: Annotated[
        int,
        typer.Argument(help="TCP port."),
    ],
    message: Annotated[
        str,
        typer.Argument(help="JSON value to send, e.g. '{\"cmd\": \"ping\"}'."),
    ],
    until_close: Annotated[
        bool | None,
        typer.Option(
            "--until-close/--single-read",
            help="Read until the peer closes instead of one bounded read. Defaults to config.",
        ),
    ] = None,
    buffer_size: Annotated[
        int | None,
        typer.Option("--buffer-size", "-b", min=1, help="Read buffer size in bytes."),
    ] = None,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", "-t", min=0.001, help="Socket timeout in seconds."),
    ] = None,
) -> None:
    """Send a JSON message over TCP and print the first response chunk."""
    try:
        payload: Any = json.loads(message)
    except json.JSONDecodeError as e:
        print_error(f"Message is not valid JSON: {e}")
        raise typer.Exit(code=1) from e

    settings = load_config_or_exit().socket
    if until_close is None:
        framing = settings.framing
    else:
        framing = ResponseFraming.UNTIL_CLOSE if until_close else ResponseFraming.SINGLE_READ

    try:
        response = send_message(
            address,
            port,
            payload,
            read_buffer_size=buffer_size or settings.read_buffer_size,
            framing=framing,
            max_response_bytes=settings.max_response_bytes,
            timeout=timeout if timeout is not None else settings.connect_timeout,
        )
    except ProbeError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    typer.echo(response)
