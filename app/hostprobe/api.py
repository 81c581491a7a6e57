"""Host command boundary.

These are the entry points a desktop frontend invokes. Each call is
independent and stateless. The typed functions raise ProbeError; invoke()
dispatches by command name and renders the outcome, including any error
message, as an InvokeResponse.
"""

import logging
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from hostprobe.core.config import ConfigError, ProbeConfig, load_config
from hostprobe.core.errors import ErrorKind, ProbeError
from hostprobe.filesystem.aggregator import folder_size
from hostprobe.filesystem.reader import FileSystemReader
from hostprobe.net.client import send_message
from hostprobe.net.dialer import SocketDialer
from hostprobe.volumes.table import VolumeEnumerator, drive_size

logger = logging.getLogger(__name__)


def get_drive_size(path: str, *, enumerator: VolumeEnumerator | None = None) -> tuple[int, int]:
    """Return (total, available) bytes of the volume mounted at ``path``."""
    return drive_size(path, enumerator)


def get_folder_size(
    path: str,
    *,
    config: ProbeConfig | None = None,
    reader: FileSystemReader | None = None,
) -> int:
    """Return the aggregate byte size of ``path``.

    Traversal is fail-fast unless ``traversal.skip_permission_denied`` is
    enabled in the configuration.
    """
    cfg = config or load_config()
    return folder_size(
        path,
        skip_permission_denied=cfg.traversal.skip_permission_denied,
        reader=reader,
    )


def send_tcp_message(
    address: str,
    port: int,
    message: Any,
    *,
    config: ProbeConfig | None = None,
    dialer: SocketDialer | None = None,
) -> str:
    """Send ``message`` as JSON to ``address:port`` and return the reply text."""
    cfg = config or load_config()
    return send_message(
        address,
        port,
        message,
        dialer=dialer,
        read_buffer_size=cfg.socket.read_buffer_size,
        framing=cfg.socket.framing,
        max_response_bytes=cfg.socket.max_response_bytes,
        timeout=cfg.socket.connect_timeout,
    )


# =============================================================================
# Command dispatch
# =============================================================================


class InvokeResponse(BaseModel):
    """Outcome of a dispatched command, as returned to the frontend.

    Attributes:
        ok: True if the command succeeded.
        value: Command result (list for drive size, int, or str).
        error: Human-readable error message on failure.
        kind: Error kind on failure, None for dispatch errors.
    """

    model_config = ConfigDict(extra="forbid")

    ok: bool
    value: Any = None
    error: str | None = None
    kind: ErrorKind | None = None


class _PathArgs(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: str


class _TcpMessageArgs(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # Left untyped: parse_endpoint rejects bad values as invalid_address
    address: Any
    port: Any
    message: Any


def _run_drive_size(args: Mapping[str, Any], _config: ProbeConfig | None) -> Any:
    parsed = _PathArgs.model_validate(args)
    total, available = get_drive_size(parsed.path)
    return [total, available]


def _run_folder_size(args: Mapping[str, Any], config: ProbeConfig | None) -> Any:
    parsed = _PathArgs.model_validate(args)
    return get_folder_size(parsed.path, config=config)


def _run_tcp_message(args: Mapping[str, Any], config: ProbeConfig | None) -> Any:
    parsed = _TcpMessageArgs.model_validate(args)
    return send_tcp_message(parsed.address, parsed.port, parsed.message, config=config)


COMMANDS: dict[str, Callable[[Mapping[str, Any], ProbeConfig | None], Any]] = {
    "get_drive_size": _run_drive_size,
    "get_folder_size": _run_folder_size,
    "send_tcp_message": _run_tcp_message,
}


def invoke(
    command: str,
    args: Mapping[str, Any],
    *,
    config: ProbeConfig | None = None,
) -> InvokeResponse:
    """Run a named command and render its outcome.

    Args:
        command: One of the names in COMMANDS.
        args: Keyword arguments for the command.
        config: Settings to use. If None, loaded from the config file.

    Returns:
        InvokeResponse with either the value or the error message.
    """
    handler = COMMANDS.get(command)
    if handler is None:
        return InvokeResponse(ok=False, error=f"Unknown command: {command}")

    try:
        value = handler(args, config)
    except ValidationError as e:
        return InvokeResponse(ok=False, error=f"Invalid arguments for {command}: {e}")
    except ConfigError as e:
        return InvokeResponse(ok=False, error=str(e))
    except ProbeError as e:
        logger.debug("%s failed (%s): %s", command, e.kind.value, e)
        return InvokeResponse(ok=False, error=str(e), kind=e.kind)

    return InvokeResponse(ok=True, value=value)
