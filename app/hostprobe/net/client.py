"""Single-shot TCP request/response client.

Opens one connection, writes a JSON-encoded message with no framing,
reads the reply and closes the connection. The peer must agree on message
boundaries out of band: nothing is added to the payload, and by default
exactly one bounded read of the reply is performed.
"""

import ipaddress
import json
import logging
import re
import socket
from typing import Any

from hostprobe.core.errors import (
    InvalidAddressError,
    ProbeConnectionError,
    ReadError,
    SerializationError,
    WriteError,
)
from hostprobe.net.dialer import SocketDialer, TcpDialer
from hostprobe.net.models import DEFAULT_READ_BUFFER_SIZE, Endpoint, ResponseFraming

logger = logging.getLogger(__name__)

# RFC 1123 hostname: dot-separated labels of letters, digits and inner hyphens
_HOSTNAME_RE = re.compile(
    r"^(?=.{1,253}\.?$)(?!-)[A-Za-z0-9-]{1,63}(?<!-)(\.(?!-)[A-Za-z0-9-]{1,63}(?<!-))*\.?$"
)

_MAX_PORT = 65535


def parse_endpoint(address: str, port: int) -> Endpoint:
    """Validate an address/port pair.

    Accepts IPv4 and IPv6 literals (IPv6 optionally in brackets) and
    RFC 1123 hostnames.

    Args:
        address: Host to connect to.
        port: TCP port (1-65535).

    Returns:
        Validated Endpoint.

    Raises:
        InvalidAddressError: If the host or port is malformed.
    """
    if not isinstance(address, str):
        msg = f"Invalid address or port: address {address!r} is not a string"
        raise InvalidAddressError(msg)
    host = address.strip()
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]

    if isinstance(port, bool) or not isinstance(port, int):
        msg = f"Invalid address or port: port {port!r} is not an integer"
        raise InvalidAddressError(msg)
    if not 1 <= port <= _MAX_PORT:
        msg = f"Invalid address or port: port {port!r} out of range 1-{_MAX_PORT}"
        raise InvalidAddressError(msg)

    if not host:
        raise InvalidAddressError("Invalid address or port: empty address")

    try:
        ipaddress.ip_address(host)
    except ValueError:
        # An all-numeric last label is a malformed IP, not a hostname
        if not _HOSTNAME_RE.match(host) or host.rstrip(".").rsplit(".", 1)[-1].isdigit():
            raise InvalidAddressError(f"Invalid address or port: {address!r}") from None

    return Endpoint(host=host, port=port)


def serialize_message(message: Any) -> bytes:
    """Encode ``message`` as compact UTF-8 JSON.

    Non-ASCII characters are written as UTF-8, not escaped. NaN and
    infinities are rejected because they are not valid JSON.

    Args:
        message: JSON-compatible value.

    Returns:
        Encoded payload.

    Raises:
        SerializationError: If the value cannot be encoded.
    """
    try:
        text = json.dumps(message, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
        return text.encode("utf-8")
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Failed to serialize message: {e}") from e


class TcpMessageClient:
    """Sends one JSON message per call and returns the decoded reply.

    Args:
        dialer: Connection factory. Defaults to TcpDialer.
        read_buffer_size: Size of each read in bytes.
        framing: SINGLE_READ performs one bounded read; UNTIL_CLOSE reads
            until the peer closes the connection.
        max_response_bytes: Cap on bytes read in UNTIL_CLOSE mode.
        timeout: Socket timeout in seconds (None = blocking).
    """

    def __init__(
        self,
        dialer: SocketDialer | None = None,
        *,
        read_buffer_size: int = DEFAULT_READ_BUFFER_SIZE,
        framing: ResponseFraming = ResponseFraming.SINGLE_READ,
        max_response_bytes: int = 1_048_576,
        timeout: float | None = None,
    ) -> None:
        if read_buffer_size < 1:
            msg = f"read_buffer_size must be positive, got {read_buffer_size}"
            raise ValueError(msg)
        self._dialer = dialer or TcpDialer()
        self._read_buffer_size = read_buffer_size
        self._framing = framing
        self._max_response_bytes = max_response_bytes
        self._timeout = timeout

    def send(self, address: str, port: int, message: Any) -> str:
        """Send ``message`` to ``address:port`` and return the reply.

        Args:
            address: Host to connect to.
            port: TCP port.
            message: JSON-compatible value.

        Returns:
            Reply decoded as UTF-8; invalid sequences become U+FFFD.

        Raises:
            InvalidAddressError: Malformed host or port.
            SerializationError: Message is not JSON-encodable.
            ProbeConnectionError: Connection could not be established.
            WriteError: Payload could not be sent.
            ReadError: Reply could not be read.
        """
        endpoint = parse_endpoint(address, port)
        payload = serialize_message(message)

        try:
            sock = self._dialer.connect(endpoint, self._timeout)
        except OSError as e:
            raise ProbeConnectionError(f"Failed to connect to {endpoint}: {e}") from e

        with sock:
            try:
                sock.sendall(payload)
            except OSError as e:
                raise WriteError(f"Failed to send message to {endpoint}: {e}") from e
            logger.debug("Sent %d bytes to %s", len(payload), endpoint)

            try:
                data = self._read(sock)
            except OSError as e:
                raise ReadError(f"Failed to read response from {endpoint}: {e}") from e

        logger.debug("Received %d bytes from %s", len(data), endpoint)
        return data.decode("utf-8", errors="replace")

    def _read(self, sock: socket.socket) -> bytes:
        if self._framing == ResponseFraming.SINGLE_READ:
            return sock.recv(self._read_buffer_size)

        chunks: list[bytes] = []
        received = 0
        while received < self._max_response_bytes:
            chunk = sock.recv(min(self._read_buffer_size, self._max_response_bytes - received))
            if not chunk:
                break
            chunks.append(chunk)
            received += len(chunk)
        return b"".join(chunks)


def send_message(
    address: str,
    port: int,
    message: Any,
    *,
    dialer: SocketDialer | None = None,
    read_buffer_size: int = DEFAULT_READ_BUFFER_SIZE,
    framing: ResponseFraming = ResponseFraming.SINGLE_READ,
    max_response_bytes: int = 1_048_576,
    timeout: float | None = None,
) -> str:
    """Send one JSON message over a fresh TCP connection and return the reply.

    See TcpMessageClient for arguments and errors.
    """
    client = TcpMessageClient(
        dialer,
        read_buffer_size=read_buffer_size,
        framing=framing,
        max_response_bytes=max_response_bytes,
        timeout=timeout,
    )
    return client.send(address, port, message)
