"""Single-shot TCP request/response client."""

from hostprobe.net.client import TcpMessageClient, parse_endpoint, send_message, serialize_message
from hostprobe.net.dialer import SocketDialer, TcpDialer
from hostprobe.net.models import DEFAULT_READ_BUFFER_SIZE, Endpoint, ResponseFraming

__all__ = [
    "DEFAULT_READ_BUFFER_SIZE",
    "Endpoint",
    "ResponseFraming",
    "SocketDialer",
    "TcpDialer",
    "TcpMessageClient",
    "parse_endpoint",
    "send_message",
    "serialize_message",
]
