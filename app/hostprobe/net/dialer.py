"""TCP connection establishment.

The message client depends on a SocketDialer rather than calling
socket.create_connection() directly, so tests can hand it a socketpair.
"""

import logging
import socket
from abc import ABC, abstractmethod

from hostprobe.net.models import Endpoint

logger = logging.getLogger(__name__)


class SocketDialer(ABC):
    """Abstract factory for connected stream sockets."""

    @abstractmethod
    def connect(self, endpoint: Endpoint, timeout: float | None = None) -> socket.socket:
        """Open a connected stream socket to ``endpoint``.

        Args:
            endpoint: Validated host and port.
            timeout: Timeout in seconds applied to connect and later I/O.
                None leaves the socket blocking.

        Returns:
            A connected socket. The caller owns and closes it.

        Raises:
            OSError: If the connection cannot be established.
        """


class TcpDialer(SocketDialer):
    """SocketDialer using socket.create_connection (resolves hostnames)."""

    def connect(self, endpoint: Endpoint, timeout: float | None = None) -> socket.socket:
        logger.debug("Connecting to %s (timeout=%s)", endpoint, timeout)
        return socket.create_connection((endpoint.host, endpoint.port), timeout=timeout)
