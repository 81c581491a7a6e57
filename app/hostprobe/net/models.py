"""Socket client domain models."""

from dataclasses import dataclass
from enum import Enum

# Bounded read size used when no configuration overrides it
DEFAULT_READ_BUFFER_SIZE = 1024


class ResponseFraming(str, Enum):
    """How the client decides it has received the full response.

    Attributes:
        SINGLE_READ: One bounded read of at most ``read_buffer_size`` bytes.
            Replies longer than the buffer are truncated.
        UNTIL_CLOSE: Read until the peer closes the connection, capped at
            ``max_response_bytes``.
    """

    SINGLE_READ = "single_read"
    UNTIL_CLOSE = "until_close"


@dataclass(frozen=True, slots=True)
class Endpoint:
    """Validated TCP endpoint.

    Attributes:
        host: IP literal or hostname.
        port: TCP port in the range 1-65535.
    """

    host: str
    port: int

    def __str__(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"
