"""Error taxonomy for host introspection commands.

Every failure raised by hostprobe is a ProbeError tagged with an ErrorKind.
Callers branch on the kind; the human-readable message is only rendered at
the command boundary (see hostprobe.api).
"""

import errno
from enum import Enum


class ErrorKind(str, Enum):
    """Kind of failure reported by a probe command.

    Attributes:
        NOT_FOUND: Target path or mount point does not exist.
        PERMISSION_DENIED: Traversal or metadata read blocked by OS permissions.
        IO_ERROR: Generic read or listing failure.
        INVALID_ADDRESS: Malformed host or port for the socket client.
        SERIALIZATION_ERROR: Message payload could not be encoded as JSON.
        CONNECTION_ERROR: Socket connect failed (refused, unreachable, timeout).
        WRITE_ERROR: Sending the payload failed after connecting.
        READ_ERROR: Reading the response failed after a successful write.
    """

    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    IO_ERROR = "io_error"
    INVALID_ADDRESS = "invalid_address"
    SERIALIZATION_ERROR = "serialization_error"
    CONNECTION_ERROR = "connection_error"
    WRITE_ERROR = "write_error"
    READ_ERROR = "read_error"


_NOT_FOUND_ERRNOS = frozenset({errno.ENOENT, errno.ENOTDIR})
_PERMISSION_ERRNOS = frozenset({errno.EACCES, errno.EPERM})


class ProbeError(Exception):
    """Base exception for all probe command failures.

    Attributes:
        kind: Tagged failure kind.
        message: Human-readable description.
        path: Filesystem path involved in the failure, if any.
    """

    kind: ErrorKind = ErrorKind.IO_ERROR

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        return self.message

    @classmethod
    def from_os_error(cls, exc: OSError, path: str) -> "ProbeError":
        """Classify an OSError raised while touching ``path``.

        Args:
            exc: The error raised by the OS call.
            path: Path the call was made for.

        Returns:
            NotFoundError, PermissionDeniedError or FilesystemIOError.
        """
        reason = exc.strerror or str(exc)
        not_found = isinstance(exc, FileNotFoundError | NotADirectoryError)
        if not_found or exc.errno in _NOT_FOUND_ERRNOS:
            return NotFoundError(f"{path} does not exist", path=path)
        if isinstance(exc, PermissionError) or exc.errno in _PERMISSION_ERRNOS:
            return PermissionDeniedError(f"Permission denied: {path}", path=path)
        return FilesystemIOError(f"Failed to read {path}: {reason}", path=path)


class NotFoundError(ProbeError):
    """Raised when a path or mount point does not exist."""

    kind = ErrorKind.NOT_FOUND


class PermissionDeniedError(ProbeError):
    """Raised when the OS refuses access to a path."""

    kind = ErrorKind.PERMISSION_DENIED


class FilesystemIOError(ProbeError):
    """Raised for listing or metadata failures not covered by other kinds."""

    kind = ErrorKind.IO_ERROR


class InvalidAddressError(ProbeError):
    """Raised for a malformed host or out-of-range port."""

    kind = ErrorKind.INVALID_ADDRESS


class SerializationError(ProbeError):
    """Raised when a message cannot be encoded as JSON."""

    kind = ErrorKind.SERIALIZATION_ERROR


class ProbeConnectionError(ProbeError):
    """Raised when a TCP connection cannot be established."""

    kind = ErrorKind.CONNECTION_ERROR


class WriteError(ProbeError):
    """Raised when the payload cannot be sent."""

    kind = ErrorKind.WRITE_ERROR


class ReadError(ProbeError):
    """Raised when the response cannot be read."""

    kind = ErrorKind.READ_ERROR
