"""Filesystem domain models for directory size aggregation.

This module defines the data structures the aggregator works with:
entry kinds and metadata as reported by a FileSystemReader, the
traversal failure policy, and the aggregated size report.
"""

from dataclasses import dataclass
from enum import Enum


class EntryKind(str, Enum):
    """Type of filesystem entry, as seen without following symlinks.

    Attributes:
        DIRECTORY: Directory whose children are aggregated.
        FILE: Regular file contributing its byte length.
        SYMLINK: Symbolic link, counted as a leaf with its own length.
        OTHER: Device, FIFO, socket or anything else, counted as a leaf.
    """

    DIRECTORY = "directory"
    FILE = "file"
    SYMLINK = "symlink"
    OTHER = "other"


class FailurePolicy(str, Enum):
    """How the aggregator reacts to I/O errors below the root.

    Attributes:
        FAIL_FAST: Abort on the first error and surface it.
        BEST_EFFORT: Count permission-denied entries as zero and continue.
            Every other error still aborts.
    """

    FAIL_FAST = "fail_fast"
    BEST_EFFORT = "best_effort"


@dataclass(frozen=True, slots=True)
class EntryStat:
    """Metadata for a single filesystem entry.

    Attributes:
        kind: Entry type.
        size: Length in bytes as reported by the OS.
        device: Device identifier the entry lives on.
        inode: Inode number (or equivalent file identifier).
        links: Hard link count.
    """

    kind: EntryKind
    size: int
    device: int = 0
    inode: int = 0
    links: int = 1

    def __post_init__(self) -> None:
        """Validate entry metadata after initialization."""
        if self.size < 0:
            msg = f"Size cannot be negative, got {self.size}"
            raise ValueError(msg)

    @property
    def identity(self) -> tuple[int, int]:
        """Return the (device, inode) pair identifying the underlying object."""
        return (self.device, self.inode)


@dataclass(frozen=True, slots=True)
class FolderSizeReport:
    """Result of aggregating the size of a subtree.

    Attributes:
        path: Root path that was measured.
        size_bytes: Sum of the lengths of every non-directory entry reached.
        file_count: Number of non-directory entries counted.
        directory_count: Number of directories listed, including the root.
        skipped: Paths excluded under best-effort traversal.
    """

    path: str
    size_bytes: int
    file_count: int
    directory_count: int
    skipped: tuple[str, ...] = ()

    @property
    def complete(self) -> bool:
        """True if no entry was skipped."""
        return not self.skipped
