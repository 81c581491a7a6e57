"""Filesystem access interface used by the size aggregator.

The aggregator never calls the OS directly. It depends on a
FileSystemReader so tests can substitute a deterministic in-memory tree.
"""

import os
import stat
from abc import ABC, abstractmethod

from hostprobe.filesystem.models import EntryKind, EntryStat


class FileSystemReader(ABC):
    """Abstract read-only view of a filesystem.

    Implementations raise OSError (or a subclass) on failure, exactly as
    the ``os`` module does.

    Example:
        >>> reader = LocalFileSystemReader()
        >>> reader.stat("/etc/hostname").kind
        <EntryKind.FILE: 'file'>
    """

    @abstractmethod
    def stat(self, path: str, *, follow_symlinks: bool = False) -> EntryStat:
        """Return metadata for ``path``.

        Args:
            path: Path to inspect.
            follow_symlinks: If True, report the symlink target instead
                of the link itself.

        Returns:
            EntryStat for the entry.

        Raises:
            OSError: If the metadata cannot be read.
        """

    @abstractmethod
    def list_dir(self, path: str) -> list[str]:
        """Return the full paths of the entries directly inside ``path``.

        Args:
            path: Directory to list.

        Returns:
            Child paths in no particular order.

        Raises:
            OSError: If the directory cannot be listed.
        """


def _kind_from_mode(mode: int) -> EntryKind:
    if stat.S_ISDIR(mode):
        return EntryKind.DIRECTORY
    if stat.S_ISREG(mode):
        return EntryKind.FILE
    if stat.S_ISLNK(mode):
        return EntryKind.SYMLINK
    return EntryKind.OTHER


class LocalFileSystemReader(FileSystemReader):
    """FileSystemReader backed by the local OS (os.stat / os.scandir)."""

    def stat(self, path: str, *, follow_symlinks: bool = False) -> EntryStat:
        st = os.stat(path, follow_symlinks=follow_symlinks)
        return EntryStat(
            kind=_kind_from_mode(st.st_mode),
            size=st.st_size,
            device=st.st_dev,
            inode=st.st_ino,
            links=st.st_nlink,
        )

    def list_dir(self, path: str) -> list[str]:
        with os.scandir(path) as entries:
            return [entry.path for entry in entries]
