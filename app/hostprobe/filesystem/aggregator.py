"""Recursive directory size aggregation.

Sums the byte lengths of every non-directory entry reachable from a root
path. Traversal is depth-first over an explicit stack, so arbitrarily deep
trees do not hit the interpreter recursion limit. Directories are tracked
by (device, inode) for the lifetime of one call, which stops symlink loops
and bind mounts from being counted twice. Hard-linked files are counted
once per call.

Symlinks below the root are never followed: they contribute their own
length as a leaf. The root itself is resolved through symlinks, so
measuring a link to a directory measures that directory.
"""

import logging

from hostprobe.core.errors import ErrorKind, ProbeError
from hostprobe.filesystem.models import EntryKind, EntryStat, FailurePolicy, FolderSizeReport
from hostprobe.filesystem.reader import FileSystemReader, LocalFileSystemReader

logger = logging.getLogger(__name__)


class DirectorySizeAggregator:
    """Computes the aggregate byte size of a directory subtree.

    Each call to measure() owns its own traversal state, so one aggregator
    may be shared between threads.

    Args:
        reader: Filesystem access. Defaults to the local filesystem.
        policy: Reaction to I/O errors below the root. FAIL_FAST aborts on
            the first error; BEST_EFFORT skips permission-denied entries.
    """

    def __init__(
        self,
        reader: FileSystemReader | None = None,
        *,
        policy: FailurePolicy = FailurePolicy.FAIL_FAST,
    ) -> None:
        self._reader = reader or LocalFileSystemReader()
        self._policy = policy

    @property
    def policy(self) -> FailurePolicy:
        """Failure policy applied below the root."""
        return self._policy

    def folder_size(self, path: str) -> int:
        """Return the total size in bytes of everything under ``path``.

        Args:
            path: File or directory to measure.

        Returns:
            Aggregate byte count. For a regular file, its length.

        Raises:
            ProbeError: NotFound if ``path`` does not exist, otherwise the
                first traversal error not tolerated by the policy.
        """
        return self.measure(path).size_bytes

    def measure(self, path: str) -> FolderSizeReport:
        """Measure ``path`` and return a full report.

        Args:
            path: File or directory to measure.

        Returns:
            FolderSizeReport with totals and any skipped paths.

        Raises:
            ProbeError: See folder_size().
        """
        try:
            root = self._reader.stat(path, follow_symlinks=True)
        except OSError as exc:
            raise ProbeError.from_os_error(exc, path) from exc

        if root.kind != EntryKind.DIRECTORY:
            logger.debug("Root %s is not a directory, size %d", path, root.size)
            return FolderSizeReport(
                path=path, size_bytes=root.size, file_count=1, directory_count=0
            )

        total = 0
        file_count = 0
        directory_count = 0
        skipped: list[str] = []
        visited_dirs: set[tuple[int, int]] = set()
        seen_files: set[tuple[int, int]] = set()
        self._mark_visited(root, visited_dirs)

        stack: list[tuple[str, bool]] = [(path, True)]
        while stack:
            current, is_root = stack.pop()
            children = self._list_dir(current, is_root=is_root, skipped=skipped)
            if children is None:
                continue
            directory_count += 1

            for child in children:
                entry = self._stat(child, skipped)
                if entry is None:
                    continue

                if entry.kind == EntryKind.DIRECTORY:
                    if not self._mark_visited(entry, visited_dirs):
                        logger.debug("Skipping already visited directory: %s", child)
                        continue
                    stack.append((child, False))
                    continue

                # Hard links share one inode; count the data once
                if entry.links > 1 and entry.inode:
                    if entry.identity in seen_files:
                        continue
                    seen_files.add(entry.identity)

                total += entry.size
                file_count += 1

        logger.debug(
            "Measured %s: %d bytes in %d files, %d directories",
            path,
            total,
            file_count,
            directory_count,
        )
        return FolderSizeReport(
            path=path,
            size_bytes=total,
            file_count=file_count,
            directory_count=directory_count,
            skipped=tuple(skipped),
        )

    @staticmethod
    def _mark_visited(entry: EntryStat, visited: set[tuple[int, int]]) -> bool:
        """Record a directory identity. Returns False if already seen.

        Entries without an inode number (some non-POSIX filesystems) carry
        no identity and are always treated as new.
        """
        if not entry.inode:
            return True
        if entry.identity in visited:
            return False
        visited.add(entry.identity)
        return True

    def _list_dir(self, path: str, *, is_root: bool, skipped: list[str]) -> list[str] | None:
        try:
            return self._reader.list_dir(path)
        except OSError as exc:
            if is_root:
                raise ProbeError.from_os_error(exc, path) from exc
            return self._tolerate(exc, path, skipped)

    def _stat(self, path: str, skipped: list[str]) -> EntryStat | None:
        try:
            return self._reader.stat(path)
        except OSError as exc:
            return self._tolerate(exc, path, skipped)

    def _tolerate(self, exc: OSError, path: str, skipped: list[str]) -> None:
        """Skip ``path`` if the policy allows it, otherwise raise."""
        error = ProbeError.from_os_error(exc, path)
        if self._policy == FailurePolicy.BEST_EFFORT and error.kind == ErrorKind.PERMISSION_DENIED:
            logger.warning("Permission denied, skipping: %s", path)
            skipped.append(path)
            return None
        raise error from exc


def folder_size(
    path: str,
    *,
    skip_permission_denied: bool = False,
    reader: FileSystemReader | None = None,
) -> int:
    """Return the aggregate byte size of the subtree rooted at ``path``.

    Args:
        path: File or directory to measure.
        skip_permission_denied: Use best-effort traversal, counting
            permission-denied entries as zero bytes.
        reader: Filesystem access. Defaults to the local filesystem.

    Returns:
        Total size in bytes.

    Raises:
        ProbeError: NotFound if ``path`` does not exist, or the first
            traversal error not tolerated by the chosen mode.
    """
    policy = FailurePolicy.BEST_EFFORT if skip_permission_denied else FailurePolicy.FAIL_FAST
    return DirectorySizeAggregator(reader, policy=policy).folder_size(path)
