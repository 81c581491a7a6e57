"""Directory size aggregation.

This module provides the filesystem reader interface, entry models and
the recursive size aggregator.
"""

from hostprobe.filesystem.aggregator import DirectorySizeAggregator, folder_size
from hostprobe.filesystem.models import EntryKind, EntryStat, FailurePolicy, FolderSizeReport
from hostprobe.filesystem.reader import FileSystemReader, LocalFileSystemReader

__all__ = [
    "DirectorySizeAggregator",
    "EntryKind",
    "EntryStat",
    "FailurePolicy",
    "FileSystemReader",
    "FolderSizeReport",
    "LocalFileSystemReader",
    "folder_size",
]
