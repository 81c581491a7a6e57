"""Mounted volume capacity lookups."""

from hostprobe.volumes.models import VolumeUsage
from hostprobe.volumes.table import (
    MountedPartition,
    PsutilVolumeEnumerator,
    VolumeEnumerator,
    drive_size,
    list_volumes,
)

__all__ = [
    "MountedPartition",
    "PsutilVolumeEnumerator",
    "VolumeEnumerator",
    "VolumeUsage",
    "drive_size",
    "list_volumes",
]
