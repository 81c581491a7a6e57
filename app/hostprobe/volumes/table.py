"""Mounted volume table lookups.

Enumerates mounted volumes and reports (total, available) bytes for the
one whose mount point matches a given path exactly.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass

import psutil

from hostprobe.core.errors import FilesystemIOError, NotFoundError, ProbeError
from hostprobe.volumes.models import VolumeUsage

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MountedPartition:
    """A row of the OS mount table.

    Attributes:
        mount_point: Path the volume is mounted at.
        device: Backing device name.
        fstype: Filesystem type.
    """

    mount_point: str
    device: str
    fstype: str


class VolumeEnumerator(ABC):
    """Abstract source of mounted volumes.

    Example:
        >>> enumerator = PsutilVolumeEnumerator()
        >>> for volume in enumerator.volumes():
        ...     print(volume.mount_point, volume.available)
    """

    @abstractmethod
    def partitions(self) -> Iterator[MountedPartition]:
        """Yield every mounted partition.

        Raises:
            OSError: If the mount table cannot be read.
        """

    @abstractmethod
    def usage(self, partition: MountedPartition) -> VolumeUsage:
        """Return capacity for a mounted partition.

        Raises:
            OSError: If the volume cannot be queried.
        """

    def volumes(self) -> Iterator[VolumeUsage]:
        """Yield usage for every partition that can be queried.

        Partitions whose usage cannot be read are logged and skipped.

        Yields:
            VolumeUsage instances in mount table order.
        """
        for partition in self.partitions():
            try:
                yield self.usage(partition)
            except OSError as exc:
                logger.warning("Cannot query volume %s: %s", partition.mount_point, exc)


class PsutilVolumeEnumerator(VolumeEnumerator):
    """VolumeEnumerator backed by psutil.

    Args:
        include_virtual: Also list pseudo filesystems (tmpfs, proc, ...).
    """

    def __init__(self, *, include_virtual: bool = False) -> None:
        self._include_virtual = include_virtual

    def partitions(self) -> Iterator[MountedPartition]:
        for part in psutil.disk_partitions(all=self._include_virtual):
            if not part.mountpoint:
                continue
            yield MountedPartition(
                mount_point=part.mountpoint,
                device=part.device,
                fstype=part.fstype,
            )

    def usage(self, partition: MountedPartition) -> VolumeUsage:
        usage = psutil.disk_usage(partition.mount_point)
        return VolumeUsage(
            mount_point=partition.mount_point,
            device=partition.device,
            fstype=partition.fstype,
            total=int(usage.total),
            available=int(usage.free),
        )


def _mount_table_error(exc: OSError) -> ProbeError:
    reason = exc.strerror or str(exc)
    return FilesystemIOError(f"Failed to read mount table: {reason}")


def drive_size(mount_path: str, enumerator: VolumeEnumerator | None = None) -> tuple[int, int]:
    """Return (total, available) bytes for the volume mounted at ``mount_path``.

    The mount point must match exactly: no normalization, no prefix match.

    Args:
        mount_path: Mount point to look up (e.g. "/" or "C:\\").
        enumerator: Volume source. Defaults to psutil over every mount,
            pseudo filesystems (tmpfs, overlay, ...) included.

    Returns:
        Tuple of (total_bytes, available_bytes).

    Raises:
        NotFoundError: If no mounted volume has this mount point.
        ProbeError: If the mount table or the volume cannot be queried.
    """
    source = enumerator or PsutilVolumeEnumerator(include_virtual=True)
    try:
        partition = next((p for p in source.partitions() if p.mount_point == mount_path), None)
    except OSError as exc:
        raise _mount_table_error(exc) from exc

    if partition is None:
        raise NotFoundError(f"{mount_path} not found among mounted volumes", path=mount_path)

    try:
        volume = source.usage(partition)
    except OSError as exc:
        raise ProbeError.from_os_error(exc, mount_path) from exc

    logger.debug("Volume %s: total=%d available=%d", mount_path, volume.total, volume.available)
    return volume.total, volume.available


def list_volumes(enumerator: VolumeEnumerator | None = None) -> list[VolumeUsage]:
    """Return usage for every mounted volume, sorted by mount point.

    Args:
        enumerator: Volume source. Defaults to psutil.

    Returns:
        List of VolumeUsage.

    Raises:
        ProbeError: If the mount table cannot be read.
    """
    source = enumerator or PsutilVolumeEnumerator()
    try:
        volumes = list(source.volumes())
    except OSError as exc:
        raise _mount_table_error(exc) from exc
    volumes.sort(key=lambda v: v.mount_point.lower())
    return volumes
