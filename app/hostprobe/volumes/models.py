"""Volume table domain models."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class VolumeUsage:
    """Capacity of a mounted volume.

    Attributes:
        mount_point: Path the volume is mounted at.
        device: Backing device name (e.g. "/dev/nvme0n1p2").
        fstype: Filesystem type (e.g. "ext4").
        total: Total capacity in bytes.
        available: Bytes available to unprivileged users.
    """

    mount_point: str
    device: str
    fstype: str
    total: int
    available: int

    def __post_init__(self) -> None:
        """Validate volume usage after initialization."""
        if not self.mount_point:
            msg = "Mount point cannot be empty"
            raise ValueError(msg)
        if self.total < 0 or self.available < 0:
            msg = f"Capacity cannot be negative: total={self.total}, available={self.available}"
            raise ValueError(msg)

    @property
    def used(self) -> int:
        """Bytes not available (includes space reserved for root)."""
        return max(self.total - self.available, 0)
