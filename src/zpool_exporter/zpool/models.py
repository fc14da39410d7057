from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class Health(str, Enum):
    ONLINE = "online"
    DEGRADED = "degraded"
    FAULTED = "faulted"
    OFFLINE = "offline"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    REMOVED = "removed"

    @classmethod
    def parse(cls, value: str) -> Optional["Health"]:
        """Map a zpool state string (ONLINE, UNAVAIL, INUSE, ...) to a Health."""
        state = value.strip().lower()
        if state == "avail":
            state = "available"
        elif state == "unavail":
            state = "unavailable"
        try:
            return cls(state)
        except ValueError:
            return None


class EntityKind(str, Enum):
    POOL = "pool"
    VDEV = "vdev"
    DISK = "disk"


class ErrorStatistics(BaseModel):
    model_config = ConfigDict(frozen=True)

    read: int = 0
    write: int = 0
    checksum: int = 0


class IoStatRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    capacity: Optional[int] = None  # allocated bytes, pool/vdev rows only
    available: Optional[int] = None  # free bytes, pool/vdev rows only
    read_ops: int = 0
    write_ops: int = 0
    read_bandwidth: int = 0
    write_bandwidth: int = 0

    @property
    def is_pool_or_vdev(self) -> bool:
        return self.capacity is not None and self.available is not None


class Entity(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: EntityKind
    name: str
    pool_name: str
    io_stats: Optional[IoStatRecord] = None  # absent for a pool missing from iostat
    parent_vdev_name: Optional[str] = None
    disk_count: Optional[int] = None
    health: Optional[Health] = None
    error_stats: Optional[ErrorStatistics] = None

    # Pool only, filled from the topology snapshot
    vdev_count: Optional[int] = None
    spare_count: Optional[int] = None
    raw_size: Optional[int] = None


class TopologyDisk(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    health: Optional[Health] = None
    error_stats: ErrorStatistics = ErrorStatistics()


class TopologyVdev(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    health: Optional[Health] = None
    error_stats: ErrorStatistics = ErrorStatistics()
    disks: List[TopologyDisk] = []


class TopologyPool(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    health: Optional[Health] = None
    error_stats: ErrorStatistics = ErrorStatistics()
    vdevs: List[TopologyVdev] = []
    spares: List[TopologyDisk] = []

    @property
    def disk_count(self) -> int:
        return sum(len(vdev.disks) for vdev in self.vdevs)
