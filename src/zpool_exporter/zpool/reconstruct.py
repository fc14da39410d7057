import logging
from typing import Iterable, List, NamedTuple, Optional, Tuple

from zpool_exporter.zpool.models import Entity, EntityKind, IoStatRecord

logger = logging.getLogger(__name__)


class _OpenVdev(NamedTuple):
    record: IoStatRecord
    disks: Tuple[Entity, ...] = ()


def _close_vdev(open_vdev: _OpenVdev, pool_name: str) -> List[Entity]:
    vdev = Entity(
        kind=EntityKind.VDEV,
        name=open_vdev.record.name,
        pool_name=pool_name,
        io_stats=open_vdev.record,
        disk_count=len(open_vdev.disks),
    )
    return [vdev, *open_vdev.disks]


def reconstruct(records: Iterable[IoStatRecord], pool_name: str) -> List[Entity]:
    """
    Rebuilds the pool -> vdev -> disk tree of a single pool from the ordered
    rows of `zpool iostat -v`.

    The output carries no parent references, so parentage comes from order:
    a vdev row (one with capacity) is followed by its member disks, and a
    disk row always belongs to the closest vdev row above it. Each vdev is
    built once its span of disk rows is complete and is returned ahead of
    its disks.
    """
    entities: List[Entity] = []
    pool: Optional[Entity] = None
    pool_index = 0
    open_vdev: Optional[_OpenVdev] = None
    total_disks = 0

    for record in records:
        if record.name == pool_name:
            pool_index = len(entities)
            pool = Entity(kind=EntityKind.POOL, name=record.name, pool_name=pool_name, io_stats=record)
        elif record.is_pool_or_vdev:
            if open_vdev is not None:
                entities.extend(_close_vdev(open_vdev, pool_name))
            open_vdev = _OpenVdev(record)
        else:
            parent = open_vdev.record.name if open_vdev is not None else None
            disk = Entity(
                kind=EntityKind.DISK,
                name=record.name,
                pool_name=pool_name,
                io_stats=record,
                parent_vdev_name=parent,
            )
            total_disks += 1
            if open_vdev is None:
                logger.warning(f"Disk {record.name} of pool {pool_name} appears before any vdev")
                entities.append(disk)
            else:
                open_vdev = open_vdev._replace(disks=open_vdev.disks + (disk,))

    if open_vdev is not None:
        entities.extend(_close_vdev(open_vdev, pool_name))

    if pool is not None:
        # The pool's disk count is only known once the whole stream is read
        entities.insert(pool_index, pool.model_copy(update={"disk_count": total_disks}))

    return entities
