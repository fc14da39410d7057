import logging
from typing import Dict, List, Optional, Tuple

from zpool_exporter.zpool.models import Entity, EntityKind, TopologyDisk, TopologyPool, TopologyVdev

logger = logging.getLogger(__name__)


def flatten_disks(pool: TopologyPool) -> List[Tuple[TopologyVdev, TopologyDisk]]:
    """All (vdev, disk) pairs of a pool in topology order."""
    return [(vdev, disk) for vdev in pool.vdevs for disk in vdev.disks]


def find_disk(name: str, disks: List[Tuple[TopologyVdev, TopologyDisk]]) -> Optional[Tuple[TopologyVdev, TopologyDisk]]:
    """
    Best-effort lookup of a disk by the name `zpool iostat` printed for it.

    `zpool iostat` prints a short device name (sda, ata-XXXX-part1, ...)
    while the topology knows the full path, so a disk matches when its path
    contains the name. The first match in topology order wins, which means a
    name that is a substring of several paths (sda and sdaa) is ambiguous.
    """
    for vdev, disk in disks:
        if name in disk.path:
            return vdev, disk
    return None


def correlate(entities: List[Entity], pool: TopologyPool) -> List[Entity]:
    """
    Enriches reconstructed entities with the health and error counters of
    the topology snapshot.

    Disks are matched by path (see find_disk). A vdev takes its state from
    the topology vdev that owned the last matched disk in its span of rows,
    so vdevs are correlated by position rather than by name.

    The pool always comes out of here: when iostat printed no row for it,
    it is built from the topology alone, without I/O stats.
    """
    disks = flatten_disks(pool)

    if not any(e.kind == EntityKind.POOL for e in entities):
        logger.warning(f"No iostat row for pool {pool.name}, exporting its topology only")
        pool_entity = Entity(
            kind=EntityKind.POOL,
            name=pool.name,
            pool_name=pool.name,
            disk_count=sum(1 for e in entities if e.kind == EntityKind.DISK),
        )
        entities = [pool_entity, *entities]

    # Index of the open vdev entity -> topology vdev of its last matched disk
    vdev_matches: Dict[int, TopologyVdev] = {}
    current_vdev: Optional[int] = None
    enriched: List[Entity] = []

    for entity in entities:
        if entity.kind == EntityKind.POOL:
            enriched.append(entity.model_copy(update={
                "health": pool.health,
                "error_stats": pool.error_stats,
                "vdev_count": len(pool.vdevs),
                "spare_count": len(pool.spares),
            }))
        elif entity.kind == EntityKind.VDEV:
            current_vdev = len(enriched)
            enriched.append(entity)
        else:
            match = find_disk(entity.name, disks)
            if match is None:
                logger.warning(f"Disk {entity.name} of pool {pool.name} not found in the pool topology")
                enriched.append(entity)
                continue

            topology_vdev, topology_disk = match
            if current_vdev is not None:
                vdev_matches[current_vdev] = topology_vdev
            enriched.append(entity.model_copy(update={
                "health": topology_disk.health,
                "error_stats": topology_disk.error_stats,
            }))

    for index, entity in enumerate(enriched):
        if entity.kind != EntityKind.VDEV:
            continue
        topology_vdev = vdev_matches.get(index)
        if topology_vdev is None:
            logger.warning(f"Vdev {entity.name} of pool {pool.name} has no matched disk to correlate with")
            continue
        enriched[index] = entity.model_copy(update={
            "health": topology_vdev.health,
            "error_stats": topology_vdev.error_stats,
        })

    return enriched
