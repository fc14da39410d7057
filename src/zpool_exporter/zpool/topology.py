import logging
from typing import List, Optional

from zpool_exporter.config.settings import config
from zpool_exporter.zpool.errors import TopologyUnavailable
from zpool_exporter.zpool.models import ErrorStatistics, Health, TopologyDisk, TopologyPool, TopologyVdev
from zpool_exporter.zpool.runner import zpool
from zpool_exporter.zpool.status import parse_zpool_status

logger = logging.getLogger(__name__)


class TopologyProvider:
    def list_pools(self, names: Optional[List[str]] = None) -> List[TopologyPool]:
        raise NotImplementedError


class ZpoolStatusTopology(TopologyProvider):
    """Reads the topology from `zpool status -P -p`."""

    def list_pools(self, names: Optional[List[str]] = None) -> List[TopologyPool]:
        # Naming a pool that cannot be opened makes zpool exit 1 for all of them
        pools = parse_zpool_status(zpool("status", "-P", "-p"))
        return [p for p in pools if not names or p.name in names]


class LibzfsTopology(TopologyProvider):
    """Reads the topology through the py-libzfs bindings."""

    def __init__(self):
        try:
            import libzfs
            self.zfs = libzfs.ZFS()
        except Exception as e:
            raise TopologyUnavailable(f"libzfs is not usable: {e}")

    @staticmethod
    def _errors(vdev) -> ErrorStatistics:
        stats = vdev.stats
        return ErrorStatistics(
            read=stats.read_errors,
            write=stats.write_errors,
            checksum=stats.checksum_errors,
        )

    def _disk(self, vdev) -> TopologyDisk:
        return TopologyDisk(path=vdev.path or "", health=Health.parse(vdev.status), error_stats=self._errors(vdev))

    def _leaves(self, vdev) -> List[TopologyDisk]:
        if not vdev.children:
            return [self._disk(vdev)]
        return [disk for child in vdev.children for disk in self._leaves(child)]

    def _pool(self, pool) -> TopologyPool:
        vdevs = []
        for index, vdev in enumerate(pool.groups.get("data", [])):
            name = vdev.path if vdev.type == "disk" else f"{vdev.type}-{index}"
            vdevs.append(TopologyVdev(
                name=name,
                health=Health.parse(vdev.status),
                error_stats=self._errors(vdev),
                disks=self._leaves(vdev),
            ))
        return TopologyPool(
            name=pool.name,
            health=Health.parse(pool.status),
            error_stats=self._errors(pool.root_vdev),
            vdevs=vdevs,
            spares=[self._disk(spare) for spare in pool.groups.get("spare", [])],
        )

    def list_pools(self, names: Optional[List[str]] = None) -> List[TopologyPool]:
        try:
            return [self._pool(p) for p in self.zfs.pools if not names or p.name in names]
        except Exception as e:
            logger.error(f"Failed to read pools through libzfs: {e}")
            raise TopologyUnavailable(f"Failed to read pools through libzfs: {e}")


def get_topology_provider() -> TopologyProvider:
    backend = config.topology_backend
    if backend == "libzfs":
        return LibzfsTopology()
    if backend != "status":
        logger.warning(f"Unknown topology backend '{backend}', falling back to zpool status")
    return ZpoolStatusTopology()
