import logging
from enum import Enum
from typing import List, Optional

from zpool_exporter.metrics.builder import MetricGroup, build_metric_groups
from zpool_exporter.zpool.correlate import correlate
from zpool_exporter.zpool.errors import CommandTimeout, ExternalToolFailure, NumericParseFailure, ScrapeFailed, TopologyUnavailable
from zpool_exporter.zpool.iostat import parse_iostat_output
from zpool_exporter.zpool.models import EntityKind, TopologyPool
from zpool_exporter.zpool.reconstruct import reconstruct
from zpool_exporter.zpool.runner import zpool
from zpool_exporter.zpool.topology import TopologyProvider, get_topology_provider

logger = logging.getLogger(__name__)


class ScrapeState(str, Enum):
    IDLE = "idle"
    FETCHING_TOPOLOGY = "fetching_topology"
    FETCHING_IOSTAT = "fetching_iostat"
    RECONSTRUCTING = "reconstructing"
    CORRELATING = "correlating"
    BUILDING = "building"
    EMITTED = "emitted"
    FAILED = "failed"


def fetch_iostat(pool_name: str) -> str:
    # -y skips the since-boot summary, so the single 1 second sample is current
    return zpool("iostat", "-Hpvy", pool_name, "1", "1")


def fetch_raw_size(pool_name: str) -> Optional[int]:
    output = zpool("list", "-Hp", "-o", "size", pool_name).strip()
    if not output.isdigit():
        logger.warning(f"Unexpected raw size for pool {pool_name}: {output!r}")
        return None
    return int(output)


class Exporter:
    """Runs one scrape: topology -> iostat -> reconstruct -> correlate -> metric groups."""

    def __init__(self, topology: Optional[TopologyProvider] = None, pools: Optional[List[str]] = None):
        self.topology = topology
        self.pools = pools or []
        self.state = ScrapeState.IDLE
        self.failure_reason: Optional[str] = None

    def _transition(self, state: ScrapeState):
        logger.debug(f"Scrape state {self.state.value} -> {state.value}")
        self.state = state

    def _fail(self, reason: str, cause: Exception) -> ScrapeFailed:
        self.failure_reason = reason
        self._transition(ScrapeState.FAILED)
        return ScrapeFailed(reason, cause)

    def _collect_pool(self, pool: TopologyPool) -> List[MetricGroup]:
        self._transition(ScrapeState.FETCHING_IOSTAT)
        iostat_output = fetch_iostat(pool.name)
        raw_size = fetch_raw_size(pool.name)

        self._transition(ScrapeState.RECONSTRUCTING)
        entities = reconstruct(parse_iostat_output(iostat_output), pool.name)

        self._transition(ScrapeState.CORRELATING)
        entities = correlate(entities, pool)
        if raw_size is not None:
            entities = [
                e.model_copy(update={"raw_size": raw_size}) if e.kind == EntityKind.POOL else e
                for e in entities
            ]

        self._transition(ScrapeState.BUILDING)
        logger.debug(
            f"Pool {pool.name}: {len(entities)} entities, topology reports "
            f"{len(pool.vdevs)} vdevs and {pool.disk_count} disks"
        )
        return build_metric_groups(entities)

    def scrape(self) -> List[MetricGroup]:
        """
        Collects the metric groups of every pool. A pool whose iostat output
        holds a non-numeric value is skipped as a whole; command failures
        abort the scrape with ScrapeFailed and nothing is returned.
        """
        self.failure_reason = None
        groups: List[MetricGroup] = []
        try:
            self._transition(ScrapeState.FETCHING_TOPOLOGY)
            provider = self.topology or get_topology_provider()
            pools = provider.list_pools(self.pools or None)
            missing = set(self.pools) - {p.name for p in pools}
            if missing:
                logger.warning(f"Pools not found, skipping: {', '.join(sorted(missing))}")

            for pool in pools:
                if self.pools and pool.name not in self.pools:
                    continue
                try:
                    pool_groups = self._collect_pool(pool)
                except NumericParseFailure as e:
                    logger.error(f"Skipping pool {pool.name}: {e}")
                    continue
                groups.extend(pool_groups)
        except CommandTimeout as e:
            raise self._fail("timeout", e)
        except TopologyUnavailable as e:
            raise self._fail("topology_unavailable", e)
        except ExternalToolFailure as e:
            raise self._fail("external_tool_failure", e)

        self._transition(ScrapeState.EMITTED)
        self._transition(ScrapeState.IDLE)
        return groups
