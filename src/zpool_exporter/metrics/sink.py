from typing import Dict, Iterable, List

from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.core import GaugeMetricFamily

from zpool_exporter.metrics.builder import DESCRIPTIONS, MetricGroup

NAMESPACE = "zfs"


class MetricGroupCollector:
    """Exposes prebuilt metric groups, merging groups that share a metric name into one family."""

    def __init__(self, groups: List[MetricGroup]):
        self.groups = groups

    def collect(self) -> Iterable[GaugeMetricFamily]:
        families: Dict[str, GaugeMetricFamily] = {}
        for group in self.groups:
            for name, value in group.values.items():
                family = families.get(name)
                if family is None:
                    family = GaugeMetricFamily(f"{NAMESPACE}_{name}", DESCRIPTIONS.get(name, name))
                    families[name] = family
                # Exposition values are floats, exact only up to 2**53
                family.add_sample(family.name, group.labels, value)
        return list(families.values())


def render(groups: List[MetricGroup]) -> bytes:
    """Renders the groups of one scrape in the Prometheus text format."""
    registry = CollectorRegistry()
    registry.register(MetricGroupCollector(groups))
    return generate_latest(registry)
