from typing import Dict, List, NamedTuple

from zpool_exporter.zpool.models import Entity, EntityKind, Health

HEALTH_METRIC = "health"

DESCRIPTIONS = {
    "capacity": "The capacity of the device in bytes",
    "available": "The available bytes in the device",
    "read_operations": "The read operations for this device per second",
    "write_operations": "The write operations for this device per second",
    "read_bandwidth": "The read bandwidth for this device in bytes per second",
    "write_bandwidth": "The write bandwidth for this device in bytes per second",
    "read_errors": "The amount of I/O errors that occurred during reading",
    "write_errors": "The amount of I/O errors that occurred during writing",
    "checksum_errors": "The amount of checksum errors, meaning the device returned corrupted data from a read request",
    "disk_count": "Total count of drives in this pool or vdev",
    "vdev_count": "Count of vdevs in this pool",
    "spare_count": "The amount of spare drives",
    "raw_size": "The raw size of this device (this is not the usable space)",
    HEALTH_METRIC: "The health of the device. This is an enum.",
}


class MetricGroup(NamedTuple):
    """Metrics sharing one constant label set."""
    labels: Dict[str, str]
    values: Dict[str, int]


def entity_labels(entity: Entity) -> Dict[str, str]:
    labels = {
        "device_type": entity.kind.value,
        "device_name": entity.name,
        "pool": entity.pool_name,
    }
    if entity.kind == EntityKind.DISK and entity.parent_vdev_name is not None:
        labels["vdev"] = entity.parent_vdev_name
    return labels


def health_groups(labels: Dict[str, str], health: Health) -> List[MetricGroup]:
    """
    One-hot encodes a health state into seven `health` series, one per
    state label, exactly one of which is 1.
    """
    return [
        MetricGroup(
            labels={**labels, "field_type": "enum", "state": state.value},
            values={HEALTH_METRIC: 1 if state == health else 0},
        )
        for state in Health
    ]


def build_groups(entity: Entity) -> List[MetricGroup]:
    labels = entity_labels(entity)
    io = entity.io_stats
    values: Dict[str, int] = {}

    if io is not None:
        if io.capacity is not None and io.available is not None:
            values["capacity"] = io.capacity
            values["available"] = io.available

        values["read_operations"] = io.read_ops
        values["write_operations"] = io.write_ops
        values["read_bandwidth"] = io.read_bandwidth
        values["write_bandwidth"] = io.write_bandwidth

    if entity.error_stats is not None:
        values["read_errors"] = entity.error_stats.read
        values["write_errors"] = entity.error_stats.write
        values["checksum_errors"] = entity.error_stats.checksum

    if entity.kind != EntityKind.DISK and entity.disk_count is not None:
        values["disk_count"] = entity.disk_count

    if entity.kind == EntityKind.POOL:
        for name in ("vdev_count", "spare_count", "raw_size"):
            value = getattr(entity, name)
            if value is not None:
                values[name] = value

    groups = [MetricGroup(labels=labels, values=values)]
    if entity.health is not None:
        groups.extend(health_groups(labels, entity.health))
    return groups


def build_metric_groups(entities: List[Entity]) -> List[MetricGroup]:
    return [group for entity in entities for group in build_groups(entity)]
