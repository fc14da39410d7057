import logging
from typing import List, NamedTuple, Optional

from zpool_exporter.zpool.models import ErrorStatistics, Health, TopologyDisk, TopologyPool, TopologyVdev

logger = logging.getLogger(__name__)

# Sections of the config block that are not data vdevs
AUX_SECTIONS = ("logs", "cache", "spares", "special", "dedup")


class ConfigLine(NamedTuple):
    indent: int
    name: str
    state: str
    errors: ErrorStatistics


def _count(value: str) -> int:
    return int(value) if value.isdigit() else 0


def _parse_config_line(line: str) -> ConfigLine:
    # Config lines start with a tab followed by two spaces per nesting level
    body = line[1:] if line.startswith("\t") else line
    indent = (len(body) - len(body.lstrip(" "))) // 2
    parts = body.split()
    state = parts[1] if len(parts) > 1 else ""
    errors = ErrorStatistics()
    if len(parts) >= 5:
        errors = ErrorStatistics(read=_count(parts[2]), write=_count(parts[3]), checksum=_count(parts[4]))
    return ConfigLine(indent=indent, name=parts[0], state=state, errors=errors)


def _leaf(line: ConfigLine) -> TopologyDisk:
    return TopologyDisk(path=line.name, health=Health.parse(line.state), error_stats=line.errors)


def _build_pool(name: str, config_lines: List[ConfigLine]) -> TopologyPool:
    health: Optional[Health] = None
    errors = ErrorStatistics()
    vdevs: List[TopologyVdev] = []
    spares: List[TopologyDisk] = []
    section = None
    vdev: Optional[ConfigLine] = None
    vdev_disks: List[TopologyDisk] = []

    def close_vdev():
        if vdev is None:
            return
        # A disk striped directly into the pool is its own single-disk vdev
        disks = vdev_disks if vdev_disks else [_leaf(vdev)]
        vdevs.append(TopologyVdev(
            name=vdev.name,
            health=Health.parse(vdev.state),
            error_stats=vdev.errors,
            disks=disks,
        ))

    for index, line in enumerate(config_lines):
        has_children = index + 1 < len(config_lines) and config_lines[index + 1].indent > line.indent

        if line.indent == 0:
            if section == "data":
                close_vdev()
                vdev = None
            if line.name == name:
                section = "data"
                health = Health.parse(line.state)
                errors = line.errors
            else:
                section = line.name if line.name in AUX_SECTIONS else None
            continue

        if section == "spares":
            spares.append(_leaf(line))
        elif section == "data":
            if line.indent == 1:
                close_vdev()
                vdev, vdev_disks = line, []
            elif not has_children:
                # replacing-N / spare-N groups nest below a vdev, only leaves count
                vdev_disks.append(_leaf(line))

    if section == "data":
        close_vdev()

    return TopologyPool(name=name, health=health, error_stats=errors, vdevs=vdevs, spares=spares)


def parse_zpool_status(output: str) -> List[TopologyPool]:
    """
    Parses `zpool status -P -p` into topology snapshots, one per pool.

    Format of the config block:
        NAME            STATE     READ WRITE CKSUM
        tank            ONLINE       0     0     0
          mirror-0      ONLINE       0     0     0
            /dev/sda1   ONLINE       0     0     0
        spares
          /dev/sdc1     AVAIL
    """
    pools = []
    current_pool = None
    in_config = False
    config_lines: List[ConfigLine] = []

    for line in output.split("\n"):
        line = line.rstrip()
        stripped = line.strip()

        if stripped.startswith("pool:"):
            if current_pool is not None:
                pools.append(_build_pool(current_pool, config_lines))
            current_pool = stripped.split(":", 1)[1].strip()
            in_config = False
            config_lines = []
            continue

        if stripped.startswith("config:"):
            in_config = True
            continue

        if stripped.startswith("errors:"):
            in_config = False
            continue

        if not in_config or not current_pool or not stripped or stripped.startswith("NAME"):
            continue

        config_lines.append(_parse_config_line(line))

    if current_pool is not None:
        pools.append(_build_pool(current_pool, config_lines))

    logger.debug(f"Parsed topology of {len(pools)} pool(s) from zpool status")
    return pools
