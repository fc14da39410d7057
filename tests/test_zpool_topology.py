import sys
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from zpool_exporter.zpool import topology
from zpool_exporter.zpool.errors import TopologyUnavailable
from zpool_exporter.zpool.models import Health
from zpool_exporter.zpool.topology import LibzfsTopology, ZpoolStatusTopology, get_topology_provider

STATUS_OUTPUT = """  pool: tank
 state: ONLINE
config:

\tNAME            STATE     READ WRITE CKSUM
\ttank            ONLINE       0     0     0
\t  mirror-0      ONLINE       0     0     0
\t    /dev/sda1   ONLINE       0     0     0
\t    /dev/sdb1   ONLINE       0     0     0

errors: No known data errors
"""


def stats(read=0, write=0, checksum=0):
    return SimpleNamespace(read_errors=read, write_errors=write, checksum_errors=checksum)


def leaf(path, status="ONLINE", **errors):
    return SimpleNamespace(type="disk", path=path, status=status, stats=stats(**errors), children=[])


def fake_libzfs(pools):
    return SimpleNamespace(ZFS=lambda: SimpleNamespace(pools=pools))


@patch("zpool_exporter.zpool.topology.zpool")
def test_status_topology_runs_zpool_status(mock_zpool):
    mock_zpool.return_value = STATUS_OUTPUT

    pools = ZpoolStatusTopology().list_pools(["tank"])

    mock_zpool.assert_called_once_with("status", "-P", "-p")
    assert pools[0].name == "tank"
    assert len(pools[0].vdevs[0].disks) == 2


@patch("zpool_exporter.zpool.topology.zpool")
def test_status_topology_filters_names_without_passing_them(mock_zpool):
    mock_zpool.return_value = STATUS_OUTPUT

    pools = ZpoolStatusTopology().list_pools(["tank", "gone"])

    mock_zpool.assert_called_once_with("status", "-P", "-p")
    assert [p.name for p in pools] == ["tank"]
    assert ZpoolStatusTopology().list_pools(["gone"]) == []


def test_libzfs_topology(monkeypatch):
    mirror = SimpleNamespace(
        type="mirror",
        path=None,
        status="DEGRADED",
        stats=stats(checksum=2),
        children=[leaf("/dev/sda1"), leaf("/dev/sdb1", status="FAULTED", read=5)],
    )
    pool = SimpleNamespace(
        name="tank",
        status="DEGRADED",
        root_vdev=SimpleNamespace(stats=stats(read=5)),
        groups={"data": [mirror, leaf("/dev/sdc1")], "spare": [leaf("/dev/sdd1", status="AVAIL")]},
    )
    monkeypatch.setitem(sys.modules, "libzfs", fake_libzfs([pool]))

    pools = LibzfsTopology().list_pools()

    tank = pools[0]
    assert tank.health == Health.DEGRADED
    assert tank.error_stats.read == 5
    assert [v.name for v in tank.vdevs] == ["mirror-0", "/dev/sdc1"]
    assert tank.vdevs[0].disks[1].health == Health.FAULTED
    assert tank.vdevs[0].disks[1].error_stats.read == 5
    assert [d.path for d in tank.vdevs[1].disks] == ["/dev/sdc1"]
    assert tank.spares[0].health == Health.AVAILABLE


def test_libzfs_topology_filters_names(monkeypatch):
    pools = [
        SimpleNamespace(name=name, status="ONLINE", root_vdev=SimpleNamespace(stats=stats()), groups={})
        for name in ("tank", "scratch")
    ]
    monkeypatch.setitem(sys.modules, "libzfs", fake_libzfs(pools))

    assert [p.name for p in LibzfsTopology().list_pools(["scratch"])] == ["scratch"]


def test_libzfs_missing(monkeypatch):
    monkeypatch.setitem(sys.modules, "libzfs", None)

    with pytest.raises(TopologyUnavailable):
        LibzfsTopology()


def test_get_topology_provider(monkeypatch):
    monkeypatch.setattr(topology.config, "topology_backend", "status")
    assert isinstance(get_topology_provider(), ZpoolStatusTopology)

    monkeypatch.setattr(topology.config, "topology_backend", "unknown")
    assert isinstance(get_topology_provider(), ZpoolStatusTopology)

    monkeypatch.setitem(sys.modules, "libzfs", fake_libzfs([]))
    monkeypatch.setattr(topology.config, "topology_backend", "libzfs")
    assert isinstance(get_topology_provider(), LibzfsTopology)
