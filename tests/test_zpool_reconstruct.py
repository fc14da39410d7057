from zpool_exporter.zpool.iostat import parse_iostat_output
from zpool_exporter.zpool.models import EntityKind
from zpool_exporter.zpool.reconstruct import reconstruct

MIRROR_OUTPUT = (
    "tank\t1000\t4000\t10\t5\t1000\t500\n"
    "mirror-0\t1000\t4000\t10\t5\t1000\t500\n"
    "sda\t0\t0\t5\t2\t500\t200\n"
    "sdb\t0\t0\t5\t3\t500\t300\n"
)

TWO_VDEV_OUTPUT = (
    "tank\t3000\t9000\t20\t10\t2000\t1000\n"
    "mirror-0\t1000\t4000\t10\t5\t1000\t500\n"
    "sda\t0\t0\t5\t2\t500\t200\n"
    "sdb\t0\t0\t5\t3\t500\t300\n"
    "mirror-1\t2000\t5000\t10\t5\t1000\t500\n"
    "sdc\t0\t0\t4\t2\t400\t200\n"
    "sdd\t0\t0\t6\t3\t600\t300\n"
    "sde\t0\t0\t0\t0\t0\t0\n"
)


def by_name(entities):
    return {e.name: e for e in entities}


def test_reconstruct_mirror_pool():
    entities = reconstruct(parse_iostat_output(MIRROR_OUTPUT), "tank")

    assert [(e.kind, e.name) for e in entities] == [
        (EntityKind.POOL, "tank"),
        (EntityKind.VDEV, "mirror-0"),
        (EntityKind.DISK, "sda"),
        (EntityKind.DISK, "sdb"),
    ]
    named = by_name(entities)
    assert named["mirror-0"].disk_count == 2
    assert named["tank"].disk_count == 2
    for disk in ("sda", "sdb"):
        assert named[disk].parent_vdev_name == "mirror-0"
        assert named[disk].io_stats.capacity is None
        assert named[disk].io_stats.available is None


def test_disks_attach_to_preceding_vdev_only():
    entities = reconstruct(parse_iostat_output(TWO_VDEV_OUTPUT), "tank")
    named = by_name(entities)

    assert named["sda"].parent_vdev_name == "mirror-0"
    assert named["sdb"].parent_vdev_name == "mirror-0"
    assert named["sdc"].parent_vdev_name == "mirror-1"
    assert named["sdd"].parent_vdev_name == "mirror-1"
    assert named["sde"].parent_vdev_name == "mirror-1"
    assert named["mirror-0"].disk_count == 2
    assert named["mirror-1"].disk_count == 3
    assert named["tank"].disk_count == 5


def test_vdev_without_disks_is_still_emitted():
    # A disk striped straight into the pool shows up with its own allocation
    output = (
        "tank\t3000\t9000\t20\t10\t2000\t1000\n"
        "sda\t1500\t4500\t10\t5\t1000\t500\n"
        "sdb\t1500\t4500\t10\t5\t1000\t500\n"
    )
    entities = reconstruct(parse_iostat_output(output), "tank")

    assert [(e.kind, e.name, e.disk_count) for e in entities] == [
        (EntityKind.POOL, "tank", 0),
        (EntityKind.VDEV, "sda", 0),
        (EntityKind.VDEV, "sdb", 0),
    ]


def test_disk_before_any_vdev_has_no_parent():
    output = (
        "tank\t1000\t4000\t10\t5\t1000\t500\n"
        "sdz\t0\t0\t1\t1\t1\t1\n"
        "mirror-0\t1000\t4000\t10\t5\t1000\t500\n"
        "sda\t0\t0\t5\t2\t500\t200\n"
    )
    named = by_name(reconstruct(parse_iostat_output(output), "tank"))

    assert named["sdz"].parent_vdev_name is None
    assert named["sda"].parent_vdev_name == "mirror-0"
    assert named["mirror-0"].disk_count == 1
    assert named["tank"].disk_count == 2


def test_malformed_row_does_not_break_reconstruction():
    output = (
        "tank\t1000\t4000\t10\t5\t1000\t500\n"
        "mirror-0\t1000\t4000\t10\t5\t1000\t500\n"
        "sda\t0\t0\t5\t2\t500\n"
        "sdb\t0\t0\t5\t3\t500\t300\n"
    )
    entities = reconstruct(parse_iostat_output(output), "tank")
    named = by_name(entities)

    assert "sda" not in named
    assert named["sdb"].parent_vdev_name == "mirror-0"
    assert named["mirror-0"].disk_count == 1


def test_pool_row_does_not_close_open_vdev():
    output = (
        "mirror-0\t1000\t4000\t10\t5\t1000\t500\n"
        "sda\t0\t0\t5\t2\t500\t200\n"
        "tank\t1000\t4000\t10\t5\t1000\t500\n"
        "sdb\t0\t0\t5\t3\t500\t300\n"
    )
    named = by_name(reconstruct(parse_iostat_output(output), "tank"))

    assert named["sdb"].parent_vdev_name == "mirror-0"
    assert named["mirror-0"].disk_count == 2


def test_empty_input():
    assert reconstruct([], "tank") == []
