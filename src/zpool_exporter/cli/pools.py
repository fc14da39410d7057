import json

import click


@click.group()
@click.pass_context
def pools(ctx):
    """Inspect ZFS pools as the exporter sees them."""
    pass


@pools.command(name="topology")
@click.argument("names", nargs=-1)
def topology(names):
    """Print the pool topology (vdevs, disks, health and errors)."""
    from zpool_exporter.zpool.topology import get_topology_provider

    snapshot = get_topology_provider().list_pools(list(names) or None)
    click.echo(json.dumps([p.model_dump(mode="json") for p in snapshot], indent=4))


@pools.command(name="iostat")
@click.argument("name")
def iostat(name):
    """Print the reconstructed vdev/disk tree of a pool."""
    from zpool_exporter.exporter import fetch_iostat
    from zpool_exporter.zpool.iostat import parse_iostat_output
    from zpool_exporter.zpool.reconstruct import reconstruct

    for entity in reconstruct(parse_iostat_output(fetch_iostat(name)), name):
        indent = {"pool": "", "vdev": "  ", "disk": "    "}[entity.kind.value]
        click.echo(f"{indent}{entity.name} ({entity.kind.value})")
