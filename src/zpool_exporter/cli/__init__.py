import click

from zpool_exporter.cli.pools import pools
from zpool_exporter.cli.utils import LogLevel, configure_logging
from zpool_exporter.config.settings import config
from zpool_exporter.zpool.errors import ScrapeFailed


@click.group()
@click.option(
    "--log-level",
    type=LogLevel(),
    default=config.log_level,
    show_default=True,
    help="The lowest log level (off, error, warn, info, debug, or trace).",
)
@click.pass_context
def main(ctx, log_level):
    """ZFS metrics exporter for Prometheus"""
    ctx.ensure_object(dict)
    configure_logging(log_level)

main.add_command(pools)


@main.command()
@click.option("-b", "--bind-address", default=config.bind_address, help="The address to bind and listen from.")
@click.option("-p", "--port", default=config.port, type=int, help="The port to listen on.")
def server(bind_address, port):
    """Run the metrics HTTP server."""
    import uvicorn

    from zpool_exporter.api.server import app
    uvicorn.run(app, host=bind_address, port=port, log_config=None)


@main.command()
@click.option("--pool", "pool_names", multiple=True, help="Only scrape this pool. Can be repeated.")
def scrape(pool_names):
    """Scrape once and print the metrics."""
    from zpool_exporter.exporter import Exporter
    from zpool_exporter.metrics.sink import render

    try:
        groups = Exporter(pools=list(pool_names) or config.pools).scrape()
    except ScrapeFailed as e:
        raise click.ClickException(str(e))
    click.echo(render(groups).decode("utf-8"), nl=False)


@main.command()
def version():
    """Print the exporter version."""
    from zpool_exporter.version import get_version
    click.echo(get_version())
