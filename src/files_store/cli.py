# cli.py
import logging

import click

from files_store.adapters.storage import StoreFactory
from files_store.config.settings import get_settings
from files_store.logging_config import setup_logging

logger = logging.getLogger(__name__)


@click.group()
def cli():
    """CLI commands for running and maintaining the Files Store"""
    pass


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    click.echo("Current Configuration:")
    click.echo(f"  MongoDB URL: {settings.mongodb_url}")
    click.echo(f"  Database: {settings.database_name}")
    click.echo(f"  Metadata Collection: {settings.collection_name}")
    click.echo(f"  GridFS Bucket: {settings.bucket_name}")
    click.echo(f"  Listen: {settings.host}:{settings.port}")
    click.echo(f"  Log Level: {settings.log_level}")


@cli.command()
@click.option("--host", default=None, help="Bind address (defaults to the configured host)")
@click.option("--port", default=None, type=int, help="Bind port (defaults to the configured port)")
def serve(host, port):
    """Run the HTTP server"""
    import uvicorn

    from files_store.main import create_app

    settings = get_settings()
    app = create_app(settings)
    uvicorn.run(app, host=host or settings.host, port=port or settings.port)


@cli.command()
def init_indexes():
    """Create the unique index on the metadata key"""
    settings = get_settings()
    setup_logging(settings.log_level)
    store = StoreFactory.get_store(settings)
    try:
        store.init_indexes()
        click.echo("Indexes are in place")
    finally:
        store.close()


if __name__ == "__main__":
    cli()
