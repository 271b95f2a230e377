"""HTTP server command."""

import logging

import click
import uvicorn

from ledgerflow.api import create_app
from ledgerflow.cli.context import get_services
from ledgerflow.utils.logger import configure_logging

logger = logging.getLogger(__name__)


@click.command("serve")
@click.option("--host", help="Interface to bind (defaults to LEDGERFLOW_HOST or 127.0.0.1)")
@click.option("--port", type=int, help="Port to listen on (defaults to LEDGERFLOW_PORT or 7072)")
@click.pass_context
def serve(ctx, host: str | None, port: int | None):
    """Run the import/posting HTTP API.

    The training corpus is loaded before the server starts accepting
    requests.
    """
    configure_logging(logging.INFO)
    settings = ctx.obj["settings"]
    services = get_services(ctx)

    app = create_app(settings, services=services)
    logger.info("Starting server on %s:%d", host or settings.host, port or settings.port)
    uvicorn.run(app, host=host or settings.host, port=port or settings.port, log_config=None)


def register_commands(cli):
    """Register serve command with main CLI."""
    cli.add_command(serve)
