"""Web server command."""

import logging

import click
import uvicorn

from salesboard.realtime.scheduler import DEFAULT_INTERVAL
from salesboard.web.app import create_app

logger = logging.getLogger(__name__)


@click.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True, help="Interface to bind")
@click.option("--port", default=8000, show_default=True, type=int, help="Port to listen on")
@click.option(
    "--reset-interval",
    type=float,
    default=DEFAULT_INTERVAL,
    show_default=True,
    envvar="SALESBOARD_RESET_INTERVAL",
    help="Seconds between target cycle checks",
)
@click.option(
    "--admin-token",
    envvar="SALESBOARD_ADMIN_TOKEN",
    help="Bearer token required for changes through the API",
)
@click.pass_context
def serve(ctx, host: str, port: int, reset_interval: float, admin_token: str | None):
    """Run the display server.

    Serves the dashboard API and the /ws channel that pushes updates to TV
    displays, and checks target cycles on start-up and every interval.
    """
    if reset_interval <= 0:
        click.echo("Error: --reset-interval must be positive", err=True)
        ctx.exit(1)

    db = ctx.obj["db"]
    app = create_app(db, admin_token=admin_token, reset_interval=reset_interval)
    if admin_token is None:
        logger.warning("No admin token set; the API accepts changes from anyone")

    click.echo(f"Serving salesboard on http://{host}:{port}")
    log_level = ctx.find_root().params["log_level"].lower()
    uvicorn.run(app, host=host, port=port, log_level=log_level)


def register_commands(cli):
    """Register serve command with main CLI."""
    cli.add_command(serve)
