"""Main CLI entry point."""

import logging

import click

from salesboard.database.factories import create_sqlite_database

# Import and register all commands at module level
from salesboard.cli.commands import (
    agent,
    category,
    cycles,
    dashboard,
    sale,
    serve,
    settings,
    team,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides SALESBOARD_DB_PATH environment variable)",
    envvar="SALESBOARD_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="SALESBOARD_LOG_LEVEL",
    help="Logging verbosity",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Salesboard - Sales leaderboards for office TV displays.

    Manage teams, agents and sales, track targets over monthly or yearly
    cycles, and serve live leaderboards to connected displays.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
team.register_commands(cli)
agent.register_commands(cli)
category.register_commands(cli)
sale.register_commands(cli)
cycles.register_commands(cli)
dashboard.register_commands(cli)
settings.register_commands(cli)
serve.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
