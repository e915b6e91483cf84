"""System settings commands."""

import click

from salesboard.cli.error_handling import handle_domain_error
from salesboard.domain.errors import DomainError
from salesboard.domain.settings import SettingsService


@click.group()
def settings_group():
    """Manage system settings."""
    pass


@settings_group.command("currency")
@click.option("--symbol", help="Symbol printed before amounts (e.g., €)")
@click.option("--code", help="Three-letter currency code (e.g., EUR)")
@click.option("--name", help="Currency name (e.g., Euro)")
@click.pass_context
def currency(ctx, symbol: str | None, code: str | None, name: str | None):
    """Show or change the currency used for sales amounts.

    Without options, prints the current currency. Running displays are
    told about a change only when it is made through the web API.

    Examples:
        salesboard settings currency
        salesboard settings currency --symbol € --code EUR --name Euro
    """
    db = ctx.obj["db"]
    service = SettingsService(db)

    try:
        current = service.set_currency(symbol=symbol, code=code, name=name)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Currency: {current.symbol} ({current.code}, {current.name})")


def register_commands(cli):
    """Register settings commands with main CLI."""
    cli.add_command(settings_group, name="settings")
