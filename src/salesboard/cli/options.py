"""Shared CLI options for target and cycle fields."""

from decimal import Decimal

import click

from salesboard.cli.error_handling import handle_domain_error
from salesboard.database.base import Database
from salesboard.domain.entities import CycleConfig, CycleType
from salesboard.domain.settings import SettingsService
from salesboard.utils.amount_parser import parse_amount, parse_category_target
from salesboard.utils.entity_resolver import resolve_agent, resolve_team


def target_options(func):
    """Add target and cycle options to a create or edit command.

    All options default to None so edit commands can tell which fields
    were given.
    """
    options = [
        click.option("--target-volume", help="Sales volume target per period (e.g., 50000)"),
        click.option("--target-units", type=int, help="Units target per period"),
        click.option(
            "--cycle",
            "target_cycle",
            type=click.Choice(["monthly", "yearly"], case_sensitive=False),
            help="Target cycle",
        ),
        click.option("--reset-day", type=int, help="Day a new period begins (1-31)"),
        click.option("--reset-month", type=int, help="Month a yearly period begins (1-12)"),
        click.option(
            "--category-target",
            "category_targets",
            multiple=True,
            help="Per-category target NAME=VOLUME:UNITS (repeatable, replaces all)",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def collect_target_fields(
    ctx: click.Context,
    target_volume: str | None,
    target_units: int | None,
    target_cycle: str | None,
    reset_day: int | None,
    reset_month: int | None,
    category_targets: tuple[str, ...],
) -> dict:
    """Turn the raw option values into service keyword arguments.

    Options that were not given are left out. Exits on malformed input.
    """
    fields: dict = {}
    if target_volume is not None:
        try:
            fields["target_volume"] = parse_amount(target_volume)
        except ValueError as e:
            click.echo(f"Error: Invalid target volume: {e}", err=True)
            ctx.exit(1)
    if target_units is not None:
        fields["target_units"] = target_units
    if target_cycle is not None:
        fields["target_cycle"] = target_cycle.lower()
    if reset_day is not None:
        fields["reset_day"] = reset_day
    if reset_month is not None:
        fields["reset_month"] = reset_month
    if category_targets:
        try:
            fields["category_targets"] = [
                parse_category_target(value) for value in category_targets
            ]
        except ValueError as e:
            handle_domain_error(ctx, e)
    return fields


def resolve_team_or_exit(ctx: click.Context, db: Database, team: str) -> int:
    """Resolve a team name or ID, or exit with a CLI error."""
    try:
        return resolve_team(db, team)
    except ValueError as e:
        handle_domain_error(ctx, e)


def resolve_agent_or_exit(ctx: click.Context, db: Database, agent: str) -> int:
    """Resolve an agent name or ID, or exit with a CLI error."""
    try:
        return resolve_agent(db, agent)
    except ValueError as e:
        handle_domain_error(ctx, e)


def currency_symbol(db: Database) -> str:
    """Symbol of the configured currency."""
    return SettingsService(db).get_currency().symbol


def format_money(amount: Decimal, symbol: str = "") -> str:
    return f"{symbol}{amount:,.2f}"


def format_cycle(cycle: CycleConfig) -> str:
    """Describe a cycle, e.g. "monthly, day 15" or "yearly, 7/1"."""
    if cycle.cycle_type == CycleType.YEARLY:
        return f"yearly, {cycle.reset_month}/{cycle.reset_day}"
    return f"monthly, day {cycle.reset_day}"
