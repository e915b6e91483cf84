"""Target cycle maintenance commands."""

import click

from salesboard.cli.options import (
    currency_symbol,
    format_money,
    resolve_agent_or_exit,
    resolve_team_or_exit,
)
from salesboard.domain.cycle_reset import CycleResetEngine, ResetPassResult
from salesboard.domain.entities import EntityKind
from salesboard.utils.date_parser import parse_datetime


@click.group()
def cycles_group():
    """Initialize, reset and inspect target cycles."""
    pass


def _report_failures(ctx, result: ResetPassResult) -> None:
    for failure in result.failures:
        click.echo(
            f"Error: {failure.entity_kind.value} {failure.entity_id}: {failure.error}",
            err=True,
        )
    if not result.ok:
        ctx.exit(1)


@cycles_group.command("init")
@click.pass_context
def init_cycles(ctx):
    """Establish the current period for every entity that has none.

    Entities that already have cycle state are left untouched, so running
    this repeatedly is safe.
    """
    db = ctx.obj["db"]
    engine = CycleResetEngine(db)

    result = engine.initialize_target_cycles()
    for cycle in result.initialized:
        click.echo(
            f"Initialized {cycle.entity_kind.value} {cycle.entity_id}: "
            f"{cycle.period.start:%Y-%m-%d} to {cycle.period.end:%Y-%m-%d}"
        )
    if not result.initialized:
        click.echo("All target cycles already initialized.")
    _report_failures(ctx, result)


@cycles_group.command("reset")
@click.option("--now", "now_str", help="Evaluate as of this UTC time instead of the clock")
@click.pass_context
def reset_cycles(ctx, now_str: str | None):
    """Close every elapsed period, recording its history, and open the next.

    Missed periods are caught up one by one. Running this twice in a row
    never closes a period twice.

    Examples:
        salesboard cycles reset
        salesboard cycles reset --now "2024-07-01 00:00"
    """
    db = ctx.obj["db"]
    engine = CycleResetEngine(db)
    if now_str:
        try:
            moment = parse_datetime(now_str)
        except ValueError as e:
            click.echo(f"Error: Invalid date: {e}", err=True)
            ctx.exit(1)
        engine.clock = lambda: moment

    result = engine.check_and_reset()
    for cycle in result.initialized:
        click.echo(
            f"Initialized {cycle.entity_kind.value} {cycle.entity_id}: "
            f"{cycle.period.start:%Y-%m-%d} to {cycle.period.end:%Y-%m-%d}"
        )
    for transition in result.transitions:
        click.echo(
            f"Closed {transition.entity_kind.value} {transition.entity_id} period "
            f"{transition.closed.start:%Y-%m-%d} to {transition.closed.end:%Y-%m-%d}"
        )
    if not result.transitions and not result.initialized:
        click.echo("No periods have elapsed.")
    _report_failures(ctx, result)


@cycles_group.command("history")
@click.argument("entity", metavar="AGENT_OR_TEAM")
@click.option("--team", "is_team", is_flag=True, help="ENTITY names a team, not an agent")
@click.pass_context
def show_history(ctx, entity: str, is_team: bool):
    """Show closed periods with target and achievement, oldest first.

    Examples:
        salesboard cycles history Ana
        salesboard cycles history North --team
    """
    db = ctx.obj["db"]
    if is_team:
        kind = EntityKind.TEAM
        entity_id = resolve_team_or_exit(ctx, db, entity)
    else:
        kind = EntityKind.AGENT
        entity_id = resolve_agent_or_exit(ctx, db, entity)

    history = db.list_target_history(kind, entity_id)
    if not history:
        click.echo("No closed periods yet.")
        return

    symbol = currency_symbol(db)
    click.echo(f"\nTarget history for {kind.value} {entity}:")
    click.echo("-" * 90)
    for row in history:
        click.echo(
            f"{row.period_start:%Y-%m-%d} to {row.period_end:%Y-%m-%d} | "
            f"Volume: {format_money(row.achieved_volume, symbol):>12s} / {format_money(row.target_volume, symbol):>12s} | "
            f"Units: {row.achieved_units:4d} / {row.target_units:4d}"
        )
        for item in row.category_breakdown:
            click.echo(
                f"        {item['category_name']}: {item['achieved_volume']} / {item['volume_target']}"
                f" | {item['achieved_units']} / {item['units_target']} units"
            )


def register_commands(cli):
    """Register cycle commands with main CLI."""
    cli.add_command(cycles_group, name="cycles")
