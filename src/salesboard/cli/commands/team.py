"""Team management commands."""

import click

from salesboard.cli.error_handling import handle_domain_error
from salesboard.cli.options import (
    collect_target_fields,
    currency_symbol,
    format_cycle,
    format_money,
    resolve_team_or_exit,
    target_options,
)
from salesboard.domain.errors import DomainError
from salesboard.domain.team import TeamService


@click.group()
def team_group():
    """Manage teams."""
    pass


@team_group.command("create")
@click.argument("name", metavar="TEAM_NAME")
@click.option("--color", default="#2563eb", show_default=True, help="Display color")
@target_options
@click.pass_context
def create_team(ctx, name: str, color: str, **target_fields):
    """Create a new team.

    Examples:
        salesboard team create "North"
        salesboard team create "North" --target-volume 100000 --cycle yearly --reset-day 1 --reset-month 7
        salesboard team create "South" --category-target Solar=50000:20
    """
    db = ctx.obj["db"]
    service = TeamService(db)
    fields = collect_target_fields(ctx, **target_fields)

    try:
        team_id = service.create_team(name=name, color=color, **fields)
        click.echo(f"Created team '{name}' (ID: {team_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@team_group.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include inactive teams")
@click.pass_context
def list_teams(ctx, include_inactive: bool):
    """List teams with their targets and cycles."""
    db = ctx.obj["db"]
    service = TeamService(db)

    teams = service.list_teams(include_inactive=include_inactive)
    if not teams:
        click.echo("No teams found.")
        return

    symbol = currency_symbol(db)
    click.echo("\nTeams:")
    click.echo("-" * 80)
    for team in teams:
        next_reset = team.next_reset.strftime("%Y-%m-%d") if team.next_reset else "-"
        status = "" if team.is_active else " (inactive)"
        click.echo(
            f"ID: {team.id:3d} | {team.name:20s} | Target: {format_money(team.target_volume, symbol):>12s}"
            f" / {team.target_units:4d} units | {format_cycle(team.cycle)} | Next reset: {next_reset}{status}"
        )
        for target in team.category_targets:
            click.echo(
                f"        {target.category_name}: {format_money(target.volume_target, symbol)}"
                f" / {target.units_target} units"
            )


@team_group.command("edit")
@click.argument("team", metavar="TEAM")
@click.option("--name", help="New team name")
@click.option("--color", help="New display color")
@click.option("--active/--inactive", "is_active", default=None, help="Activate or deactivate")
@target_options
@click.pass_context
def edit_team(
    ctx,
    team: str,
    name: str | None,
    color: str | None,
    is_active: bool | None,
    **target_fields,
):
    """Edit a team.

    TEAM can be a team name or ID. Changing the cycle restarts the team's
    current period on the next reset check.

    Examples:
        salesboard team edit North --target-volume 120000
        salesboard team edit 1 --cycle monthly --reset-day 15
    """
    db = ctx.obj["db"]
    service = TeamService(db)
    team_id = resolve_team_or_exit(ctx, db, team)
    fields = collect_target_fields(ctx, **target_fields)

    try:
        updated = service.update_team(
            team_id, name=name, color=color, is_active=is_active, **fields
        )
        click.echo(f"Updated team '{updated.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@team_group.command("delete")
@click.argument("team", metavar="TEAM")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_team(ctx, team: str, yes: bool):
    """Delete a team.

    TEAM can be a team name or ID. Teams that still have agents or closed
    target periods are deactivated instead.
    """
    db = ctx.obj["db"]
    service = TeamService(db)
    team_id = resolve_team_or_exit(ctx, db, team)
    team_obj = service.get_team(team_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete team '{team_obj.name}' (ID: {team_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        if service.delete_team(team_id):
            click.echo(f"Deleted team '{team_obj.name}'")
        else:
            click.echo(f"Team '{team_obj.name}' is still referenced; deactivated instead")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register team commands with main CLI."""
    cli.add_command(team_group, name="team")
