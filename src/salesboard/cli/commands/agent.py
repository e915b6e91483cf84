"""Agent management commands."""

import click

from salesboard.cli.error_handling import handle_domain_error
from salesboard.cli.options import (
    collect_target_fields,
    currency_symbol,
    format_cycle,
    format_money,
    resolve_agent_or_exit,
    resolve_team_or_exit,
    target_options,
)
from salesboard.domain.agent import AgentService
from salesboard.domain.errors import DomainError


@click.group()
def agent_group():
    """Manage sales agents."""
    pass


@agent_group.command("create")
@click.argument("name", metavar="AGENT_NAME")
@click.option("--team", required=True, help="Team name or ID")
@click.option("--category", required=True, help="Default sale category of the agent")
@click.option("--photo", help="Photo URL shown on the displays")
@target_options
@click.pass_context
def create_agent(
    ctx, name: str, team: str, category: str, photo: str | None, **target_fields
):
    """Create a new agent.

    Examples:
        salesboard agent create "Ana" --team North --category Solar
        salesboard agent create "Ben" --team 1 --category Solar --target-volume 20000 --target-units 8
    """
    db = ctx.obj["db"]
    service = AgentService(db)
    team_id = resolve_team_or_exit(ctx, db, team)
    fields = collect_target_fields(ctx, **target_fields)

    try:
        agent_id = service.create_agent(
            name=name, team_id=team_id, category=category, photo=photo, **fields
        )
        click.echo(f"Created agent '{name}' (ID: {agent_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@agent_group.command("list")
@click.option("--team", help="Only agents of this team (name or ID)")
@click.option("--all", "include_inactive", is_flag=True, help="Include inactive agents")
@click.pass_context
def list_agents(ctx, team: str | None, include_inactive: bool):
    """List agents with their targets and cycles."""
    db = ctx.obj["db"]
    service = AgentService(db)
    team_id = resolve_team_or_exit(ctx, db, team) if team else None

    agents = service.list_agents(team_id=team_id, include_inactive=include_inactive)
    if not agents:
        click.echo("No agents found.")
        return

    teams = {t.id: t.name for t in db.list_teams(include_inactive=True)}
    symbol = currency_symbol(db)
    click.echo("\nAgents:")
    click.echo("-" * 90)
    for agent in agents:
        status = "" if agent.is_active else " (inactive)"
        click.echo(
            f"ID: {agent.id:3d} | {agent.name:20s} | Team: {teams.get(agent.team_id, '?'):12s}"
            f" | Target: {format_money(agent.target_volume, symbol):>10s} / {agent.target_units:3d} units"
            f" | {format_cycle(agent.cycle)}{status}"
        )


@agent_group.command("edit")
@click.argument("agent", metavar="AGENT")
@click.option("--name", help="New agent name")
@click.option("--team", help="Move to this team (name or ID)")
@click.option("--category", help="New default sale category")
@click.option("--photo", help="New photo URL")
@click.option("--active/--inactive", "is_active", default=None, help="Activate or deactivate")
@target_options
@click.pass_context
def edit_agent(
    ctx,
    agent: str,
    name: str | None,
    team: str | None,
    category: str | None,
    photo: str | None,
    is_active: bool | None,
    **target_fields,
):
    """Edit an agent.

    AGENT can be an agent name or ID. Giving --category-target replaces all
    of the agent's category targets.

    Examples:
        salesboard agent edit Ana --target-volume 25000
        salesboard agent edit 3 --category-target Solar=10000:4 --category-target Storage=5000:2
    """
    db = ctx.obj["db"]
    service = AgentService(db)
    agent_id = resolve_agent_or_exit(ctx, db, agent)
    team_id = resolve_team_or_exit(ctx, db, team) if team else None
    fields = collect_target_fields(ctx, **target_fields)

    try:
        updated = service.update_agent(
            agent_id,
            name=name,
            team_id=team_id,
            category=category,
            photo=photo,
            is_active=is_active,
            **fields,
        )
        click.echo(f"Updated agent '{updated.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@agent_group.command("delete")
@click.argument("agent", metavar="AGENT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_agent(ctx, agent: str, yes: bool):
    """Delete an agent.

    AGENT can be an agent name or ID. Agents with recorded sales are
    deactivated instead, so their sales keep counting for the team.
    """
    db = ctx.obj["db"]
    service = AgentService(db)
    agent_id = resolve_agent_or_exit(ctx, db, agent)
    agent_obj = service.get_agent(agent_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete agent '{agent_obj.name}' (ID: {agent_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        if service.delete_agent(agent_id):
            click.echo(f"Deleted agent '{agent_obj.name}'")
        else:
            click.echo(f"Agent '{agent_obj.name}' has sales; deactivated instead")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register agent commands with main CLI."""
    cli.add_command(agent_group, name="agent")
