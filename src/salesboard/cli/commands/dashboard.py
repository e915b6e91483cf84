"""Leaderboard command."""

import click

from salesboard.cli.options import currency_symbol, format_money
from salesboard.domain.dashboard import DashboardService
from salesboard.domain.entities import LeaderboardRow


def _print_rows(title: str, rows: tuple[LeaderboardRow, ...], symbol: str = "") -> None:
    click.echo(f"\n{title}:")
    click.echo("-" * 96)
    if not rows:
        click.echo("  (none)")
        return
    click.echo(
        f"{'#':>3}  {'Name':<20} {'Volume':>12} {'Target':>12} {'%':>6}  "
        f"{'Units':>5} {'Target':>6} {'%':>6}  {'Period':<23}"
    )
    for row in rows:
        period = f"{row.period.start:%Y-%m-%d} to {row.period.end:%Y-%m-%d}"
        click.echo(
            f"{row.rank:>3}  {row.name[:20]:<20} {format_money(row.achievement.volume, symbol):>12} "
            f"{format_money(row.target_volume, symbol):>12} {row.volume_progress:>6}  "
            f"{row.achievement.units:>5} {row.target_units:>6} {row.units_progress:>6}  {period:<23}"
        )


@click.command("dashboard")
@click.option("--recent", default=10, show_default=True, help="Number of latest sales to show")
@click.pass_context
def show_dashboard(ctx, recent: int):
    """Show the current agent and team leaderboards.

    Rankings are by sales volume within each entity's current period,
    then by units, then by name.
    """
    db = ctx.obj["db"]
    service = DashboardService(db, recent_limit=recent)
    snapshot = service.build()

    symbol = currency_symbol(db)
    _print_rows("Agents", snapshot.agents, symbol)
    _print_rows("Teams", snapshot.teams, symbol)

    if snapshot.recent_sales:
        agents = {a.id: a.name for a in db.list_agents(include_inactive=True)}
        click.echo("\nLatest sales:")
        click.echo("-" * 96)
        for sale in snapshot.recent_sales:
            click.echo(
                f"{sale.created_at:%Y-%m-%d %H:%M}  {agents.get(sale.agent_id, '?'):<20} "
                f"{format_money(sale.amount, symbol):>12}  {sale.client_name}"
            )


def register_commands(cli):
    """Register dashboard command with main CLI."""
    cli.add_command(show_dashboard)
