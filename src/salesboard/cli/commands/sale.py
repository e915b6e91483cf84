"""Sale recording commands."""

import click

from salesboard.cli.error_handling import handle_domain_error
from salesboard.cli.options import currency_symbol, format_money, resolve_agent_or_exit
from salesboard.domain.errors import DomainError
from salesboard.domain.sale import SaleService
from salesboard.utils.amount_parser import parse_amount
from salesboard.utils.date_parser import parse_datetime


@click.group()
def sale_group():
    """Record and correct sales."""
    pass


@sale_group.command("add")
@click.option("--agent", required=True, help="Agent name or ID")
@click.option("--amount", required=True, help="Sale amount (e.g., 1250.00)")
@click.option("--client", "client_name", required=True, help="Client name")
@click.option("--units", type=int, default=1, show_default=True, help="Units sold")
@click.option("--category", help="Sale category (defaults to the agent's category)")
@click.option("--description", help="Sale description")
@click.option("--date", "when", help="Sale time in UTC (defaults to now)")
@click.pass_context
def add_sale(
    ctx,
    agent: str,
    amount: str,
    client_name: str,
    units: int,
    category: str | None,
    description: str | None,
    when: str | None,
):
    """Record a sale.

    Examples:
        salesboard sale add --agent Ana --amount 1250 --client "ACME"
        salesboard sale add --agent 2 --amount 900 --units 3 --client "Globex" --date "2024-03-01 14:00"
    """
    db = ctx.obj["db"]
    service = SaleService(db)
    agent_id = resolve_agent_or_exit(ctx, db, agent)

    try:
        sale_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    created_at = None
    if when:
        try:
            created_at = parse_datetime(when)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    try:
        sale_id = service.create_sale(
            agent_id=agent_id,
            amount=sale_amount,
            client_name=client_name,
            units=units,
            category=category,
            description=description,
            created_at=created_at,
        )
        amount_text = format_money(sale_amount, currency_symbol(db))
        click.echo(f"Recorded sale {sale_id}: {amount_text} for '{client_name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@sale_group.command("list")
@click.option("--agent", help="Only sales of this agent (name or ID)")
@click.option("--start-date", help="Inclusive start (e.g., 2024-03-01, 'this month')")
@click.option("--end-date", help="Exclusive end (e.g., 2024-04-01, 'next month')")
@click.pass_context
def list_sales(ctx, agent: str | None, start_date: str | None, end_date: str | None):
    """List sales, newest first."""
    db = ctx.obj["db"]
    service = SaleService(db)
    agent_id = resolve_agent_or_exit(ctx, db, agent) if agent else None

    start = None
    end = None
    try:
        if start_date:
            start = parse_datetime(start_date)
        if end_date:
            end = parse_datetime(end_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)

    sales = service.list_sales(agent_id=agent_id, start=start, end=end)
    if not sales:
        click.echo("No sales found.")
        return

    symbol = currency_symbol(db)
    agents = {a.id: a.name for a in db.list_agents(include_inactive=True)}
    click.echo(f"\nFound {len(sales)} sale(s):")
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<6} {'Time (UTC)':<17} {'Amount':>12} {'Units':>5}  {'Agent':<18} {'Category':<14} {'Client':<20}"
    )
    click.echo("-" * 100)
    for sale in sales:
        click.echo(
            f"{sale.id:<6} {sale.created_at.strftime('%Y-%m-%d %H:%M'):<17} "
            f"{format_money(sale.amount, symbol):>12} {sale.units:>5}  "
            f"{agents.get(sale.agent_id, '?')[:18]:<18} {sale.category[:14]:<14} {sale.client_name[:20]:<20}"
        )


@sale_group.command("edit")
@click.argument("sale_id", type=int)
@click.option("--amount", help="Corrected amount")
@click.option("--units", type=int, help="Corrected units")
@click.option("--category", help="Corrected category")
@click.option("--client", "client_name", help="Corrected client name")
@click.option("--description", help="Corrected description")
@click.pass_context
def edit_sale(
    ctx,
    sale_id: int,
    amount: str | None,
    units: int | None,
    category: str | None,
    client_name: str | None,
    description: str | None,
):
    """Correct a sale. Its timestamp is kept, so it stays in the same period."""
    db = ctx.obj["db"]
    service = SaleService(db)

    sale_amount = None
    if amount is not None:
        try:
            sale_amount = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    try:
        sale = service.update_sale(
            sale_id,
            amount=sale_amount,
            units=units,
            category=category,
            client_name=client_name,
            description=description,
        )
        amount_text = format_money(sale.amount, currency_symbol(db))
        click.echo(f"Updated sale {sale.id}: {amount_text} / {sale.units} units")
    except DomainError as e:
        handle_domain_error(ctx, e)


@sale_group.command("delete")
@click.argument("sale_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_sale(ctx, sale_id: int, yes: bool):
    """Delete a sale."""
    db = ctx.obj["db"]
    service = SaleService(db)

    if not yes and not click.confirm(f"Are you sure you want to delete sale {sale_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_sale(sale_id)
        click.echo(f"Deleted sale {sale_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register sale commands with main CLI."""
    cli.add_command(sale_group, name="sale")
