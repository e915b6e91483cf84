"""Sale category commands."""

import click

from salesboard.cli.error_handling import handle_domain_error
from salesboard.domain.category import CategoryService
from salesboard.domain.errors import DomainError


@click.group()
def category_group():
    """Manage sale categories."""
    pass


@category_group.command("create")
@click.argument("name", metavar="CATEGORY_NAME")
@click.pass_context
def create_category(ctx, name: str):
    """Create a sale category that category targets can refer to.

    Examples:
        salesboard category create "Solar"
    """
    db = ctx.obj["db"]
    service = CategoryService(db)

    try:
        category_id = service.create_category(name)
        click.echo(f"Created category '{name}' (ID: {category_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@category_group.command("list")
@click.pass_context
def list_categories(ctx):
    """List sale categories."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    categories = service.list_categories()
    if not categories:
        click.echo("No categories found.")
        return

    click.echo("\nCategories:")
    click.echo("-" * 40)
    for category in categories:
        click.echo(f"ID: {category.id:3d} | {category.name}")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
