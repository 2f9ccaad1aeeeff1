"""Category management commands."""

import click
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.category import CategoryService, days_to_weeks
from ledgerbook.domain.entities import EntryType
from ledgerbook.domain.errors import DomainError, category_delete_summary

ENTRY_TYPE_CHOICES = [entry_type.value for entry_type in EntryType]


def _format_advance(days: int | None) -> str:
    if days is None:
        return "-"
    weeks = days_to_weeks(days)
    return f"{weeks} week{'s' if weeks != 1 else ''}"


@click.group()
def category_group():
    """Manage categories (main accounts)."""
    pass


@category_group.command("create")
@click.argument("code")
@click.argument("name")
@click.option(
    "--type",
    "entry_type",
    type=click.Choice(ENTRY_TYPE_CHOICES, case_sensitive=False),
    default=EntryType.BOTH.value,
    help="Entry sides accounts of this category may record (default: both)",
)
@click.option("--advance-weeks", type=click.IntRange(min=0), help="Advance period in weeks")
@click.pass_context
def create_category(ctx, code: str, name: str, entry_type: str, advance_weeks: int | None):
    """Create a new category.

    CODE is the category's permanent identifier; it cannot be changed later.

    Examples:
        ledgerbook category create 120 "Customers" --type receivable
        ledgerbook category create 320 "Suppliers" --type debt --advance-weeks 4
    """
    db = ctx.obj["db"]
    service = CategoryService(db)

    try:
        category_id = service.create_category(
            category_id=code,
            name=name,
            entry_type=EntryType(entry_type.lower()),
            advance_period_weeks=advance_weeks,
        )
        click.echo(f"Created category '{name}' (code: {category_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@category_group.command("list")
@click.option("--search", help="Match code or name (case and accent insensitive)")
@click.pass_context
def list_categories(ctx, search: str | None):
    """List categories ordered by code."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    categories = service.list_categories(search=search)
    if not categories:
        click.echo("No categories found.")
        return

    click.echo("\nCategories:")
    click.echo("-" * 70)
    for cat in categories:
        click.echo(
            f"{cat.id:10s} | {cat.name:30s} | {cat.entry_type.value:10s} | "
            f"Advance: {_format_advance(cat.advance_period_days)}"
        )


@category_group.command("edit")
@click.argument("code")
@click.option("--name", help="New name")
@click.option(
    "--type",
    "entry_type",
    type=click.Choice(ENTRY_TYPE_CHOICES, case_sensitive=False),
    help="New entry type",
)
@click.option("--advance-weeks", type=click.IntRange(min=0), help="New advance period in weeks")
@click.option("--clear-advance", is_flag=True, help="Remove the advance period")
@click.pass_context
def edit_category(
    ctx,
    code: str,
    name: str | None,
    entry_type: str | None,
    advance_weeks: int | None,
    clear_advance: bool,
) -> None:
    """Edit a category. The code itself cannot be changed.

    Examples:
        ledgerbook category edit 120 --name "Domestic Customers"
        ledgerbook category edit 320 --clear-advance
    """
    db = ctx.obj["db"]
    service = CategoryService(db)

    if advance_weeks is not None and clear_advance:
        click.echo("Error: --advance-weeks and --clear-advance cannot be combined.", err=True)
        ctx.exit(1)

    changes = {}
    if name is not None:
        changes["name"] = name
    if entry_type is not None:
        changes["entry_type"] = EntryType(entry_type.lower())
    if advance_weeks is not None:
        changes["advance_period_weeks"] = advance_weeks
    if clear_advance:
        changes["advance_period_weeks"] = None

    if not changes:
        click.echo("Nothing to change.")
        return

    try:
        service.update_category(code, **changes)
        click.echo(f"Updated category {code}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@category_group.command("delete")
@click.argument("code")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_category(ctx, code: str, yes: bool) -> None:
    """Delete a category together with its accounts and their entries.

    Examples:
        ledgerbook category delete 120
        ledgerbook category delete 120 --yes
    """
    db = ctx.obj["db"]
    service = CategoryService(db)

    try:
        category = service.require_category(code)
        account_count, entry_count = service.deletion_impact(code)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if account_count or entry_count:
        click.echo(category_delete_summary(code, account_count, entry_count))

    if not yes and not click.confirm(f"Are you sure you want to delete category '{category.name}' ({code})?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_category(code)
        click.echo(f"Deleted category '{category.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
