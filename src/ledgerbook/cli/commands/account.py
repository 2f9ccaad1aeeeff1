"""Account management commands."""

import click
from ledgerbook.cli.account_resolution import resolve_account_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.account import SORT_COLUMNS, AccountService
from ledgerbook.domain.entities import AccountTotals
from ledgerbook.domain.errors import DomainError
from ledgerbook.utils.amount_parser import format_currency


@click.group()
def account_group():
    """Manage accounts (sub accounts)."""
    pass


@account_group.command("create")
@click.argument("category_code", metavar="CATEGORY")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--description", help="Free text description")
@click.pass_context
def create_account(ctx, category_code: str, name: str, description: str | None):
    """Create a new account in a category.

    Examples:
        ledgerbook account create 120 "Acme Ltd"
        ledgerbook account create 320 "Parts Supplier" --description "Monthly invoices"
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    try:
        account_id = service.create_account(
            category_id=category_code, name=name, description=description
        )
        click.echo(f"Created account '{name}' (ID: {account_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.option("--category", "category_code", help="Only accounts of this category code")
@click.option("--search", help="Match name, description or category name")
@click.option("--sort", "sort_column", type=click.Choice(SORT_COLUMNS), help="Sort by total")
@click.option("--ascending", is_flag=True, help="Smallest totals first when sorting")
@click.pass_context
def list_accounts(
    ctx,
    category_code: str | None,
    search: str | None,
    sort_column: str | None,
    ascending: bool,
):
    """List accounts with their all-time totals."""
    db = ctx.obj["db"]
    service = AccountService(db)

    accounts = service.list_accounts(category_id=category_code, search=search)
    if not accounts:
        click.echo("No accounts found.")
        return

    totals = service.account_totals()
    accounts = service.sort_by_totals(accounts, totals, sort_column, descending=not ascending)

    click.echo("\nAccounts:")
    click.echo("-" * 100)
    for acc in accounts:
        acc_totals = totals.get(acc.id, AccountTotals(account_id=acc.id))
        balance = acc_totals.total_receivable - acc_totals.total_debt
        click.echo(
            f"ID: {acc.id[:8]} | {acc.category_id:8s} | {acc.name:25s} | "
            f"Receivable: {format_currency(acc_totals.total_receivable):>14s} | "
            f"Debt: {format_currency(acc_totals.total_debt):>14s} | "
            f"Balance: {format_currency(balance):>14s}"
        )


@account_group.command("edit")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New name")
@click.option("--description", help="New description (empty string clears it)")
@click.option("--category", "category_code", help="Move the account to another category")
@click.pass_context
def edit_account(
    ctx, account: str, name: str | None, description: str | None, category_code: str | None
) -> None:
    """Edit an account.

    ACCOUNT can be an account name or ID. Moving an account to another
    category moves its entries with it.

    Examples:
        ledgerbook account edit "Acme Ltd" --name "Acme Limited"
        ledgerbook account edit 3f2a9c1e --category 320
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)

    changes = {}
    if name is not None:
        changes["name"] = name
    if description is not None:
        changes["description"] = description
    if category_code is not None:
        changes["category_id"] = category_code

    if not changes:
        click.echo("Nothing to change.")
        return

    try:
        service.update_account(account_id, **changes)
        click.echo(f"Updated account {account_id[:8]}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account and all of its ledger entries.

    ACCOUNT can be an account name or ID.

    Examples:
        ledgerbook account delete "Acme Ltd"
        ledgerbook account delete 3f2a9c1e --yes
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)
    account_obj = service.get_account(account_id)

    entry_count = service.entry_count(account_id)
    if entry_count > 0:
        click.echo(
            f"Account '{account_obj.name}' has {entry_count} ledger "
            f"entr{'ies' if entry_count != 1 else 'y'}; they will be deleted too."
        )

    if not yes and not click.confirm(f"Are you sure you want to delete account '{account_obj.name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_id)
        click.echo(f"Deleted account '{account_obj.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
