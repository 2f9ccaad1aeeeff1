"""Draft commands."""

import click
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.batch import batch_difference, batch_totals, has_data
from ledgerbook.domain.drafts import DraftService
from ledgerbook.domain.errors import DomainError
from ledgerbook.utils.amount_parser import format_currency
from ledgerbook.utils.date_parser import format_date, format_short_relative_time


@click.group()
def draft_group():
    """Inspect saved entry batches that were not posted yet."""
    pass


@draft_group.command("list")
@click.pass_context
def list_drafts(ctx):
    """List drafts, most recently changed first."""
    db = ctx.obj["db"]
    service = DraftService(db)

    drafts = [draft for draft in service.list_drafts() if has_data(draft.entries)]
    if not drafts:
        click.echo("No drafts found.")
        return

    click.echo("\nDrafts:")
    click.echo("-" * 80)
    for draft in drafts:
        when = format_date(draft.date) if draft.date else "no date"
        changed = format_short_relative_time(draft.updated_at or draft.created_at)
        click.echo(f"{draft.id} | {when:10s} | {len(draft.entries)} row(s) | {changed}")


@draft_group.command("show")
@click.argument("draft_id")
@click.pass_context
def show_draft(ctx, draft_id: str):
    """Show the rows of a draft and whether they balance."""
    db = ctx.obj["db"]
    service = DraftService(db)
    account_names = {acc.id: acc.name for acc in AccountService(db).list_accounts()}

    try:
        draft = service.require_draft(draft_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Draft {draft.id}")
    click.echo(f"Date: {format_date(draft.date) if draft.date else '-'}")
    click.echo("-" * 80)
    for row in draft.entries:
        account_name = account_names.get(row.account_id, "-") if row.account_id else "-"
        click.echo(f"{account_name:25s} | {row.type.value:10s} | {row.amount:>12s} | {row.statement}")

    total_receivable, total_debt = batch_totals(draft.entries)
    click.echo("-" * 80)
    click.echo(
        f"Receivable: {format_currency(total_receivable)} | Debt: {format_currency(total_debt)} | "
        f"Difference: {format_currency(batch_difference(draft.entries))}"
    )


@draft_group.command("delete")
@click.argument("draft_id")
@click.pass_context
def delete_draft(ctx, draft_id: str):
    """Discard a draft."""
    db = ctx.obj["db"]
    service = DraftService(db)

    try:
        service.delete_draft(draft_id)
        click.echo(f"Deleted draft {draft_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register draft commands with main CLI."""
    cli.add_command(draft_group, name="draft")
