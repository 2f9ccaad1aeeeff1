"""Ledger entry commands."""

from datetime import date

import click
from ledgerbook.cli.account_resolution import resolve_account_or_exit
from ledgerbook.cli.date_filters import period_options, pop_period_flags, resolve_cli_date_range
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.autosave import DEFAULT_DELAY, DraftAutosaveCoordinator
from ledgerbook.domain.batch import batch_difference, batch_totals, is_balanced
from ledgerbook.domain.drafts import DraftService, new_draft_row
from ledgerbook.domain.entities import DraftEntry, EntrySide, LedgerEntry
from ledgerbook.domain.errors import DomainError, NotFoundError, ValidationError, entry_not_found
from ledgerbook.domain.ledger import LedgerService
from ledgerbook.domain.ledger_state import LedgerBook
from ledgerbook.utils.account_resolver import resolve_account
from ledgerbook.utils.amount_parser import format_currency
from ledgerbook.utils.date_parser import format_date, parse_date

SIDE_CHOICES = [side.value for side in EntrySide]


@click.group()
def entry_group():
    """Record and browse ledger entries."""
    pass


def _parse_date_or_exit(ctx, value: str | None, default: date | None = None) -> date | None:
    if value is None:
        return default
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)


def _resolve_entry_id(ctx, ledger_service: LedgerService, entry_id: str) -> str:
    """Accept a full entry ID or the short prefix shown in listings."""
    if ledger_service.get_entry(entry_id) is not None:
        return entry_id
    matches = [e.id for e in ledger_service.list_entries() if e.id.startswith(entry_id)]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        handle_domain_error(ctx, ValidationError(f"Entry ID prefix '{entry_id}' is ambiguous"))
    handle_domain_error(ctx, NotFoundError(entry_not_found(entry_id)))


def _format_entry(entry: LedgerEntry, account_names: dict[str, str]) -> str:
    receivable = format_currency(entry.receivable) if entry.receivable > 0 else ""
    debt = format_currency(entry.debt) if entry.debt > 0 else ""
    return (
        f"{entry.id[:8]} | {format_date(entry.date)} | {entry.category_id:8s} | "
        f"{account_names.get(entry.account_id, 'Unknown'):20s} | {receivable:>14s} | {debt:>14s} | "
        f"{entry.statement or ''}"
    )


@entry_group.command("add")
@click.argument("account", metavar="ACCOUNT")
@click.argument("amount")
@click.option(
    "--type",
    "side",
    type=click.Choice(SIDE_CHOICES, case_sensitive=False),
    required=True,
    help="Entry side",
)
@click.option("--date", "entry_date", help="Entry date (default: today)")
@click.option("--statement", help="Memo text")
@click.pass_context
def add_entry(ctx, account: str, amount: str, side: str, entry_date: str | None, statement: str | None):
    """Record a single entry.

    ACCOUNT can be an account name or ID. The entry's category is the
    account's category, whose entry type must allow the chosen side.

    Examples:
        ledgerbook entry add "Acme Ltd" 1250.00 --type receivable --statement "Invoice 42"
        ledgerbook entry add "Parts Supplier" 300 --type debt --date yesterday
    """
    db = ctx.obj["db"]
    book = LedgerBook(LedgerService(db))
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    when = _parse_date_or_exit(ctx, entry_date, default=date.today())

    try:
        entry_id = book.add(when, account_id, EntrySide(side.lower()), amount, statement)
        click.echo(f"Recorded {side.lower()} entry of {amount} on {format_date(when)} (ID: {entry_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


def _parse_row_spec(ctx, account_service: AccountService, ledger_service: LedgerService, spec: str) -> DraftEntry:
    """Parse ACCOUNT:TYPE:AMOUNT[:STATEMENT] into a form row."""
    parts = spec.split(":", 3)
    if len(parts) < 3:
        click.echo(
            f"Error: Invalid row '{spec}'. Expected ACCOUNT:TYPE:AMOUNT[:STATEMENT]", err=True
        )
        ctx.exit(1)

    account, side, amount = (part.strip() for part in parts[:3])
    statement = parts[3].strip() if len(parts) == 4 else ""
    if side.lower() not in SIDE_CHOICES:
        click.echo(f"Error: Invalid entry type '{side}' in row '{spec}'", err=True)
        ctx.exit(1)

    account_id = resolve_account_or_exit(ctx, account_service, account)
    (row,) = ledger_service.fill_categories(
        [new_draft_row(account_id=account_id, side=EntrySide(side.lower()), amount=amount, statement=statement)]
    )
    return row


def _prompt_rows(
    account_service: AccountService,
    ledger_service: LedgerService,
    coordinator: DraftAutosaveCoordinator,
    entry_date: date,
    rows: list[DraftEntry],
) -> list[DraftEntry]:
    """Prompt for rows until an empty account is entered."""
    rows = list(rows)
    while True:
        account = click.prompt("Account (empty to finish)", default="", show_default=False)
        if not account.strip():
            return rows
        try:
            account_id = resolve_account(account_service, account.strip())
        except DomainError as e:
            click.echo(f"Error: {e}", err=True)
            continue

        side = click.prompt("Type", type=click.Choice(SIDE_CHOICES, case_sensitive=False))
        amount = click.prompt("Amount")
        statement = click.prompt("Statement", default="", show_default=False)
        (row,) = ledger_service.fill_categories(
            [new_draft_row(account_id=account_id, side=EntrySide(side.lower()), amount=amount, statement=statement)]
        )
        rows.append(row)
        coordinator.update(entry_date, rows)
        _echo_batch_totals(rows)


def _echo_batch_totals(rows: list[DraftEntry]) -> None:
    total_receivable, total_debt = batch_totals(rows)
    status = "balanced" if is_balanced(rows) else f"difference {format_currency(batch_difference(rows))}"
    click.echo(
        f"Receivable: {format_currency(total_receivable)} | "
        f"Debt: {format_currency(total_debt)} | {status}"
    )


@entry_group.command("batch")
@click.option("--date", "entry_date", help="Date shared by all rows (default: today)")
@click.option(
    "--row",
    "row_specs",
    multiple=True,
    help="Row as ACCOUNT:TYPE:AMOUNT[:STATEMENT]; repeat for each row",
)
@click.option("--resume", "draft_id", help="Continue a saved draft")
@click.option(
    "--autosave-delay",
    type=click.FloatRange(min=0),
    default=DEFAULT_DELAY,
    show_default=True,
    envvar="LEDGERBOOK_AUTOSAVE_DELAY",
    help="Seconds of inactivity before the form is saved as a draft",
)
@click.pass_context
def batch_entries(ctx, entry_date: str | None, row_specs: tuple[str, ...], draft_id: str | None, autosave_delay: float):
    """Post several entries under one date; receivable and debt must balance.

    Without --row the rows are prompted for interactively and the form is
    autosaved as a draft while you type. If the batch cannot be posted the
    rows are kept as a draft to resume later.

    Examples:
        ledgerbook entry batch --date 2024-03-01 --row "Acme Ltd:receivable:500" --row "Bank:debt:500"
        ledgerbook entry batch --resume 7d0c4b1a-...
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    ledger_service = LedgerService(db)
    draft_service = DraftService(db)
    coordinator = DraftAutosaveCoordinator(draft_service, delay=autosave_delay)

    draft = None
    if draft_id is not None:
        try:
            draft = draft_service.require_draft(draft_id)
        except DomainError as e:
            handle_domain_error(ctx, e)

    default_date = draft.date if draft is not None and draft.date else date.today()
    when = _parse_date_or_exit(ctx, entry_date, default=default_date)

    coordinator.open(draft)
    rows = list(draft.entries) if draft is not None else []
    if rows:
        click.echo(f"Resuming draft with {len(rows)} row(s)")

    if row_specs:
        rows.extend(_parse_row_spec(ctx, account_service, ledger_service, spec) for spec in row_specs)
        coordinator.update(when, rows)
    else:
        rows = _prompt_rows(account_service, ledger_service, coordinator, when, rows)

    saved_draft_id = coordinator.cancel_pending()
    try:
        entry_ids = ledger_service.create_batch(when, rows, draft_id=saved_draft_id)
    except DomainError as e:
        coordinator.update(when, rows)
        saved_id = coordinator.close()
        if saved_id is not None:
            click.echo(f"Rows saved as draft {saved_id}", err=True)
        handle_domain_error(ctx, e)
        return

    coordinator.commit_succeeded()
    click.echo(f"Posted {len(entry_ids)} entries dated {format_date(when)}")


@entry_group.command("edit")
@click.argument("entry_id")
@click.option("--date", "entry_date", help="New date")
@click.option("--account", help="New account name or ID")
@click.option("--type", "side", type=click.Choice(SIDE_CHOICES, case_sensitive=False), help="New side")
@click.option("--amount", help="New amount")
@click.option("--statement", help="New memo (empty string clears it)")
@click.pass_context
def edit_entry(
    ctx,
    entry_id: str,
    entry_date: str | None,
    account: str | None,
    side: str | None,
    amount: str | None,
    statement: str | None,
) -> None:
    """Edit an entry. Only the given fields change.

    Examples:
        ledgerbook entry edit 1a2b3c4d --amount 1300
        ledgerbook entry edit 1a2b3c4d --account "Other Customer" --statement ""
    """
    db = ctx.obj["db"]
    ledger_service = LedgerService(db)
    book = LedgerBook(ledger_service)
    entry_id = _resolve_entry_id(ctx, ledger_service, entry_id)

    changes = {}
    if entry_date is not None:
        changes["entry_date"] = _parse_date_or_exit(ctx, entry_date)
    if account is not None:
        changes["account_id"] = resolve_account_or_exit(ctx, AccountService(db), account)
    if side is not None:
        changes["side"] = EntrySide(side.lower())
    if amount is not None:
        changes["amount"] = amount
    if statement is not None:
        changes["statement"] = statement or None

    if not changes:
        click.echo("Nothing to change.")
        return

    try:
        book.update(entry_id, **changes)
        click.echo(f"Updated entry {entry_id[:8]}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@entry_group.command("delete")
@click.argument("entry_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_entry(ctx, entry_id: str, yes: bool) -> None:
    """Delete an entry."""
    db = ctx.obj["db"]
    ledger_service = LedgerService(db)
    book = LedgerBook(ledger_service)
    entry_id = _resolve_entry_id(ctx, ledger_service, entry_id)

    if not yes and not click.confirm(f"Are you sure you want to delete entry {entry_id[:8]}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        book.remove(entry_id)
        click.echo(f"Deleted entry {entry_id[:8]}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@entry_group.command("list")
@period_options
@click.option("--category", "category_code", help="Category code")
@click.option("--account", help="Account name or ID")
@click.option("--group", is_flag=True, help="Group entries by category with subtotals")
@click.pass_context
def list_entries(
    ctx,
    start_date: str | None,
    end_date: str | None,
    category_code: str | None,
    account: str | None,
    group: bool,
    **periods,
):
    """List entries newest first with optional filters.

    An --account that does not belong to --category is ignored.
    """
    db = ctx.obj["db"]
    ledger_service = LedgerService(db)
    account_service = AccountService(db)

    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=pop_period_flags(periods)
    )
    account_id = resolve_account_or_exit(ctx, account_service, account) if account else None

    book = LedgerBook(ledger_service)
    book.refresh()
    entries = book.filtered(category_id=category_code, account_id=account_id, start_date=start, end_date=end)

    if not entries:
        click.echo("No entries found.")
        return

    account_names = {acc.id: acc.name for acc in account_service.list_accounts()}
    click.echo(f"\nFound {len(entries)} entr{'ies' if len(entries) != 1 else 'y'}:")
    click.echo("-" * 110)
    if group:
        for category_group in ledger_service.group_by_category(entries):
            click.echo(f"\n{category_group.category.id} {category_group.category.name}")
            for entry in category_group.entries:
                click.echo(_format_entry(entry, account_names))
            click.echo(
                f"  Subtotal receivable: {format_currency(category_group.total_receivable)} | "
                f"debt: {format_currency(category_group.total_debt)} | "
                f"balance: {format_currency(category_group.balance)}"
            )
    else:
        for entry in entries:
            click.echo(_format_entry(entry, account_names))


@entry_group.command("totals")
@click.pass_context
def ledger_totals(ctx):
    """Show all-time receivable and debt totals of the whole ledger."""
    db = ctx.obj["db"]
    book = LedgerBook(LedgerService(db))
    book.refresh()
    totals = book.totals()

    click.echo(f"Total receivable: {format_currency(totals.total_receivable)} ({totals.receivable_count} entries)")
    click.echo(f"Total debt:       {format_currency(totals.total_debt)} ({totals.debt_count} entries)")
    click.echo(f"Balance:          {format_currency(totals.balance)}")


@entry_group.command("suggest")
@click.argument("text", default="")
@click.option("--limit", type=click.IntRange(min=1), default=10, show_default=True)
@click.pass_context
def suggest_statements(ctx, text: str, limit: int):
    """Suggest previously used statements, most frequent first."""
    db = ctx.obj["db"]
    suggestions = LedgerService(db).suggest(text, limit=limit)
    if not suggestions:
        click.echo("No suggestions.")
        return
    for suggestion in suggestions:
        click.echo(suggestion)


def register_commands(cli):
    """Register entry commands with main CLI."""
    cli.add_command(entry_group, name="entry")
