"""Report commands: account statements and account summaries."""

from datetime import date
from pathlib import Path

import click
from ledgerbook.cli.account_resolution import resolve_account_or_exit
from ledgerbook.cli.date_filters import period_options, pop_period_flags, resolve_report_window
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.balance import debt_balance, receivable_balance
from ledgerbook.domain.entities import (
    AccountStatement,
    AccountStatementParameters,
    AccountSummary,
    AccountSummaryParameters,
    Report,
    ReportType,
    SummaryFilter,
)
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.export import default_export_path, write_csv
from ledgerbook.domain.reports import ReportService, generate_report_title
from ledgerbook.utils.amount_parser import format_currency
from ledgerbook.utils.date_parser import format_date

FILTER_CHOICES = [option.value for option in SummaryFilter]


def _money(value) -> str:
    return format_currency(value) if value > 0 else ""


def _balance_columns(net) -> str:
    return f"{_money(debt_balance(net)):>14s} | {_money(receivable_balance(net)):>14s}"


def print_statement(title: str, statement: AccountStatement) -> None:
    """Render an account statement as a table."""
    click.echo(f"\n{title}")
    click.echo("=" * 110)
    click.echo(
        f"{'Date':10s} | {'Statement':30s} | {'Debt':>14s} | {'Receivable':>14s} | "
        f"{'Debt Balance':>14s} | {'Receivable Balance':>14s}"
    )
    click.echo("-" * 110)
    click.echo(f"{'Opening Balance':43s} | {'':>14s} | {'':>14s} | {_balance_columns(statement.opening_net)}")
    for line in statement.entries:
        click.echo(
            f"{format_date(line.date):10s} | {(line.statement or '')[:30]:30s} | "
            f"{_money(line.debt):>14s} | {_money(line.receivable):>14s} | {_balance_columns(line.running_net)}"
        )
    click.echo("-" * 110)
    click.echo(
        f"{'Total':43s} | {format_currency(statement.total_debt):>14s} | "
        f"{format_currency(statement.total_receivable):>14s} | {_balance_columns(statement.closing_net)}"
    )


def print_summary(title: str, summary: AccountSummary) -> None:
    """Render an account summary grouped by category."""
    click.echo(f"\n{title}")
    click.echo("=" * 110)
    if not summary.groups:
        click.echo("No accounts match.")
        return

    for group in summary.groups:
        click.echo(f"\n{group.category.id} {group.category.name}")
        click.echo("-" * 110)
        for row in group.accounts:
            click.echo(
                f"  {row.account.name:30s} | {_money(row.total_debt):>14s} | "
                f"{_money(row.total_receivable):>14s} | {_balance_columns(row.net)}"
            )
        click.echo(
            f"  {'Total':30s} | {format_currency(group.total_debt):>14s} | "
            f"{format_currency(group.total_receivable):>14s} | {_balance_columns(group.net)}"
        )

    click.echo("=" * 110)
    click.echo(
        f"{'Grand Total':32s} | {format_currency(summary.total_debt):>14s} | "
        f"{format_currency(summary.total_receivable):>14s} | {_balance_columns(summary.total_net)}"
    )


def _export(report, path: str, start: date, end: date, account_name: str | None = None) -> Path:
    target = Path(path)
    if target.is_dir():
        target = default_export_path(report, start, end, account_name=account_name, directory=target)
    return write_csv(report, target)


@click.group()
def report_group():
    """Run, save and export reports."""
    pass


@report_group.command("statement")
@click.argument("account", metavar="ACCOUNT")
@period_options
@click.option("--save", is_flag=True, help="Save the report definition")
@click.option("--export", "export_path", type=click.Path(), help="Write CSV to a file or directory")
@click.pass_context
def account_statement(
    ctx,
    account: str,
    start_date: str | None,
    end_date: str | None,
    save: bool,
    export_path: str | None,
    **periods,
):
    """Account statement with opening balance and running balances.

    Without a date range the whole history is shown.

    Examples:
        ledgerbook report statement "Acme Ltd" --this-year
        ledgerbook report statement "Acme Ltd" --start-date 01.01.2024 --end-date 31.03.2024 --save
        ledgerbook report statement "Acme Ltd" --all-time --export ./exports
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    service = ReportService(db)

    account_id = resolve_account_or_exit(ctx, account_service, account)
    account_obj = account_service.get_account(account_id)
    start, end = resolve_report_window(
        ctx, start_date=start_date, end_date=end_date, period_flags=pop_period_flags(periods)
    )
    parameters = AccountStatementParameters(start_date=start, end_date=end, account_id=account_id)

    try:
        statement = service.account_statement(parameters)
        title = generate_report_title(ReportType.ACCOUNT_STATEMENT, parameters, account=account_obj)
        print_statement(title, statement)
        if save:
            report_id = service.create_report(ctx.obj["user"], parameters)
            click.echo(f"\nSaved report (ID: {report_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if export_path:
        written = _export(statement, export_path, start, end, account_name=account_obj.name)
        click.echo(f"Exported to {written}")


@report_group.command("summary")
@period_options
@click.option("--category", "category_code", help="Only accounts of this category code")
@click.option(
    "--filter",
    "filter_option",
    type=click.Choice(FILTER_CHOICES),
    default=SummaryFilter.ALL.value,
    show_default=True,
    help="Which accounts to include after aggregation",
)
@click.option("--save", is_flag=True, help="Save the report definition")
@click.option("--export", "export_path", type=click.Path(), help="Write CSV to a file or directory")
@click.pass_context
def account_summary(
    ctx,
    start_date: str | None,
    end_date: str | None,
    category_code: str | None,
    filter_option: str,
    save: bool,
    export_path: str | None,
    **periods,
):
    """Per-account debt and receivable totals grouped by category.

    Examples:
        ledgerbook report summary --this-month
        ledgerbook report summary --category 120 --filter onlyDebtBalance --save
    """
    db = ctx.obj["db"]
    service = ReportService(db)

    start, end = resolve_report_window(
        ctx, start_date=start_date, end_date=end_date, period_flags=pop_period_flags(periods)
    )
    parameters = AccountSummaryParameters(
        start_date=start,
        end_date=end,
        category_id=category_code,
        filter_option=SummaryFilter(filter_option),
    )

    try:
        summary = service.account_summary(parameters)
        category = db.get_category(category_code) if category_code else None
        title = generate_report_title(ReportType.ACCOUNT_SUMMARY, parameters, category=category)
        print_summary(title, summary)
        if save:
            report_id = service.create_report(ctx.obj["user"], parameters)
            click.echo(f"\nSaved report (ID: {report_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if export_path:
        written = _export(summary, export_path, start, end)
        click.echo(f"Exported to {written}")


@report_group.command("list")
@click.option("--all-users", is_flag=True, help="Include reports saved by other users")
@click.pass_context
def list_reports(ctx, all_users: bool):
    """List saved reports, newest first."""
    db = ctx.obj["db"]
    service = ReportService(db)

    reports = service.list_reports(user_id=None if all_users else ctx.obj["user"])
    if not reports:
        click.echo("No reports found.")
        return

    click.echo("\nReports:")
    click.echo("-" * 100)
    for report in reports:
        created = report.created_at.strftime("%d.%m.%Y %H:%M")
        click.echo(f"{report.id} | {created} | {report.title}")


def _run_saved(ctx, service: ReportService, report_id: str):
    try:
        report = service.require_report(report_id)
        return report, service.run(report)
    except DomainError as e:
        handle_domain_error(ctx, e)


def _statement_account_name(db, report: Report) -> str | None:
    if report.type != ReportType.ACCOUNT_STATEMENT:
        return None
    account = db.get_account(report.parameters.account_id)
    return account.name if account else None


@report_group.command("show")
@click.argument("report_id")
@click.pass_context
def show_report(ctx, report_id: str):
    """Re-run a saved report against the current ledger."""
    db = ctx.obj["db"]
    report, result = _run_saved(ctx, ReportService(db), report_id)

    if report.type == ReportType.ACCOUNT_STATEMENT:
        print_statement(report.title, result)
    else:
        print_summary(report.title, result)


@report_group.command("export")
@click.argument("report_id")
@click.option(
    "--output",
    type=click.Path(),
    default=".",
    show_default=True,
    help="CSV file or directory to write into",
)
@click.pass_context
def export_report(ctx, report_id: str, output: str):
    """Export a saved report as CSV."""
    db = ctx.obj["db"]
    report, result = _run_saved(ctx, ReportService(db), report_id)

    written = _export(
        result,
        output,
        report.parameters.start_date,
        report.parameters.end_date,
        account_name=_statement_account_name(db, report),
    )
    click.echo(f"Exported to {written}")


@report_group.command("delete")
@click.argument("report_id")
@click.pass_context
def delete_report(ctx, report_id: str):
    """Delete a saved report definition."""
    db = ctx.obj["db"]
    service = ReportService(db)

    try:
        service.delete_report(report_id)
        click.echo(f"Deleted report {report_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
