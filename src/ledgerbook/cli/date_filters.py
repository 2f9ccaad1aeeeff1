"""CLI helpers for date range resolution."""

from datetime import date

import click

from ledgerbook.utils.date_parser import ALL_TIME_END, ALL_TIME_START, get_date_range, parse_date

PERIOD_OPTIONS = (
    ("this_month", "--this-month", "Current month"),
    ("this_year", "--this-year", "Current year"),
    ("this_week", "--this-week", "Current week"),
    ("last_month", "--last-month", "Previous month"),
    ("last_year", "--last-year", "Previous year"),
    ("last_week", "--last-week", "Previous week"),
    ("all_time", "--all-time", "Whole ledger history"),
)


def period_options(func):
    """Add --start-date/--end-date and the period flags to a command."""
    for _, flag, help_text in reversed(PERIOD_OPTIONS):
        func = click.option(flag, is_flag=True, help=help_text)(func)
    func = click.option(
        "--end-date", help="End date (YYYY-MM-DD, DD.MM.YYYY or relative like 'today')"
    )(func)
    func = click.option(
        "--start-date", help="Start date (YYYY-MM-DD, DD.MM.YYYY or relative like 'last month')"
    )(func)
    return func


def pop_period_flags(kwargs: dict) -> dict[str, bool]:
    """Remove the period flags from a command's kwargs, keyed by period name."""
    return {name.replace("_", "-"): bool(kwargs.pop(name, False)) for name, _, _ in PERIOD_OPTIONS}


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates."""
    period_count = sum(1 for is_set in period_flags.values() if is_set)

    if period_count > 1:
        click.echo(
            "Error: Only one period option (--this-month, --this-year, --this-week, --last-month, --last-year, --last-week, --all-time) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if period_count > 0 and (start_date or end_date):
        click.echo(
            "Error: Period options (--this-month, --all-time, etc.) cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    start = None
    end = None

    if period_count == 1:
        for period, is_set in period_flags.items():
            if is_set:
                start, end = get_date_range(period)
                break
    else:
        if start_date:
            try:
                start = parse_date(start_date)
            except ValueError as e:
                click.echo(f"Error: Invalid start date: {e}", err=True)
                ctx.exit(1)

        if end_date:
            try:
                end = parse_date(end_date)
            except ValueError as e:
                click.echo(f"Error: Invalid end date: {e}", err=True)
                ctx.exit(1)

        if start is None and end is None and default_range is not None:
            start, end = default_range

    return start, end


def resolve_report_window(ctx, *, start_date, end_date, period_flags) -> tuple[date, date]:
    """Date window of a report; open ends fall back to the all-time bounds."""
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags,
        default_range=(ALL_TIME_START, ALL_TIME_END),
    )
    return start or ALL_TIME_START, end or ALL_TIME_END
