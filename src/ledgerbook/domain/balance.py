"""Account balance and running balance computation.

Sign convention: net = debt - receivable. A positive net is a debt
balance, a negative net a receivable balance.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Sequence

from ledgerbook.domain.entities import AccountStatement, LedgerEntry, StatementLine

ZERO = Decimal("0")


def net_of(entries: Iterable[LedgerEntry]) -> Decimal:
    """Sum of debt minus sum of receivable."""
    return sum((entry.debt - entry.receivable for entry in entries), ZERO)


def debt_balance(net: Decimal) -> Decimal:
    """Debt balance column for a signed net (zero when net is not positive)."""
    return net if net > 0 else ZERO


def receivable_balance(net: Decimal) -> Decimal:
    """Receivable balance column for a signed net (zero when net is not negative)."""
    return -net if net < 0 else ZERO


def compute_statement(entries: Sequence[LedgerEntry], start: date, end: date) -> AccountStatement:
    """Build an account statement for the window [start, end].

    Args:
        entries: All entries of one account, in insertion order. Entries
            outside the window are allowed; those before ``start`` make up
            the opening balance.
        start: First day of the window (inclusive)
        end: Last day of the window (inclusive)

    Returns:
        AccountStatement with one line per entry in the window, ordered by
        date and, for equal dates, by input order.
    """
    opening_net = net_of(entry for entry in entries if entry.date < start)

    # sorted() is stable, so same-date entries keep insertion order
    in_window = sorted(
        (entry for entry in entries if start <= entry.date <= end),
        key=lambda entry: entry.date,
    )

    lines = []
    running = opening_net
    total_debt = ZERO
    total_receivable = ZERO
    for entry in in_window:
        running = running + entry.debt - entry.receivable
        total_debt += entry.debt
        total_receivable += entry.receivable
        lines.append(
            StatementLine(
                id=entry.id,
                date=entry.date,
                statement=entry.statement,
                debt=entry.debt,
                receivable=entry.receivable,
                net=entry.debt - entry.receivable,
                running_net=running,
            )
        )

    return AccountStatement(
        opening_net=opening_net,
        entries=tuple(lines),
        total_debt=total_debt,
        total_receivable=total_receivable,
        closing_net=running,
    )
