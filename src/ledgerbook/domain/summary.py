"""Account summary assembly."""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ledgerbook.domain.entities import (
    Account,
    AccountSummary,
    AccountSummaryGroup,
    AccountSummaryRow,
    Category,
    LedgerEntry,
    SummaryFilter,
)

ZERO = Decimal("0")


def keep_row(row: AccountSummaryRow, filter_option: SummaryFilter) -> bool:
    """Apply a summary filter option to one aggregated account row."""
    filter_option = SummaryFilter(filter_option)
    if filter_option == SummaryFilter.ONLY_DEBT_BALANCE:
        return row.net > 0
    if filter_option == SummaryFilter.ONLY_RECEIVABLE_BALANCE:
        return row.net < 0
    if filter_option == SummaryFilter.ONLY_ACTIVE:
        return row.entry_count > 0
    return True


def aggregate_accounts(
    categories: Sequence[Category],
    accounts: Sequence[Account],
    entries: Sequence[LedgerEntry],
    start: date,
    end: date,
    category_id: Optional[str] = None,
) -> list[AccountSummaryRow]:
    """Compute per-account totals over the window [start, end]."""
    category_index = {category.id: category for category in categories}

    totals: dict[str, dict] = defaultdict(
        lambda: {"debt": ZERO, "receivable": ZERO, "count": 0}
    )
    for entry in entries:
        if not start <= entry.date <= end:
            continue
        data = totals[entry.account_id]
        data["debt"] += entry.debt
        data["receivable"] += entry.receivable
        data["count"] += 1

    rows = []
    for account in accounts:
        if category_id is not None and account.category_id != category_id:
            continue
        category = category_index.get(account.category_id)
        if category is None:
            continue
        data = totals.get(account.id, {"debt": ZERO, "receivable": ZERO, "count": 0})
        rows.append(
            AccountSummaryRow(
                account=account,
                category=category,
                total_debt=data["debt"],
                total_receivable=data["receivable"],
                net=data["debt"] - data["receivable"],
                entry_count=data["count"],
            )
        )
    return rows


def group_rows(rows: Sequence[AccountSummaryRow]) -> AccountSummary:
    """Group account rows by category and total them.

    Groups are ordered by category id, accounts within a group by name.
    """
    by_category: dict[str, list[AccountSummaryRow]] = defaultdict(list)
    categories: dict[str, Category] = {}
    for row in rows:
        by_category[row.category.id].append(row)
        categories[row.category.id] = row.category

    groups = []
    for cat_id in sorted(by_category):
        members = sorted(by_category[cat_id], key=lambda r: (r.account.name, r.account.id))
        total_debt = sum((r.total_debt for r in members), ZERO)
        total_receivable = sum((r.total_receivable for r in members), ZERO)
        groups.append(
            AccountSummaryGroup(
                category=categories[cat_id],
                accounts=tuple(members),
                total_debt=total_debt,
                total_receivable=total_receivable,
                net=total_debt - total_receivable,
            )
        )

    total_debt = sum((g.total_debt for g in groups), ZERO)
    total_receivable = sum((g.total_receivable for g in groups), ZERO)
    return AccountSummary(
        groups=tuple(groups),
        total_debt=total_debt,
        total_receivable=total_receivable,
        total_net=total_debt - total_receivable,
    )


def build_account_summary(
    categories: Sequence[Category],
    accounts: Sequence[Account],
    entries: Sequence[LedgerEntry],
    start: date,
    end: date,
    category_id: Optional[str] = None,
    filter_option: SummaryFilter = SummaryFilter.ALL,
) -> AccountSummary:
    """Build the account summary report.

    Accounts are aggregated over the window first, then filtered, then
    grouped; category and grand totals only include retained accounts.

    Args:
        categories: All categories
        accounts: All accounts
        entries: Entries to aggregate (entries outside the window are ignored)
        start: First day of the window (inclusive)
        end: Last day of the window (inclusive)
        category_id: Restrict to one category, or None for all
        filter_option: Account filter

    Returns:
        AccountSummary
    """
    rows = aggregate_accounts(categories, accounts, entries, start, end, category_id)
    retained = [row for row in rows if keep_row(row, filter_option)]
    return group_rows(retained)
