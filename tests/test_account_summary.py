"""Tests for account summary assembly."""

from datetime import date
from decimal import Decimal

import pytest

from helpers import make_account, make_category, make_entry
from ledgerbook.domain.entities import EntryType, SummaryFilter
from ledgerbook.domain.summary import build_account_summary

START = date(2024, 1, 1)
END = date(2024, 12, 31)

CATEGORIES = [
    make_category("120", "Customers"),
    make_category("320", "Suppliers", EntryType.DEBT),
]

ACCOUNTS = [
    make_account("debtor", "120", "Zeta Trading"),
    make_account("creditor", "120", "Acme Ltd"),
    make_account("idle", "120", "Quiet Co"),
    make_account("supplier", "320", "Parts Supplier"),
]

ENTRIES = [
    make_entry("1", date(2024, 2, 1), debt="300", account_id="debtor"),
    make_entry("2", date(2024, 2, 3), receivable="100", account_id="debtor"),
    make_entry("3", date(2024, 3, 1), receivable="80", account_id="creditor"),
    make_entry("4", date(2024, 4, 1), debt="50", account_id="supplier", category_id="320"),
    # outside the window
    make_entry("5", date(2023, 12, 31), debt="1000", account_id="creditor"),
]


def _summary(filter_option=SummaryFilter.ALL, category_id=None):
    return build_account_summary(
        CATEGORIES, ACCOUNTS, ENTRIES, START, END, category_id=category_id, filter_option=filter_option
    )


def _account_ids(summary):
    return {row.account.id for group in summary.groups for row in group.accounts}


def test_groups_ordered_by_category_and_accounts_by_name():
    summary = _summary()

    assert [group.category.id for group in summary.groups] == ["120", "320"]
    assert [row.account.name for row in summary.groups[0].accounts] == [
        "Acme Ltd",
        "Quiet Co",
        "Zeta Trading",
    ]


def test_per_account_totals_cover_window_only():
    rows = {row.account.id: row for group in _summary().groups for row in group.accounts}

    assert rows["debtor"].total_debt == Decimal("300")
    assert rows["debtor"].total_receivable == Decimal("100")
    assert rows["debtor"].net == Decimal("200")
    assert rows["debtor"].entry_count == 2
    assert rows["creditor"].net == Decimal("-80")
    assert rows["creditor"].entry_count == 1
    assert rows["idle"].entry_count == 0


def test_filters_are_applied_after_aggregation():
    assert _account_ids(_summary(SummaryFilter.ONLY_DEBT_BALANCE)) == {"debtor", "supplier"}
    assert _account_ids(_summary(SummaryFilter.ONLY_RECEIVABLE_BALANCE)) == {"creditor"}
    assert _account_ids(_summary(SummaryFilter.ONLY_ACTIVE)) == {"debtor", "creditor", "supplier"}


def test_debt_and_receivable_balance_filters_cover_active_non_zero_accounts():
    debt_ids = _account_ids(_summary(SummaryFilter.ONLY_DEBT_BALANCE))
    receivable_ids = _account_ids(_summary(SummaryFilter.ONLY_RECEIVABLE_BALANCE))
    all_rows = [row for group in _summary().groups for row in group.accounts]

    assert debt_ids | receivable_ids == {row.account.id for row in all_rows if row.net != 0}
    assert not debt_ids & receivable_ids


def test_totals_only_include_retained_accounts():
    summary = _summary(SummaryFilter.ONLY_DEBT_BALANCE)

    customers = summary.groups[0]
    assert customers.total_debt == Decimal("300")
    assert customers.total_receivable == Decimal("100")
    assert customers.net == Decimal("200")
    assert summary.total_debt == Decimal("350")
    assert summary.total_receivable == Decimal("100")
    assert summary.total_net == Decimal("250")


def test_group_without_retained_accounts_is_omitted():
    summary = _summary(SummaryFilter.ONLY_RECEIVABLE_BALANCE)

    assert [group.category.id for group in summary.groups] == ["120"]


def test_category_restriction():
    summary = _summary(category_id="320")

    assert [group.category.id for group in summary.groups] == ["320"]
    assert summary.total_net == Decimal("50")


@pytest.mark.parametrize("filter_option", list(SummaryFilter))
def test_grand_total_equals_sum_of_groups(filter_option):
    summary = _summary(filter_option)

    assert summary.total_debt == sum((g.total_debt for g in summary.groups), Decimal("0"))
    assert summary.total_receivable == sum((g.total_receivable for g in summary.groups), Decimal("0"))
    assert summary.total_net == summary.total_debt - summary.total_receivable
