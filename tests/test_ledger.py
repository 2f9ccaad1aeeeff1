"""Tests for the ledger entry service."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import SQLAlchemyError

from helpers import make_entry, make_row
from ledgerbook.domain.entities import EntrySide, NewEntry
from ledgerbook.domain.errors import (
    EntryTypeMismatchError,
    NotFoundError,
    UnbalancedBatchError,
    ValidationError,
)
from ledgerbook.domain.ledger import LedgerService


def test_create_entry_takes_category_from_account(ledger_service, sample_accounts):
    acme = sample_accounts["acme"]

    entry_id = ledger_service.create_entry(
        date(2024, 1, 5), acme.id, EntrySide.RECEIVABLE, "₺1,250.75", statement="Invoice 42"
    )

    entry = ledger_service.get_entry(entry_id)
    assert entry.category_id == "120"
    assert entry.receivable == Decimal("1250.75")
    assert entry.debt == 0
    assert entry.side == EntrySide.RECEIVABLE
    assert entry.statement == "Invoice 42"


def test_debt_only_category_rejects_receivable(ledger_service, sample_accounts):
    with pytest.raises(EntryTypeMismatchError):
        ledger_service.create_entry(
            date(2024, 1, 5), sample_accounts["parts"].id, EntrySide.RECEIVABLE, "10"
        )

    assert ledger_service.list_entries() == []


def test_invalid_amount_writes_nothing(ledger_service, sample_accounts):
    with pytest.raises(ValidationError):
        ledger_service.create_entry(date(2024, 1, 5), sample_accounts["acme"].id, EntrySide.DEBT, "0")

    assert ledger_service.list_entries() == []


def test_sub_cent_amount_writes_nothing(ledger_service, sample_accounts):
    with pytest.raises(ValidationError, match="more than two decimal places"):
        ledger_service.create_entry(date(2024, 1, 5), sample_accounts["acme"].id, EntrySide.DEBT, "0.004")

    assert ledger_service.list_entries() == []


def test_sub_cent_batch_writes_nothing(ledger_service, sample_accounts):
    rows = ledger_service.fill_categories(
        [
            make_row(account_id=sample_accounts["cash"].id, side=EntrySide.DEBT, amount="10.005", row_id="r1"),
            make_row(account_id=sample_accounts["acme"].id, side=EntrySide.RECEIVABLE, amount="10.004", row_id="r2"),
        ]
    )

    with pytest.raises(ValidationError):
        ledger_service.create_batch(date(2024, 1, 5), rows)

    assert ledger_service.list_entries() == []


def test_amount_in_display_format_is_stored_exactly(ledger_service, sample_accounts):
    entry_id = ledger_service.create_entry(
        date(2024, 1, 5), sample_accounts["acme"].id, EntrySide.RECEIVABLE, "₺1.234,56"
    )

    assert ledger_service.get_entry(entry_id).receivable == Decimal("1234.56")


def test_unknown_account(ledger_service, sample_categories):
    with pytest.raises(NotFoundError):
        ledger_service.create_entry(date(2024, 1, 5), "missing", EntrySide.DEBT, "10")


def test_update_entry_revalidates(ledger_service, sample_accounts):
    entry_id = ledger_service.create_entry(
        date(2024, 1, 5), sample_accounts["acme"].id, EntrySide.RECEIVABLE, "10", statement="Old"
    )

    ledger_service.update_entry(entry_id, amount="12.5", statement=None)
    entry = ledger_service.get_entry(entry_id)
    assert entry.receivable == Decimal("12.5")
    assert entry.statement is None

    # moving a receivable entry to a debt-only account is rejected
    with pytest.raises(EntryTypeMismatchError):
        ledger_service.update_entry(entry_id, account_id=sample_accounts["parts"].id)

    ledger_service.update_entry(
        entry_id, account_id=sample_accounts["parts"].id, side=EntrySide.DEBT
    )
    entry = ledger_service.get_entry(entry_id)
    assert entry.category_id == "320"
    assert entry.debt == Decimal("12.5")
    assert entry.receivable == 0


def test_delete_entry(ledger_service, sample_accounts):
    entry_id = ledger_service.create_entry(
        date(2024, 1, 5), sample_accounts["acme"].id, EntrySide.DEBT, "10"
    )

    ledger_service.delete_entry(entry_id)

    assert ledger_service.get_entry(entry_id) is None
    with pytest.raises(NotFoundError):
        ledger_service.delete_entry(entry_id)


def test_list_entries_newest_first_with_filters(ledger_service, sample_accounts):
    acme = sample_accounts["acme"].id
    cash = sample_accounts["cash"].id
    ledger_service.create_entry(date(2024, 1, 5), acme, EntrySide.DEBT, "1")
    ledger_service.create_entry(date(2024, 2, 5), acme, EntrySide.DEBT, "2")
    ledger_service.create_entry(date(2024, 3, 5), cash, EntrySide.DEBT, "3")

    entries = ledger_service.list_entries()
    assert [e.date for e in entries] == [date(2024, 3, 5), date(2024, 2, 5), date(2024, 1, 5)]

    assert len(ledger_service.list_entries(account_id=acme)) == 2
    assert len(ledger_service.list_entries(category_id="100")) == 1
    window = ledger_service.list_entries(start_date=date(2024, 2, 1), end_date=date(2024, 2, 28))
    assert [e.debt for e in window] == [Decimal("2")]


def test_balanced_batch_posts_all_rows(ledger_service, draft_service, sample_accounts):
    rows = [
        make_row(account_id=sample_accounts["cash"].id, category_id="", side=EntrySide.DEBT, amount="100", row_id="r1"),
        make_row(account_id=sample_accounts["acme"].id, category_id="", side=EntrySide.RECEIVABLE, amount="100", row_id="r2"),
    ]
    draft_id = draft_service.save_draft(None, date(2024, 3, 1), rows)

    entry_ids = ledger_service.create_batch(date(2024, 3, 1), rows, draft_id=draft_id)

    assert len(entry_ids) == 2
    entries = [ledger_service.get_entry(entry_id) for entry_id in entry_ids]
    assert [e.category_id for e in entries] == ["100", "120"]
    assert {e.date for e in entries} == {date(2024, 3, 1)}
    assert draft_service.get_draft(draft_id) is None


def test_unbalanced_batch_writes_nothing(ledger_service, draft_service, sample_accounts):
    rows = [make_row(account_id=sample_accounts["acme"].id, side=EntrySide.RECEIVABLE, amount="50")]
    draft_id = draft_service.save_draft(None, date(2024, 3, 1), rows)

    with pytest.raises(UnbalancedBatchError):
        ledger_service.create_batch(date(2024, 3, 1), rows, draft_id=draft_id)

    assert ledger_service.list_entries() == []
    assert draft_service.get_draft(draft_id) is not None


def test_batch_with_invalid_row_writes_nothing(ledger_service, sample_accounts):
    rows = [
        make_row(account_id=sample_accounts["acme"].id, side=EntrySide.DEBT, amount="10", row_id="r1"),
        make_row(account_id=sample_accounts["parts"].id, side=EntrySide.RECEIVABLE, amount="10", row_id="r2"),
    ]

    with pytest.raises(EntryTypeMismatchError, match="Row 2"):
        ledger_service.create_batch(date(2024, 3, 1), rows)

    assert ledger_service.list_entries() == []


def test_totals():
    entries = [
        make_entry("1", date(2024, 1, 1), receivable="100"),
        make_entry("2", date(2024, 1, 2), debt="30"),
        make_entry("3", date(2024, 1, 3), debt="20"),
    ]

    totals = LedgerService.totals(entries)

    assert totals.total_receivable == Decimal("100")
    assert totals.total_debt == Decimal("50")
    assert totals.balance == Decimal("50")
    assert totals.receivable_count == 1
    assert totals.debt_count == 2


def test_group_by_category(ledger_service, sample_accounts):
    acme = sample_accounts["acme"].id
    cash = sample_accounts["cash"].id
    ledger_service.create_entry(date(2024, 1, 5), acme, EntrySide.RECEIVABLE, "40")
    ledger_service.create_entry(date(2024, 1, 6), acme, EntrySide.DEBT, "10")
    ledger_service.create_entry(date(2024, 1, 7), cash, EntrySide.DEBT, "5")

    groups = ledger_service.group_by_category(ledger_service.list_entries())

    assert [group.category.id for group in groups] == ["100", "120"]
    customers = groups[1]
    assert len(customers.entries) == 2
    assert customers.total_receivable == Decimal("40")
    assert customers.total_debt == Decimal("10")
    assert customers.balance == Decimal("30")


def test_statement_suggestions_by_frequency():
    entries = [
        make_entry("1", date(2024, 1, 1), debt="1", statement="Rent"),
        make_entry("2", date(2024, 1, 2), debt="1", statement="Invoice"),
        make_entry("3", date(2024, 1, 3), debt="1", statement="Invoice"),
        make_entry("4", date(2024, 1, 4), debt="1", statement="  "),
        make_entry("5", date(2024, 1, 5), debt="1", statement=None),
    ]

    assert LedgerService.statement_suggestions(entries) == ["Invoice", "Rent"]


def test_suggest_matches_normalized_text(ledger_service, sample_accounts):
    acme = sample_accounts["acme"].id
    ledger_service.create_entry(date(2024, 1, 5), acme, EntrySide.DEBT, "1", statement="Şubat kirası")
    ledger_service.create_entry(date(2024, 1, 6), acme, EntrySide.DEBT, "1", statement="Invoice 7")

    assert ledger_service.suggest("SUBAT") == ["Şubat kirası"]
    assert ledger_service.suggest("", limit=1) in (["Şubat kirası"], ["Invoice 7"])


def test_failed_entry_write_leaves_session_usable(temp_db, ledger_service, sample_accounts):
    acme = sample_accounts["acme"].id
    good = NewEntry(date(2024, 1, 5), "120", acme, None, Decimal("10"), Decimal("0"))
    orphan = NewEntry(date(2024, 1, 6), "120", "missing-account", None, Decimal("10"), Decimal("0"))

    with pytest.raises(SQLAlchemyError):
        temp_db.create_entries([good, orphan])

    assert ledger_service.list_entries() == []
    ledger_service.create_entry(date(2024, 1, 7), acme, EntrySide.DEBT, "5")
    assert len(ledger_service.list_entries()) == 1
