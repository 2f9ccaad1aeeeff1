"""Tests for the optimistic in-memory ledger list."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerbook.domain.entities import EntrySide
from ledgerbook.domain.errors import EntryTypeMismatchError, NotFoundError, ValidationError
from ledgerbook.domain.ledger import LedgerService
from ledgerbook.domain.ledger_state import PENDING_ID_PREFIX, LedgerBook, ListStatus


@pytest.fixture
def book(ledger_service):
    book = LedgerBook(ledger_service)
    book.refresh()
    return book


def test_add_puts_entry_on_top(book, sample_accounts):
    acme = sample_accounts["acme"].id
    first = book.add(date(2024, 1, 5), acme, EntrySide.RECEIVABLE, "10")
    second = book.add(date(2024, 1, 1), acme, EntrySide.DEBT, "4")

    assert [e.id for e in book.entries] == [second, first]
    assert book.status == ListStatus.CLEAN


def test_update_replaces_entry(book, sample_accounts):
    entry_id = book.add(date(2024, 1, 5), sample_accounts["acme"].id, EntrySide.RECEIVABLE, "10")

    book.update(entry_id, amount="15")

    (entry,) = book.entries
    assert entry.receivable == Decimal("15")


def test_remove_drops_entry(book, sample_accounts):
    entry_id = book.add(date(2024, 1, 5), sample_accounts["acme"].id, EntrySide.RECEIVABLE, "10")

    book.remove(entry_id)

    assert book.entries == []


def test_failed_write_reloads_and_reraises(book, ledger_service, sample_accounts):
    # written behind the list's back, so the local list is stale
    ledger_service.create_entry(date(2024, 1, 5), sample_accounts["cash"].id, EntrySide.DEBT, "7")
    assert book.entries == []

    with pytest.raises(EntryTypeMismatchError):
        book.add(date(2024, 1, 6), sample_accounts["parts"].id, EntrySide.RECEIVABLE, "3")

    assert book.status == ListStatus.CLEAN
    assert len(book.entries) == 1
    assert book.entries[0].debt == Decimal("7")


def test_failed_remove_keeps_list_consistent(book):
    with pytest.raises(NotFoundError):
        book.remove("does-not-exist")

    assert book.status == ListStatus.CLEAN
    assert book.entries == []


def test_filters(book, sample_accounts):
    acme = sample_accounts["acme"].id
    cash = sample_accounts["cash"].id
    book.add(date(2024, 1, 5), acme, EntrySide.RECEIVABLE, "10")
    book.add(date(2024, 2, 5), acme, EntrySide.DEBT, "3")
    book.add(date(2024, 2, 6), cash, EntrySide.DEBT, "8")

    assert len(book.filtered(category_id="120")) == 2
    assert len(book.filtered(account_id=cash)) == 1
    assert len(book.filtered(start_date=date(2024, 2, 1), end_date=date(2024, 2, 5))) == 1
    # an account outside the chosen category is ignored, not applied
    assert len(book.filtered(category_id="120", account_id=cash)) == 2


def test_totals_ignore_filters(book, sample_accounts):
    acme = sample_accounts["acme"].id
    book.add(date(2024, 1, 5), acme, EntrySide.RECEIVABLE, "10")
    book.add(date(2024, 2, 5), acme, EntrySide.DEBT, "3")
    book.filtered(start_date=date(2024, 2, 1))

    totals = book.totals()

    assert totals.total_receivable == Decimal("10")
    assert totals.total_debt == Decimal("3")
    assert totals.balance == Decimal("7")


class ObservedLedgerService(LedgerService):
    """Records what the list looked like while each write was running."""

    def __init__(self, db):
        super().__init__(db)
        self.book = None
        self.seen = []

    def _observe(self):
        self.seen.append((self.book.status, list(self.book.entries)))

    def create_entry(self, *args, **kwargs):
        self._observe()
        return super().create_entry(*args, **kwargs)

    def update_entry(self, *args, **kwargs):
        self._observe()
        return super().update_entry(*args, **kwargs)

    def delete_entry(self, *args, **kwargs):
        self._observe()
        return super().delete_entry(*args, **kwargs)


@pytest.fixture
def observed(temp_db, sample_accounts):
    service = ObservedLedgerService(temp_db)
    service.book = LedgerBook(service)
    service.book.refresh()
    return service


def test_add_shows_entry_before_write_completes(observed, sample_accounts):
    entry_id = observed.book.add(date(2024, 1, 5), sample_accounts["acme"].id, EntrySide.RECEIVABLE, "10")

    ((status, during),) = observed.seen
    assert status == ListStatus.PENDING_WRITE
    assert len(during) == 1
    assert during[0].id.startswith(PENDING_ID_PREFIX)
    assert during[0].receivable == Decimal("10")
    assert during[0].category_id == "120"

    assert [e.id for e in observed.book.entries] == [entry_id]
    assert observed.book.status == ListStatus.CLEAN


def test_failed_add_removes_provisional_entry(observed, sample_accounts):
    with pytest.raises(EntryTypeMismatchError):
        observed.book.add(date(2024, 1, 5), sample_accounts["parts"].id, EntrySide.RECEIVABLE, "3")

    ((status, during),) = observed.seen
    assert status == ListStatus.PENDING_WRITE
    assert len(during) == 1
    assert observed.book.entries == []
    assert observed.book.status == ListStatus.CLEAN


def test_update_and_remove_apply_before_write(observed, sample_accounts):
    entry_id = observed.book.add(date(2024, 1, 5), sample_accounts["acme"].id, EntrySide.RECEIVABLE, "10")

    observed.book.update(entry_id, amount="15", side=EntrySide.DEBT)
    _, during_update = observed.seen[1]
    assert during_update[0].debt == Decimal("15")
    assert during_update[0].receivable == Decimal("0")

    observed.book.remove(entry_id)
    _, during_remove = observed.seen[2]
    assert during_remove == []
    assert observed.book.entries == []


def test_failed_update_restores_stored_entry(observed, sample_accounts):
    entry_id = observed.book.add(date(2024, 1, 5), sample_accounts["acme"].id, EntrySide.RECEIVABLE, "10")

    with pytest.raises(ValidationError):
        observed.book.update(entry_id, amount="0.004")

    (entry,) = observed.book.entries
    assert entry.receivable == Decimal("10.00")
    assert observed.book.status == ListStatus.CLEAN
