"""Entity builders for pure-function tests."""

from datetime import date, datetime, UTC
from decimal import Decimal

from ledgerbook.domain.entities import (
    Account,
    Category,
    DraftEntry,
    EntrySide,
    EntryType,
    LedgerEntry,
)


def make_category(category_id="120", name="Customers", entry_type=EntryType.BOTH) -> Category:
    return Category(
        id=category_id,
        name=name,
        entry_type=entry_type,
        advance_period_days=None,
        created_at=datetime.now(UTC),
    )


def make_account(account_id="acc-1", category_id="120", name="Acme Ltd") -> Account:
    return Account(
        id=account_id,
        category_id=category_id,
        name=name,
        description=None,
        created_at=datetime.now(UTC),
    )


def make_entry(
    entry_id: str,
    entry_date: date,
    debt="0",
    receivable="0",
    account_id="acc-1",
    category_id="120",
    statement=None,
) -> LedgerEntry:
    return LedgerEntry(
        id=entry_id,
        date=entry_date,
        category_id=category_id,
        account_id=account_id,
        statement=statement,
        receivable=Decimal(receivable),
        debt=Decimal(debt),
        created_at=datetime.now(UTC),
    )


def make_row(
    account_id="acc-1",
    category_id="120",
    side=EntrySide.RECEIVABLE,
    amount="100",
    row_id="row-1",
    statement="",
) -> DraftEntry:
    return DraftEntry(
        id=row_id,
        account_id=account_id,
        category_id=category_id,
        statement=statement,
        type=side,
        amount=amount,
    )
