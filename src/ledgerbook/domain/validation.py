"""Per-entry validation rules."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from ledgerbook.domain.entities import Category, DraftEntry, EntrySide, LedgerEntry, NewEntry
from ledgerbook.domain.errors import (
    EntryTypeMismatchError,
    ValidationError,
    entry_type_not_allowed,
)
from ledgerbook.utils.amount_parser import parse_positive_amount, to_cents


@dataclass(frozen=True)
class EntryCandidate:
    """An entry as typed by the user, before validation."""

    date: Optional[date]
    account_id: str
    category_id: str
    statement: str
    type: EntrySide
    amount: str

    @classmethod
    def from_draft(cls, entry_date: Optional[date], row: DraftEntry) -> "EntryCandidate":
        return cls(
            date=entry_date,
            account_id=row.account_id,
            category_id=row.category_id,
            statement=row.statement,
            type=row.type,
            amount=row.amount,
        )


def check_entry_type(category: Category, side: EntrySide) -> None:
    """Raise EntryTypeMismatchError if ``category`` forbids ``side``."""
    if not category.allows(side):
        raise EntryTypeMismatchError(
            entry_type_not_allowed(category.name, category.entry_type.value, EntrySide(side).value)
        )


def check_entries_allowed(category: Category, entries: Iterable[LedgerEntry]) -> None:
    """Raise EntryTypeMismatchError if ``category`` forbids a side some of
    ``entries`` already record."""
    for side in sorted({entry.side for entry in entries}, key=lambda s: s.value):
        check_entry_type(category, side)


def validate_entry(candidate: EntryCandidate, category: Optional[Category]) -> Decimal:
    """Validate a candidate entry against its account's category.

    Args:
        candidate: Entry as entered
        category: Category of the selected account, None if unknown

    Returns:
        The positive amount with two decimals

    Raises:
        ValidationError: On missing date/account, a non-positive or
            sub-cent amount, or a category that forbids the entry side
    """
    if candidate.date is None:
        raise ValidationError("Date is required")
    if not candidate.account_id:
        raise ValidationError("Account is required")
    if category is None or not candidate.category_id:
        raise ValidationError("Category is required")
    if candidate.category_id != category.id:
        raise ValidationError(
            f"Entry category {candidate.category_id} does not match the account's category {category.id}"
        )

    try:
        amount = to_cents(parse_positive_amount(candidate.amount or ""))
    except ValueError as e:
        raise ValidationError(f"Invalid amount: {e}") from e

    check_entry_type(category, candidate.type)
    return amount


def is_valid_entry(candidate: EntryCandidate, category: Optional[Category]) -> bool:
    """Non-raising form of validate_entry."""
    try:
        validate_entry(candidate, category)
    except ValidationError:
        return False
    return True


def to_new_entry(candidate: EntryCandidate, category: Optional[Category]) -> NewEntry:
    """Validate a candidate and convert it into a writable entry."""
    amount = validate_entry(candidate, category)
    side = EntrySide(candidate.type)
    return NewEntry(
        date=candidate.date,
        category_id=candidate.category_id,
        account_id=candidate.account_id,
        statement=candidate.statement or None,
        receivable=amount if side == EntrySide.RECEIVABLE else Decimal("0"),
        debt=amount if side == EntrySide.DEBT else Decimal("0"),
    )
