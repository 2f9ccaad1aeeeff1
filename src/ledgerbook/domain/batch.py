"""Balanced multi-row entry batches.

A batch posts several rows under one date. Rows move value between
accounts, so the batch must net to zero: total receivable equals total
debt. The check runs before anything is written.
"""

from datetime import date
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from ledgerbook.domain.entities import Category, DraftEntry, EntrySide, NewEntry
from ledgerbook.domain.errors import UnbalancedBatchError, ValidationError
from ledgerbook.domain.validation import EntryCandidate, to_new_entry
from ledgerbook.utils.amount_parser import is_positive_amount, parse_positive_amount

BALANCE_TOLERANCE = Decimal("0.001")


def is_complete_row(row: DraftEntry) -> bool:
    """A row counts toward a batch once account, category and a positive amount are set."""
    return bool(row.account_id) and bool(row.category_id) and is_positive_amount(row.amount)


def has_data(rows: Sequence[DraftEntry]) -> bool:
    """True if at least one row has an account selected."""
    return any(row.account_id for row in rows)


def complete_rows(rows: Sequence[DraftEntry]) -> list[DraftEntry]:
    return [row for row in rows if is_complete_row(row)]


def batch_totals(rows: Sequence[DraftEntry]) -> tuple[Decimal, Decimal]:
    """Return (total_receivable, total_debt) over the complete rows."""
    total_receivable = Decimal("0")
    total_debt = Decimal("0")
    for row in complete_rows(rows):
        amount = parse_positive_amount(row.amount)
        if EntrySide(row.type) == EntrySide.RECEIVABLE:
            total_receivable += amount
        else:
            total_debt += amount
    return total_receivable, total_debt


def batch_difference(rows: Sequence[DraftEntry]) -> Decimal:
    total_receivable, total_debt = batch_totals(rows)
    return total_receivable - total_debt


def is_balanced(rows: Sequence[DraftEntry]) -> bool:
    return abs(batch_difference(rows)) <= BALANCE_TOLERANCE


def build_batch(
    entry_date: Optional[date],
    rows: Sequence[DraftEntry],
    categories: Mapping[str, Category],
) -> list[NewEntry]:
    """Validate a batch and produce one entry per complete row.

    Args:
        entry_date: Date shared by every entry of the batch
        rows: Rows in form order; incomplete rows are ignored
        categories: Categories by id, used for the entry type check

    Returns:
        Entries to write, in row order

    Raises:
        ValidationError: No date, no complete row, or a row failing validation
        UnbalancedBatchError: Receivable and debt totals differ by more than
            BALANCE_TOLERANCE
    """
    if entry_date is None:
        raise ValidationError("Date is required")

    rows_to_post = complete_rows(rows)
    if not rows_to_post:
        raise ValidationError("Batch has no complete rows")

    entries = []
    for index, row in enumerate(rows_to_post, start=1):
        candidate = EntryCandidate.from_draft(entry_date, row)
        try:
            entries.append(to_new_entry(candidate, categories.get(row.category_id)))
        except ValidationError as e:
            raise type(e)(f"Row {index}: {e}") from e

    # balance is checked on the amounts that will be stored
    difference = sum((e.receivable - e.debt for e in entries), Decimal("0"))
    if abs(difference) > BALANCE_TOLERANCE:
        raise UnbalancedBatchError(difference)

    return entries
