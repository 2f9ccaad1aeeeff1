"""Tests for per-entry validation."""

from datetime import date
from decimal import Decimal

import pytest

from helpers import make_category
from ledgerbook.domain.entities import EntrySide, EntryType
from ledgerbook.domain.errors import EntryTypeMismatchError, ValidationError
from ledgerbook.domain.validation import (
    EntryCandidate,
    is_valid_entry,
    to_new_entry,
    validate_entry,
)


def _candidate(**overrides) -> EntryCandidate:
    values = dict(
        date=date(2024, 3, 1),
        account_id="acc-1",
        category_id="120",
        statement="Invoice 42",
        type=EntrySide.RECEIVABLE,
        amount="150.50",
    )
    values.update(overrides)
    return EntryCandidate(**values)


def test_valid_entry_returns_amount():
    assert validate_entry(_candidate(), make_category()) == Decimal("150.50")


def test_missing_date_rejected():
    with pytest.raises(ValidationError, match="Date is required"):
        validate_entry(_candidate(date=None), make_category())


def test_missing_account_rejected():
    with pytest.raises(ValidationError, match="Account is required"):
        validate_entry(_candidate(account_id=""), make_category())


def test_unknown_category_rejected():
    with pytest.raises(ValidationError, match="Category is required"):
        validate_entry(_candidate(), None)


@pytest.mark.parametrize("amount", ["", "0", "-5", "abc", "NaN", "Infinity", "0.004", "10.005"])
def test_non_positive_or_non_numeric_amount_rejected(amount):
    with pytest.raises(ValidationError, match="Invalid amount"):
        validate_entry(_candidate(amount=amount), make_category())


def test_debt_category_rejects_receivable():
    category = make_category(category_id="320", name="Suppliers", entry_type=EntryType.DEBT)
    candidate = _candidate(category_id="320", type=EntrySide.RECEIVABLE)

    with pytest.raises(EntryTypeMismatchError) as excinfo:
        validate_entry(candidate, category)

    assert "Suppliers" in str(excinfo.value)
    assert isinstance(excinfo.value, ValidationError)


def test_receivable_category_accepts_receivable_only():
    category = make_category(entry_type=EntryType.RECEIVABLE)

    assert is_valid_entry(_candidate(type=EntrySide.RECEIVABLE), category)
    assert not is_valid_entry(_candidate(type=EntrySide.DEBT), category)


def test_category_mismatch_rejected():
    with pytest.raises(ValidationError, match="does not match"):
        validate_entry(_candidate(category_id="999"), make_category())


def test_to_new_entry_puts_amount_on_one_side():
    debt_entry = to_new_entry(_candidate(type=EntrySide.DEBT, amount="80"), make_category())
    assert debt_entry.debt == Decimal("80")
    assert debt_entry.receivable == Decimal("0")

    receivable_entry = to_new_entry(_candidate(statement=""), make_category())
    assert receivable_entry.receivable == Decimal("150.50")
    assert receivable_entry.debt == Decimal("0")
    assert receivable_entry.statement is None


def test_is_valid_entry_never_raises():
    assert is_valid_entry(_candidate(), make_category())
    assert not is_valid_entry(_candidate(date=None, amount="x"), None)
