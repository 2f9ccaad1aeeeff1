"""In-memory ledger list with optimistic updates.

The list is changed locally before the database confirms a write. If the
write fails, the list is reloaded from the database and the error is
re-raised to the caller.
"""

import logging
import uuid
from dataclasses import replace
from datetime import date, datetime, UTC
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Optional, TypeVar

from ledgerbook.domain.entities import EntrySide, LedgerEntry, LedgerTotals
from ledgerbook.domain.ledger import LedgerService
from ledgerbook.utils.amount_parser import is_positive_amount, parse_positive_amount

logger = logging.getLogger(__name__)

T = TypeVar("T")

PENDING_ID_PREFIX = "pending-"


class ListStatus(str, Enum):
    CLEAN = "clean"
    PENDING_WRITE = "pending_write"
    RECONCILING = "reconciling"


def _sides(side: EntrySide, amount: Decimal) -> dict[str, Decimal]:
    if EntrySide(side) == EntrySide.DEBT:
        return {"debt": amount, "receivable": Decimal("0")}
    return {"debt": Decimal("0"), "receivable": amount}


class LedgerBook:
    """Entries, filters and totals of one ledger view."""

    def __init__(self, ledger_service: LedgerService):
        self.ledger_service = ledger_service
        self.entries: list[LedgerEntry] = []
        self.status = ListStatus.CLEAN

    def refresh(self) -> list[LedgerEntry]:
        """Reload every entry from the database."""
        self.entries = self.ledger_service.list_entries()
        self.status = ListStatus.CLEAN
        return self.entries

    def _write(
        self,
        apply_locally: Callable[[], None],
        operation: Callable[[], T],
        confirm: Callable[[T], None],
    ) -> T:
        self.status = ListStatus.PENDING_WRITE
        apply_locally()
        try:
            result = operation()
        except Exception:
            self.status = ListStatus.RECONCILING
            logger.info("Write failed, reloading ledger entries")
            self.refresh()
            raise
        confirm(result)
        self.status = ListStatus.CLEAN
        return result

    def _replace_entry(self, entry_id: str, entry: Optional[LedgerEntry]) -> None:
        if entry is None:
            return
        self.entries = [entry if e.id == entry_id else e for e in self.entries]

    def _category_of(self, account_id: Optional[str]) -> Optional[str]:
        account = self.ledger_service.db.get_account(account_id) if account_id else None
        return account.category_id if account is not None else None

    def _provisional_entry(
        self,
        entry_date: Optional[date],
        account_id: str,
        side: EntrySide,
        amount: str,
        statement: Optional[str],
    ) -> Optional[LedgerEntry]:
        """Local stand-in shown until the database returns the stored entry.

        None when the input is too incomplete to show; the write then
        reports what is wrong.
        """
        category_id = self._category_of(account_id)
        if entry_date is None or category_id is None or not is_positive_amount(amount):
            return None
        return LedgerEntry(
            id=f"{PENDING_ID_PREFIX}{uuid.uuid4()}",
            date=entry_date,
            category_id=category_id,
            account_id=account_id,
            statement=statement or None,
            created_at=datetime.now(UTC),
            **_sides(side, parse_positive_amount(amount)),
        )

    def _edited(self, entry: LedgerEntry, changes: dict[str, Any]) -> LedgerEntry:
        fields: dict[str, Any] = {}
        if changes.get("entry_date") is not None:
            fields["date"] = changes["entry_date"]
        if changes.get("account_id") is not None:
            category_id = self._category_of(changes["account_id"])
            if category_id is not None:
                fields["account_id"] = changes["account_id"]
                fields["category_id"] = category_id
        if "statement" in changes:
            fields["statement"] = changes["statement"] or None

        side = changes.get("side") or entry.side
        amount = changes.get("amount")
        value = parse_positive_amount(amount) if is_positive_amount(amount) else entry.amount
        fields.update(_sides(side, value))
        return replace(entry, **fields)

    def add(
        self,
        entry_date: date,
        account_id: str,
        side: EntrySide,
        amount: str,
        statement: Optional[str] = None,
    ) -> str:
        """Show the entry at the top of the list, then create it."""
        provisional = self._provisional_entry(entry_date, account_id, side, amount, statement)

        def apply() -> None:
            if provisional is not None:
                self.entries.insert(0, provisional)

        def confirm(entry_id: str) -> None:
            entry = self.ledger_service.get_entry(entry_id)
            if provisional is not None:
                self._replace_entry(provisional.id, entry)
            elif entry is not None:
                self.entries.insert(0, entry)

        return self._write(
            apply,
            lambda: self.ledger_service.create_entry(entry_date, account_id, side, amount, statement),
            confirm,
        )

    def update(self, entry_id: str, **changes) -> None:
        """Show the edited entry in the list, then save the edit."""

        def apply() -> None:
            self.entries = [self._edited(e, changes) if e.id == entry_id else e for e in self.entries]

        def confirm(_: None) -> None:
            self._replace_entry(entry_id, self.ledger_service.get_entry(entry_id))

        self._write(apply, lambda: self.ledger_service.update_entry(entry_id, **changes), confirm)

    def remove(self, entry_id: str) -> None:
        """Drop the entry from the list, then delete it."""

        def apply() -> None:
            self.entries = [e for e in self.entries if e.id != entry_id]

        self._write(apply, lambda: self.ledger_service.delete_entry(entry_id), lambda _: None)

    def filtered(
        self,
        category_id: Optional[str] = None,
        account_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[LedgerEntry]:
        """Entries matching the filters.

        An account filter that does not belong to the chosen category is
        dropped rather than producing an empty list.
        """
        if category_id and account_id:
            account = self.ledger_service.db.get_account(account_id)
            if account is not None and account.category_id != category_id:
                account_id = None

        result = []
        for entry in self.entries:
            if category_id and entry.category_id != category_id:
                continue
            if account_id and entry.account_id != account_id:
                continue
            if start_date and entry.date < start_date:
                continue
            if end_date and entry.date > end_date:
                continue
            result.append(entry)
        return result

    def totals(self) -> LedgerTotals:
        """All-time totals; filters do not apply."""
        return self.ledger_service.totals(self.entries)
