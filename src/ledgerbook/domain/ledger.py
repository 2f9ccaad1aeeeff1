"""Ledger entry domain service."""

import logging
from collections import Counter
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, Optional, Sequence

from ledgerbook.domain.batch import build_batch
from ledgerbook.domain.entities import (
    DraftEntry,
    EntryGroup,
    EntrySide,
    LedgerEntry,
    LedgerTotals,
)
from ledgerbook.domain.errors import (
    NotFoundError,
    account_not_found,
    category_not_found,
    entry_not_found,
)
from ledgerbook.domain.validation import EntryCandidate, to_new_entry
from ledgerbook.utils.search import normalize_for_search

if TYPE_CHECKING:
    from ledgerbook.database.base import Database

logger = logging.getLogger(__name__)

_UNSET = object()


class LedgerService:
    """Service for recording and querying ledger entries."""

    def __init__(self, db: "Database"):
        """Initialize ledger service.

        Args:
            db: Database instance
        """
        self.db = db

    def _account_and_category(self, account_id: str):
        account = self.db.get_account(account_id) if account_id else None
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        category = self.db.get_category(account.category_id)
        if category is None:
            raise NotFoundError(category_not_found(account.category_id))
        return account, category

    def create_entry(
        self,
        entry_date: Optional[date],
        account_id: str,
        side: EntrySide,
        amount: str,
        statement: Optional[str] = None,
    ) -> str:
        """Record a single entry.

        The entry's category is taken from the account.

        Args:
            entry_date: Entry date
            account_id: Account ID
            side: receivable or debt
            amount: Amount as typed; must be a finite number > 0
            statement: Optional memo

        Returns:
            Entry ID

        Raises:
            NotFoundError: If the account does not exist
            ValidationError: If the entry fails validation
        """
        account, category = self._account_and_category(account_id)
        candidate = EntryCandidate(
            date=entry_date,
            account_id=account.id,
            category_id=category.id,
            statement=statement or "",
            type=EntrySide(side),
            amount=amount,
        )
        new_entry = to_new_entry(candidate, category)
        (entry_id,) = self.db.create_entries([new_entry])
        return entry_id

    def get_entry(self, entry_id: str) -> Optional[LedgerEntry]:
        return self.db.get_entry(entry_id)

    def update_entry(
        self,
        entry_id: str,
        entry_date: Optional[date] = None,
        account_id: Optional[str] = None,
        side: Optional[EntrySide] = None,
        amount: Optional[str] = None,
        statement=_UNSET,
    ) -> None:
        """Edit an entry in place. Unspecified fields keep their value.

        The full entry is validated again, since a new account can bring a
        category with a different entry type constraint.

        Raises:
            NotFoundError: If the entry or account does not exist
            ValidationError: If the edited entry fails validation
        """
        existing = self.db.get_entry(entry_id)
        if existing is None:
            raise NotFoundError(entry_not_found(entry_id))

        if statement is _UNSET:
            statement = existing.statement
        account, category = self._account_and_category(account_id or existing.account_id)
        candidate = EntryCandidate(
            date=entry_date or existing.date,
            account_id=account.id,
            category_id=category.id,
            statement=statement or "",
            type=EntrySide(side) if side is not None else existing.side,
            amount=amount if amount is not None else str(existing.amount),
        )
        self.db.update_entry(entry_id, to_new_entry(candidate, category))

    def delete_entry(self, entry_id: str) -> None:
        """Delete an entry.

        Raises:
            NotFoundError: If the entry does not exist
        """
        if self.db.get_entry(entry_id) is None:
            raise NotFoundError(entry_not_found(entry_id))
        self.db.delete_entry(entry_id)

    def list_entries(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category_id: Optional[str] = None,
        account_id: Optional[str] = None,
    ) -> list[LedgerEntry]:
        """List entries newest first with optional filters."""
        return self.db.list_entries(
            start_date=start_date,
            end_date=end_date,
            category_id=category_id,
            account_id=account_id,
        )

    def fill_categories(self, rows: Sequence[DraftEntry]) -> list[DraftEntry]:
        """Set each row's category from its account, as selecting an account does."""
        filled = []
        for row in rows:
            account = self.db.get_account(row.account_id) if row.account_id else None
            if account is not None and row.category_id != account.category_id:
                row = replace(row, category_id=account.category_id)
            filled.append(row)
        return filled

    def create_batch(
        self,
        entry_date: Optional[date],
        rows: Sequence[DraftEntry],
        draft_id: Optional[str] = None,
    ) -> list[str]:
        """Record a balanced multi-row batch under one date.

        Nothing is written unless every complete row validates and the
        batch balances. All entries are written in one transaction. The
        originating draft, if any, is deleted afterwards.

        Returns:
            IDs of the created entries in row order

        Raises:
            ValidationError: If a row is invalid or there is nothing to post
            UnbalancedBatchError: If receivable and debt totals differ
        """
        rows = self.fill_categories(rows)
        categories = {cat.id: cat for cat in self.db.list_categories()}
        new_entries = build_batch(entry_date, rows, categories)
        entry_ids = self.db.create_entries(new_entries)
        logger.info("Posted batch of %d entries dated %s", len(entry_ids), entry_date)

        if draft_id is not None and self.db.get_draft(draft_id) is not None:
            self.db.delete_draft(draft_id)
        return entry_ids

    @staticmethod
    def totals(entries: Iterable[LedgerEntry]) -> LedgerTotals:
        """Receivable and debt totals; balance is receivable minus debt."""
        total_receivable = Decimal("0")
        total_debt = Decimal("0")
        receivable_count = 0
        debt_count = 0
        for entry in entries:
            total_receivable += entry.receivable
            total_debt += entry.debt
            if entry.receivable > 0:
                receivable_count += 1
            if entry.debt > 0:
                debt_count += 1
        return LedgerTotals(
            total_receivable=total_receivable,
            total_debt=total_debt,
            balance=total_receivable - total_debt,
            receivable_count=receivable_count,
            debt_count=debt_count,
        )

    def group_by_category(self, entries: Iterable[LedgerEntry]) -> list[EntryGroup]:
        """Group entries by category, ordered by category code."""
        categories = {cat.id: cat for cat in self.db.list_categories()}
        grouped: dict[str, list[LedgerEntry]] = {}
        for entry in entries:
            grouped.setdefault(entry.category_id, []).append(entry)

        groups = []
        for category_id in sorted(grouped):
            category = categories.get(category_id)
            if category is None:
                continue
            members = grouped[category_id]
            groups.append(
                EntryGroup(
                    category=category,
                    entries=tuple(members),
                    total_receivable=sum((e.receivable for e in members), Decimal("0")),
                    total_debt=sum((e.debt for e in members), Decimal("0")),
                )
            )
        return groups

    @staticmethod
    def statement_suggestions(entries: Iterable[LedgerEntry]) -> list[str]:
        """Distinct non-empty statements, most frequently used first."""
        counts = Counter(
            entry.statement for entry in entries if entry.statement and entry.statement.strip()
        )
        return [statement for statement, _ in counts.most_common()]

    def suggest(self, text: str, limit: int = 10) -> list[str]:
        """Statements from the whole ledger containing ``text``."""
        needle = normalize_for_search(text)
        suggestions = self.statement_suggestions(self.db.list_entries())
        return [s for s in suggestions if needle in normalize_for_search(s)][:limit]
