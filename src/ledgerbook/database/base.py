"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional
from datetime import date

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerbook.domain.entities import (
    Account,
    AccountStatement,
    AccountSummary,
    AccountTotals,
    Category,
    LedgerDraft,
    LedgerEntry,
    NewEntry,
    Report,
    SummaryFilter,
)


class Database(ABC):
    """Abstract persistence interface for ledgerbook.

    Plain CRUD over categories, accounts, ledger entries, drafts and
    reports, plus the aggregation procedures used by reports.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self,
        category_id: str,
        name: str,
        entry_type: str = "both",
        advance_period_days: Optional[int] = None,
    ) -> str:
        """Create a category with a user-assigned code. Returns the code."""
        pass

    @abstractmethod
    def get_category(self, category_id: str) -> Optional[Category]:
        """Get category by code."""
        pass

    @abstractmethod
    def list_categories(self) -> list[Category]:
        """List all categories ordered by code."""
        pass

    @abstractmethod
    def update_category(self, category_id: str, **fields: Any) -> None:
        """Update name, entry_type and/or advance_period_days of a category."""
        pass

    @abstractmethod
    def delete_category(self, category_id: str) -> None:
        """Delete a category together with its accounts and their entries."""
        pass

    @abstractmethod
    def get_category_dependents(self, category_id: str) -> tuple[int, int]:
        """Return (account_count, entry_count) that a category delete removes."""
        pass

    # Account operations
    @abstractmethod
    def create_account(self, category_id: str, name: str, description: Optional[str] = None) -> str:
        """Create a new account. Returns the generated account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: str) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self, category_id: Optional[str] = None) -> list[Account]:
        """List accounts ordered by name, optionally for one category."""
        pass

    @abstractmethod
    def update_account(self, account_id: str, **fields: Any) -> None:
        """Update name, description and/or category_id of an account."""
        pass

    @abstractmethod
    def delete_account(self, account_id: str) -> None:
        """Delete an account together with its entries."""
        pass

    @abstractmethod
    def get_account_entry_count(self, account_id: str) -> int:
        """Count ledger entries of an account."""
        pass

    # Ledger entry operations
    @abstractmethod
    def create_entries(self, entries: list[NewEntry]) -> list[str]:
        """Write entries in one transaction. Returns IDs in input order."""
        pass

    @abstractmethod
    def get_entry(self, entry_id: str) -> Optional[LedgerEntry]:
        """Get ledger entry by ID."""
        pass

    @abstractmethod
    def update_entry(self, entry_id: str, entry: NewEntry) -> None:
        """Replace the fields of an existing entry."""
        pass

    @abstractmethod
    def delete_entry(self, entry_id: str) -> None:
        """Delete a ledger entry."""
        pass

    @abstractmethod
    def list_entries(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category_id: Optional[str] = None,
        account_id: Optional[str] = None,
    ) -> list[LedgerEntry]:
        """List entries, newest date first, with optional filters."""
        pass

    # Draft operations
    @abstractmethod
    def create_draft(self, draft_date: Optional[date], entries: list[dict[str, Any]]) -> str:
        """Create a draft. Returns draft ID."""
        pass

    @abstractmethod
    def update_draft(self, draft_id: str, draft_date: Optional[date], entries: list[dict[str, Any]]) -> None:
        """Overwrite date and rows of a draft."""
        pass

    @abstractmethod
    def get_draft(self, draft_id: str) -> Optional[LedgerDraft]:
        """Get draft by ID."""
        pass

    @abstractmethod
    def list_drafts(self) -> list[LedgerDraft]:
        """List drafts, most recently updated first."""
        pass

    @abstractmethod
    def delete_draft(self, draft_id: str) -> None:
        """Delete a draft."""
        pass

    # Report operations
    @abstractmethod
    def create_report(
        self, user_id: str, report_type: str, title: str, parameters: dict[str, Any]
    ) -> str:
        """Save a report definition. Returns report ID."""
        pass

    @abstractmethod
    def get_report(self, report_id: str) -> Optional[Report]:
        """Get report by ID."""
        pass

    @abstractmethod
    def list_reports(self, user_id: Optional[str] = None) -> list[Report]:
        """List reports, newest first, optionally for one user."""
        pass

    @abstractmethod
    def delete_report(self, report_id: str) -> None:
        """Delete a report definition."""
        pass

    # Aggregation procedures
    @abstractmethod
    def get_account_statement(self, account_id: str, start_date: date, end_date: date) -> AccountStatement:
        """Opening balance, running balance lines and totals for one account."""
        pass

    @abstractmethod
    def get_account_summary(
        self,
        start_date: date,
        end_date: date,
        category_id: Optional[str] = None,
        filter_option: SummaryFilter = SummaryFilter.ALL,
    ) -> AccountSummary:
        """Per-account totals grouped by category over a window."""
        pass

    @abstractmethod
    def get_account_totals(self) -> dict[str, AccountTotals]:
        """All-time receivable and debt sums keyed by account ID."""
        pass
