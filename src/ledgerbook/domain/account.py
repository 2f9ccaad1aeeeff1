"""Account domain service."""

from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from ledgerbook.domain.entities import Account, AccountTotals, Category
from ledgerbook.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    category_not_found,
)
from ledgerbook.domain.validation import check_entries_allowed
from ledgerbook.utils.search import matches_search

if TYPE_CHECKING:
    from ledgerbook.database.base import Database

SORT_COLUMNS = ("receivable", "debt")

_UNSET = object()


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: "Database"):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(self, category_id: str, name: str, description: Optional[str] = None) -> str:
        """Create a new account.

        Args:
            category_id: Code of the owning category
            name: Account name
            description: Optional free text

        Returns:
            Generated account ID

        Raises:
            ValidationError: If name or category is empty
            NotFoundError: If the category does not exist
        """
        name = (name or "").strip()
        if not name or not category_id:
            raise ValidationError("Account name and category are required")
        if self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))

        return self.db.create_account(
            category_id=category_id, name=name, description=description or None
        )

    def get_account(self, account_id: str) -> Optional[Account]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def require_account(self, account_id: str) -> Account:
        """Get account by ID or raise NotFoundError."""
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def get_account_category(self, account_id: str) -> Category:
        """Category an account inherits its entry type constraint from."""
        account = self.require_account(account_id)
        category = self.db.get_category(account.category_id)
        if category is None:
            raise NotFoundError(category_not_found(account.category_id))
        return category

    def list_accounts(
        self, category_id: Optional[str] = None, search: Optional[str] = None
    ) -> list[Account]:
        """List accounts ordered by name.

        Args:
            category_id: Only accounts of this category
            search: Match against account name, description or category name

        Returns:
            List of account entities
        """
        accounts = self.db.list_accounts(category_id=category_id)
        if not search:
            return accounts

        category_names = {cat.id: cat.name for cat in self.db.list_categories()}
        return [
            acc
            for acc in accounts
            if matches_search(search, acc.name, acc.description, category_names.get(acc.category_id))
        ]

    def update_account(
        self,
        account_id: str,
        name: Optional[str] = None,
        description=_UNSET,
        category_id: Optional[str] = None,
    ) -> None:
        """Update an account.

        Args:
            account_id: Account ID
            name: New name, or None to keep
            description: New description; None clears it, omit to keep
            category_id: Move the account (and its entries) to another category

        Raises:
            NotFoundError: If the account or new category does not exist
            ValidationError: If the new name is empty
            EntryTypeMismatchError: If the new category forbids a side the
                account's entries record
        """
        self.require_account(account_id)

        fields = {}
        if name is not None:
            if not name.strip():
                raise ValidationError("Account name cannot be empty")
            fields["name"] = name.strip()
        if description is not _UNSET:
            fields["description"] = description or None
        if category_id is not None:
            category = self.db.get_category(category_id)
            if category is None:
                raise NotFoundError(category_not_found(category_id))
            check_entries_allowed(category, self.db.list_entries(account_id=account_id))
            fields["category_id"] = category_id

        if fields:
            self.db.update_account(account_id, **fields)

    def delete_account(self, account_id: str) -> None:
        """Delete an account and its ledger entries.

        Raises:
            NotFoundError: If the account does not exist
        """
        self.require_account(account_id)
        self.db.delete_account(account_id)

    def entry_count(self, account_id: str) -> int:
        return self.db.get_account_entry_count(account_id)

    def account_totals(self) -> dict[str, AccountTotals]:
        """All-time receivable and debt totals keyed by account ID."""
        return self.db.get_account_totals()

    def sort_by_totals(
        self,
        accounts: list[Account],
        totals: dict[str, AccountTotals],
        column: Optional[str],
        descending: bool = True,
    ) -> list[Account]:
        """Sort accounts by their receivable or debt total.

        Accounts without entries count as zero. With no column the input
        order is kept.
        """
        if column is None:
            return list(accounts)
        if column not in SORT_COLUMNS:
            raise ValidationError(f"Unknown sort column '{column}'. Use one of: {', '.join(SORT_COLUMNS)}")

        def value(account: Account) -> Decimal:
            account_totals = totals.get(account.id, AccountTotals(account_id=account.id))
            if column == "receivable":
                return account_totals.total_receivable
            return account_totals.total_debt

        return sorted(accounts, key=value, reverse=descending)
