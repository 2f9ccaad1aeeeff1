"""Category domain service."""

from dataclasses import replace
from typing import TYPE_CHECKING, Optional

from ledgerbook.domain.entities import Category, EntryType
from ledgerbook.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    category_not_found,
    duplicate_category_id,
)
from ledgerbook.domain.validation import check_entries_allowed
from ledgerbook.utils.search import filter_by_search

if TYPE_CHECKING:
    from ledgerbook.database.base import Database

_UNSET = object()


def weeks_to_days(weeks: Optional[int]) -> Optional[int]:
    """Advance periods are entered in weeks and stored in days."""
    if weeks is None:
        return None
    if weeks < 0:
        raise ValidationError("Advance period cannot be negative")
    return weeks * 7


def days_to_weeks(days: Optional[int]) -> Optional[int]:
    if days is None:
        return None
    return round(days / 7)


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: "Database"):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(
        self,
        category_id: str,
        name: str,
        entry_type: EntryType = EntryType.BOTH,
        advance_period_weeks: Optional[int] = None,
    ) -> str:
        """Create a category.

        Args:
            category_id: User-assigned category code; cannot be changed later
            name: Category name
            entry_type: Entry sides the category's accounts may record
            advance_period_weeks: Optional advance period in weeks

        Returns:
            Category code

        Raises:
            ValidationError: If code or name is empty
            ConflictError: If the code is already in use
        """
        category_id = (category_id or "").strip()
        name = (name or "").strip()
        if not category_id or not name:
            raise ValidationError("Category code and name are required")

        if self.db.get_category(category_id) is not None:
            raise ConflictError(duplicate_category_id(category_id))

        return self.db.create_category(
            category_id=category_id,
            name=name,
            entry_type=EntryType(entry_type).value,
            advance_period_days=weeks_to_days(advance_period_weeks),
        )

    def get_category(self, category_id: str) -> Optional[Category]:
        """Get category by code.

        Args:
            category_id: Category code

        Returns:
            Category entity or None if not found
        """
        return self.db.get_category(category_id)

    def require_category(self, category_id: str) -> Category:
        """Get category by code or raise NotFoundError."""
        category = self.db.get_category(category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        return category

    def list_categories(self, search: Optional[str] = None) -> list[Category]:
        """List categories ordered by code, optionally matching a search on code or name."""
        categories = self.db.list_categories()
        return filter_by_search(categories, search, key=lambda cat: (cat.id, cat.name))

    def update_category(
        self,
        category_id: str,
        name: Optional[str] = None,
        entry_type: Optional[EntryType] = None,
        advance_period_weeks=_UNSET,
    ) -> None:
        """Update a category. The code itself is immutable.

        Args:
            category_id: Category code
            name: New name, or None to keep
            entry_type: New entry type, or None to keep
            advance_period_weeks: New advance period in weeks; None clears it,
                omit to keep

        Raises:
            NotFoundError: If the category does not exist
            ValidationError: If the new name is empty
            EntryTypeMismatchError: If the new entry type forbids a side
                existing entries record
        """
        category = self.require_category(category_id)

        fields = {}
        if name is not None:
            if not name.strip():
                raise ValidationError("Category name cannot be empty")
            fields["name"] = name.strip()
        if entry_type is not None:
            narrowed = replace(category, entry_type=EntryType(entry_type))
            check_entries_allowed(narrowed, self.db.list_entries(category_id=category_id))
            fields["entry_type"] = EntryType(entry_type).value
        if advance_period_weeks is not _UNSET:
            fields["advance_period_days"] = weeks_to_days(advance_period_weeks)

        if fields:
            self.db.update_category(category_id, **fields)

    def deletion_impact(self, category_id: str) -> tuple[int, int]:
        """Return (account_count, entry_count) removed by deleting the category."""
        self.require_category(category_id)
        return self.db.get_category_dependents(category_id)

    def delete_category(self, category_id: str) -> None:
        """Delete a category, its accounts and all their ledger entries.

        Raises:
            NotFoundError: If the category does not exist
        """
        self.require_category(category_id)
        self.db.delete_category(category_id)
