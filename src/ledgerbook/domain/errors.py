"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class EntryTypeMismatchError(ValidationError):
    """Entry side not permitted by the account's category."""


class UnbalancedBatchError(ValidationError):
    """Total receivable and total debt of a batch differ."""

    def __init__(self, difference: Decimal):
        self.difference = difference
        super().__init__(unbalanced_batch(difference))


def account_not_found(account_id: str) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def category_not_found(category_id: str) -> str:
    """Return message for missing category."""
    return f"Category {category_id} not found"


def entry_not_found(entry_id: str) -> str:
    """Return message for missing ledger entry."""
    return f"Ledger entry {entry_id} not found"


def draft_not_found(draft_id: str) -> str:
    """Return message for missing draft."""
    return f"Draft {draft_id} not found"


def report_not_found(report_id: str) -> str:
    """Return message for missing report."""
    return f"Report {report_id} not found"


def duplicate_category_id(category_id: str) -> str:
    return f"Category code '{category_id}' already exists"


def entry_type_not_allowed(category_name: str, entry_type: str, side: str) -> str:
    """Return message when a category forbids the requested entry side."""
    return (
        f"Category '{category_name}' only accepts {entry_type} entries, "
        f"cannot record a {side} entry"
    )


def unbalanced_batch(difference: Decimal) -> str:
    return (
        f"Batch is not balanced: receivable and debt totals differ by {difference:.2f}"
    )


def category_delete_summary(category_id: str, account_count: int, entry_count: int) -> str:
    """Return description of what a category delete removes."""
    return (
        f"Category {category_id} has {account_count} "
        f"account{'s' if account_count != 1 else ''} and {entry_count} "
        f"ledger entr{'ies' if entry_count != 1 else 'y'}; all of them will be deleted"
    )
