"""Domain layer for ledgerbook application."""

from ledgerbook.domain.ledger import LedgerService
from ledgerbook.domain.category import CategoryService
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.drafts import DraftService
from ledgerbook.domain.reports import ReportService

__all__ = [
    "LedgerService",
    "CategoryService",
    "AccountService",
    "DraftService",
    "ReportService",
]
