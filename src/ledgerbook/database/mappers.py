"""Mapper functions to convert SQLAlchemy models into domain entities.

This layer isolates the conversion logic so the domain types stay stable
when the schema changes.
"""

from decimal import Decimal

from ledgerbook.domain import entities as domain
from ledgerbook.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    LedgerDraft as ORMLedgerDraft,
    LedgerEntry as ORMLedgerEntry,
    Report as ORMReport,
)


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        entry_type=domain.EntryType(orm_category.entry_type or domain.EntryType.BOTH.value),
        advance_period_days=orm_category.advance_period_days,
        created_at=orm_category.created_at,
        updated_at=orm_category.updated_at,
    )


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        category_id=orm_account.category_id,
        name=orm_account.name,
        description=orm_account.description,
        created_at=orm_account.created_at,
        updated_at=orm_account.updated_at,
    )


def ledger_entry_to_domain(orm_entry: ORMLedgerEntry) -> domain.LedgerEntry:
    """Convert SQLAlchemy LedgerEntry model to domain LedgerEntry entity."""
    return domain.LedgerEntry(
        id=orm_entry.id,
        date=orm_entry.date,
        category_id=orm_entry.category_id,
        account_id=orm_entry.account_id,
        statement=orm_entry.statement,
        receivable=Decimal(orm_entry.receivable or 0),
        debt=Decimal(orm_entry.debt or 0),
        created_at=orm_entry.created_at,
        updated_at=orm_entry.updated_at,
    )


def ledger_draft_to_domain(orm_draft: ORMLedgerDraft) -> domain.LedgerDraft:
    """Convert SQLAlchemy LedgerDraft model to domain LedgerDraft entity."""
    return domain.LedgerDraft(
        id=orm_draft.id,
        date=orm_draft.date,
        entries=tuple(domain.DraftEntry.from_dict(row) for row in orm_draft.entries or []),
        created_at=orm_draft.created_at,
        updated_at=orm_draft.updated_at,
    )


def report_to_domain(orm_report: ORMReport) -> domain.Report:
    """Convert SQLAlchemy Report model to domain Report entity."""
    report_type = domain.ReportType(orm_report.type)
    return domain.Report(
        id=orm_report.id,
        user_id=orm_report.user_id,
        type=report_type,
        title=orm_report.title,
        parameters=domain.parameters_from_dict(report_type, orm_report.parameters),
        created_at=orm_report.created_at,
        updated_at=orm_report.updated_at,
    )
