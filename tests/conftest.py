"""Shared pytest fixtures for ledgerbook tests."""

import os
import tempfile

import pytest

from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.category import CategoryService
from ledgerbook.domain.drafts import DraftService
from ledgerbook.domain.entities import EntryType
from ledgerbook.domain.ledger import LedgerService
from ledgerbook.domain.reports import ReportService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def ledger_service(temp_db):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db)


@pytest.fixture
def draft_service(temp_db):
    """Create a DraftService with a temporary database."""
    return DraftService(temp_db)


@pytest.fixture
def report_service(temp_db):
    """Create a ReportService with a temporary database."""
    return ReportService(temp_db)


@pytest.fixture
def sample_categories(category_service):
    """Cash accepts both sides, Customers both, Suppliers debt only."""
    category_service.create_category("100", "Cash", EntryType.BOTH)
    category_service.create_category("120", "Customers", EntryType.BOTH)
    category_service.create_category("320", "Suppliers", EntryType.DEBT, advance_period_weeks=4)
    return {cat.id: cat for cat in category_service.list_categories()}


@pytest.fixture
def sample_accounts(account_service, sample_categories):
    """One account per sample category, keyed by a short name."""
    ids = {
        "cash": account_service.create_account("100", "Main Till"),
        "acme": account_service.create_account("120", "Acme Ltd", description="Key customer"),
        "parts": account_service.create_account("320", "Parts Supplier"),
    }
    return {key: account_service.get_account(account_id) for key, account_id in ids.items()}


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
