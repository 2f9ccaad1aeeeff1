"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from ledgerbook.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    LedgerDraft as ORMLedgerDraft,
    LedgerEntry as ORMLedgerEntry,
    Report as ORMReport,
)
from ledgerbook.database.mappers import (
    account_to_domain,
    category_to_domain,
    ledger_draft_to_domain,
    ledger_entry_to_domain,
    report_to_domain,
)
from ledgerbook.domain.entities import (
    AccountStatementParameters,
    AccountSummaryParameters,
    EntrySide,
    EntryType,
    ReportType,
    SummaryFilter,
)


class TestCategoryMapper:
    """Tests for Category mapper."""

    def test_category_to_domain(self):
        orm_category = ORMCategory(
            id="320",
            name="Suppliers",
            entry_type="debt",
            advance_period_days=28,
            created_at=datetime.now(UTC),
        )
        category = category_to_domain(orm_category)

        assert category.id == "320"
        assert category.entry_type == EntryType.DEBT
        assert category.advance_period_days == 28

    def test_missing_entry_type_defaults_to_both(self):
        orm_category = ORMCategory(id="100", name="Cash", entry_type=None, created_at=datetime.now(UTC))

        assert category_to_domain(orm_category).entry_type == EntryType.BOTH


class TestAccountMapper:
    """Tests for Account mapper."""

    def test_account_to_domain(self):
        orm_account = ORMAccount(
            id="acc-1",
            category_id="120",
            name="Acme Ltd",
            description="Key customer",
            created_at=datetime.now(UTC),
        )
        account = account_to_domain(orm_account)

        assert account.id == "acc-1"
        assert account.category_id == "120"
        assert account.description == "Key customer"


class TestLedgerEntryMapper:
    """Tests for LedgerEntry mapper."""

    def test_amounts_become_decimals(self):
        orm_entry = ORMLedgerEntry(
            id="e-1",
            date=date(2024, 1, 5),
            category_id="120",
            account_id="acc-1",
            statement="Invoice 1",
            receivable=Decimal("100.50"),
            debt=None,
            created_at=datetime.now(UTC),
        )
        entry = ledger_entry_to_domain(orm_entry)

        assert entry.receivable == Decimal("100.50")
        assert entry.debt == Decimal("0")
        assert entry.statement == "Invoice 1"


class TestLedgerDraftMapper:
    """Tests for LedgerDraft mapper."""

    def test_rows_are_parsed_from_json(self):
        orm_draft = ORMLedgerDraft(
            id="d-1",
            date=date(2024, 3, 1),
            entries=[
                {"id": "r1", "account_id": "acc-1", "category_id": "120", "type": "debt", "amount": "5"},
                {"id": "r2"},
            ],
            created_at=datetime.now(UTC),
        )
        draft = ledger_draft_to_domain(orm_draft)

        assert len(draft.entries) == 2
        assert draft.entries[0].type == EntrySide.DEBT
        assert draft.entries[0].amount == "5"
        assert draft.entries[1].type == EntrySide.RECEIVABLE
        assert draft.entries[1].account_id == ""

    def test_missing_rows(self):
        orm_draft = ORMLedgerDraft(id="d-2", date=None, entries=None, created_at=datetime.now(UTC))

        assert ledger_draft_to_domain(orm_draft).entries == ()


class TestReportMapper:
    """Tests for Report mapper."""

    def test_statement_parameters(self):
        orm_report = ORMReport(
            id="r-1",
            user_id="alice",
            type="account_statement",
            title="Account Statement - Acme Ltd [All Time]",
            parameters={"startDate": "2000-01-01", "endDate": "2099-12-31", "accountId": "acc-1"},
            created_at=datetime.now(UTC),
        )
        report = report_to_domain(orm_report)

        assert report.type == ReportType.ACCOUNT_STATEMENT
        assert report.parameters == AccountStatementParameters(
            start_date=date(2000, 1, 1), end_date=date(2099, 12, 31), account_id="acc-1"
        )

    def test_summary_parameters_default_filter(self):
        orm_report = ORMReport(
            id="r-2",
            user_id="alice",
            type="account_summary",
            title="Account Summary [01.01.2024 - 31.01.2024]",
            parameters={"startDate": "2024-01-01", "endDate": "2024-01-31", "categoryId": None},
            created_at=datetime.now(UTC),
        )
        report = report_to_domain(orm_report)

        assert isinstance(report.parameters, AccountSummaryParameters)
        assert report.parameters.filter_option == SummaryFilter.ALL
        assert report.parameters.category_id is None
