"""Saved report domain service."""

from typing import TYPE_CHECKING, Optional, Union

from ledgerbook.domain.entities import (
    Account,
    AccountStatement,
    AccountStatementParameters,
    AccountSummary,
    AccountSummaryParameters,
    Category,
    Report,
    ReportParameters,
    ReportType,
)
from ledgerbook.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    category_not_found,
    report_not_found,
)
from ledgerbook.utils.date_parser import format_date_range

if TYPE_CHECKING:
    from ledgerbook.database.base import Database


STATEMENT_TITLE = "Account Statement"
SUMMARY_TITLE = "Account Summary"


def generate_report_title(
    report_type: ReportType,
    parameters: ReportParameters,
    account: Optional[Account] = None,
    category: Optional[Category] = None,
) -> str:
    """Title shown in report listings.

    Examples:
        Account Statement - Acme Ltd [01.01.2024 - 31.01.2024]
        Account Summary - Suppliers [All Time]
        Account Summary [15.03.2024]
    """
    window = format_date_range(parameters.start_date, parameters.end_date)
    if ReportType(report_type) == ReportType.ACCOUNT_STATEMENT:
        label = STATEMENT_TITLE
        subject = account.name if account else None
    else:
        label = SUMMARY_TITLE
        subject = category.name if category else None

    if subject:
        return f"{label} - {subject} [{window}]"
    return f"{label} [{window}]"


class ReportService:
    """Service for saved report definitions."""

    def __init__(self, db: "Database"):
        """Initialize report service.

        Args:
            db: Database instance
        """
        self.db = db

    def _check_window(self, parameters: ReportParameters) -> None:
        if parameters.start_date is None or parameters.end_date is None:
            raise ValidationError("Report start and end dates are required")
        if parameters.start_date > parameters.end_date:
            raise ValidationError("Report start date must not be after its end date")

    def create_report(self, user_id: str, parameters: ReportParameters) -> str:
        """Validate parameters and save a report definition.

        The report type follows from the parameter type.

        Args:
            user_id: Owner of the report
            parameters: Statement or summary parameters

        Returns:
            Report ID

        Raises:
            ValidationError: If the window is invalid or the owner is missing
            NotFoundError: If the referenced account or category does not exist
        """
        if not user_id:
            raise ValidationError("Report owner is required")
        self._check_window(parameters)

        account = None
        category = None
        if isinstance(parameters, AccountStatementParameters):
            report_type = ReportType.ACCOUNT_STATEMENT
            if not parameters.account_id:
                raise ValidationError("An account is required for an account statement")
            account = self.db.get_account(parameters.account_id)
            if account is None:
                raise NotFoundError(account_not_found(parameters.account_id))
        else:
            report_type = ReportType.ACCOUNT_SUMMARY
            if parameters.category_id:
                category = self.db.get_category(parameters.category_id)
                if category is None:
                    raise NotFoundError(category_not_found(parameters.category_id))

        title = generate_report_title(report_type, parameters, account, category)
        report_id = self.db.create_report(
            user_id=user_id,
            report_type=report_type.value,
            title=title,
            parameters=parameters.to_dict(),
        )
        return report_id

    def get_report(self, report_id: str) -> Optional[Report]:
        return self.db.get_report(report_id)

    def require_report(self, report_id: str) -> Report:
        report = self.db.get_report(report_id)
        if report is None:
            raise NotFoundError(report_not_found(report_id))
        return report

    def list_reports(self, user_id: Optional[str] = None) -> list[Report]:
        """List saved reports, newest first."""
        return self.db.list_reports(user_id=user_id)

    def delete_report(self, report_id: str) -> None:
        """Delete a report definition.

        Raises:
            NotFoundError: If the report does not exist
        """
        self.require_report(report_id)
        self.db.delete_report(report_id)

    def account_statement(self, parameters: AccountStatementParameters) -> AccountStatement:
        """Run an account statement without saving it."""
        self._check_window(parameters)
        if self.db.get_account(parameters.account_id) is None:
            raise NotFoundError(account_not_found(parameters.account_id))
        return self.db.get_account_statement(
            parameters.account_id, parameters.start_date, parameters.end_date
        )

    def account_summary(self, parameters: AccountSummaryParameters) -> AccountSummary:
        """Run an account summary without saving it."""
        self._check_window(parameters)
        if parameters.category_id and self.db.get_category(parameters.category_id) is None:
            raise NotFoundError(category_not_found(parameters.category_id))
        return self.db.get_account_summary(
            parameters.start_date,
            parameters.end_date,
            category_id=parameters.category_id,
            filter_option=parameters.filter_option,
        )

    def run(self, report: Report) -> Union[AccountStatement, AccountSummary]:
        """Re-run a saved report against the current ledger."""
        if report.type == ReportType.ACCOUNT_STATEMENT:
            return self.account_statement(report.parameters)
        return self.account_summary(report.parameters)
