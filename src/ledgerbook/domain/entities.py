"""Domain model entities for ledgerbook.

These are pure data classes representing business concepts, independent of
database schema. Services and the CLI only ever see these types; the ORM
models stay behind the database layer.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union


class EntryType(str, Enum):
    """Which entry sides a category's accounts may record."""

    DEBT = "debt"
    RECEIVABLE = "receivable"
    BOTH = "both"


class EntrySide(str, Enum):
    """The leg a single ledger entry records."""

    RECEIVABLE = "receivable"
    DEBT = "debt"


class ReportType(str, Enum):
    """Saved report kinds."""

    ACCOUNT_STATEMENT = "account_statement"
    ACCOUNT_SUMMARY = "account_summary"


class SummaryFilter(str, Enum):
    """Account filter applied to an account summary after aggregation."""

    ALL = "all"
    ONLY_DEBT_BALANCE = "onlyDebtBalance"
    ONLY_RECEIVABLE_BALANCE = "onlyReceivableBalance"
    ONLY_ACTIVE = "onlyActive"


@dataclass(frozen=True)
class Category:
    """Category (main account) domain entity.

    The id is a user-assigned code and never changes after creation.
    """

    id: str
    name: str
    entry_type: EntryType
    advance_period_days: Optional[int]
    created_at: datetime
    updated_at: Optional[datetime] = None

    def allows(self, side: EntrySide) -> bool:
        """Return True if accounts in this category may record ``side``."""
        if self.entry_type == EntryType.BOTH:
            return True
        return self.entry_type.value == EntrySide(side).value


@dataclass(frozen=True)
class Account:
    """Account (sub account) domain entity."""

    id: str
    category_id: str
    name: str
    description: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class LedgerEntry:
    """Ledger entry domain entity.

    Exactly one of ``receivable`` and ``debt`` is non-zero for entries
    created through the validated path.
    """

    id: str
    date: date
    category_id: str
    account_id: str
    statement: Optional[str]
    receivable: Decimal
    debt: Decimal
    created_at: datetime
    updated_at: Optional[datetime] = None

    @property
    def side(self) -> EntrySide:
        return EntrySide.DEBT if self.debt > 0 else EntrySide.RECEIVABLE

    @property
    def amount(self) -> Decimal:
        return self.debt if self.debt > 0 else self.receivable

    @property
    def net(self) -> Decimal:
        return self.debt - self.receivable


@dataclass(frozen=True)
class NewEntry:
    """A validated entry ready to be written."""

    date: date
    category_id: str
    account_id: str
    statement: Optional[str]
    receivable: Decimal
    debt: Decimal


@dataclass(frozen=True)
class DraftEntry:
    """One row of an in-progress multi-entry form.

    ``amount`` is kept as the raw text the user typed.
    """

    id: str
    account_id: str = ""
    category_id: str = ""
    statement: str = ""
    type: EntrySide = EntrySide.RECEIVABLE
    amount: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "account_id": self.account_id,
            "category_id": self.category_id,
            "statement": self.statement,
            "type": EntrySide(self.type).value,
            "amount": self.amount,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DraftEntry":
        return cls(
            id=str(data.get("id", "")),
            account_id=data.get("account_id") or "",
            category_id=data.get("category_id") or "",
            statement=data.get("statement") or "",
            type=EntrySide(data.get("type") or EntrySide.RECEIVABLE.value),
            amount=str(data.get("amount") or ""),
        )


@dataclass(frozen=True)
class LedgerDraft:
    """Saved, not yet committed multi-entry batch."""

    id: str
    date: Optional[date]
    entries: tuple[DraftEntry, ...]
    created_at: datetime
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class AccountStatementParameters:
    """Parameters of an account statement report."""

    start_date: date
    end_date: date
    account_id: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "accountId": self.account_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AccountStatementParameters":
        return cls(
            start_date=date.fromisoformat(data["startDate"]),
            end_date=date.fromisoformat(data["endDate"]),
            account_id=data["accountId"],
        )


@dataclass(frozen=True)
class AccountSummaryParameters:
    """Parameters of an account summary report."""

    start_date: date
    end_date: date
    category_id: Optional[str] = None
    filter_option: SummaryFilter = SummaryFilter.ALL

    def to_dict(self) -> dict[str, Any]:
        return {
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "categoryId": self.category_id,
            "filterOption": SummaryFilter(self.filter_option).value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AccountSummaryParameters":
        return cls(
            start_date=date.fromisoformat(data["startDate"]),
            end_date=date.fromisoformat(data["endDate"]),
            category_id=data.get("categoryId"),
            filter_option=SummaryFilter(data.get("filterOption", SummaryFilter.ALL.value)),
        )


ReportParameters = Union[AccountStatementParameters, AccountSummaryParameters]


def parameters_from_dict(report_type: ReportType, data: dict[str, Any]) -> ReportParameters:
    """Decode stored report parameters for a report type."""
    if ReportType(report_type) == ReportType.ACCOUNT_STATEMENT:
        return AccountStatementParameters.from_dict(data)
    return AccountSummaryParameters.from_dict(data)


@dataclass(frozen=True)
class Report:
    """Saved report definition. Reopening re-runs the aggregation."""

    id: str
    user_id: str
    type: ReportType
    title: str
    parameters: ReportParameters
    created_at: datetime
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class StatementLine:
    """One entry of an account statement with its running balance."""

    id: str
    date: date
    statement: Optional[str]
    debt: Decimal
    receivable: Decimal
    net: Decimal
    running_net: Decimal


@dataclass(frozen=True)
class AccountStatement:
    """Account statement over a date window.

    Positive nets are debt balances, negative nets receivable balances.
    """

    opening_net: Decimal
    entries: tuple[StatementLine, ...]
    total_debt: Decimal
    total_receivable: Decimal
    closing_net: Decimal


@dataclass(frozen=True)
class AccountSummaryRow:
    account: Account
    category: Category
    total_debt: Decimal
    total_receivable: Decimal
    net: Decimal
    entry_count: int


@dataclass(frozen=True)
class AccountSummaryGroup:
    category: Category
    accounts: tuple[AccountSummaryRow, ...]
    total_debt: Decimal
    total_receivable: Decimal
    net: Decimal


@dataclass(frozen=True)
class AccountSummary:
    groups: tuple[AccountSummaryGroup, ...]
    total_debt: Decimal
    total_receivable: Decimal
    total_net: Decimal


@dataclass(frozen=True)
class AccountTotals:
    """All-time receivable and debt sums for one account."""

    account_id: str
    total_receivable: Decimal = Decimal("0")
    total_debt: Decimal = Decimal("0")


@dataclass(frozen=True)
class LedgerTotals:
    total_receivable: Decimal
    total_debt: Decimal
    balance: Decimal
    receivable_count: int
    debt_count: int


@dataclass(frozen=True)
class EntryGroup:
    """Entries of one category with their sums, for grouped listings."""

    category: Category
    entries: tuple[LedgerEntry, ...] = field(default_factory=tuple)
    total_receivable: Decimal = Decimal("0")
    total_debt: Decimal = Decimal("0")

    @property
    def balance(self) -> Decimal:
        return self.total_receivable - self.total_debt
