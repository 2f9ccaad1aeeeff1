"""CSV export of account statements and account summaries.

Files are UTF-8 with a byte order mark so spreadsheet applications pick the
encoding up, comma delimited, one record per ``\\n`` terminated line.
"""

import csv
import io
import logging
import re
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Optional, Union

from ledgerbook.domain.balance import debt_balance, receivable_balance
from ledgerbook.domain.entities import AccountStatement, AccountSummary
from ledgerbook.utils.amount_parser import format_currency
from ledgerbook.utils.date_parser import format_date, format_date_range

logger = logging.getLogger(__name__)

BOM = "﻿"

STATEMENT_HEADERS = ["Date", "Statement", "Debt", "Receivable", "Debt Balance", "Receivable Balance"]
SUMMARY_HEADERS = ["Category", "Account", "Debt", "Receivable", "Debt Balance", "Receivable Balance"]


def _amount(value: Decimal) -> str:
    """Currency text for a positive amount, blank otherwise."""
    return format_currency(value) if value > 0 else ""


def _balance_columns(net: Decimal) -> list[str]:
    return [_amount(debt_balance(net)), _amount(receivable_balance(net))]


def _render(rows: list[list[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=",", lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerows(rows)
    return BOM + buffer.getvalue()


def statement_rows(statement: AccountStatement) -> list[list[str]]:
    """Header, opening balance, one row per entry and the total row."""
    rows = [list(STATEMENT_HEADERS)]
    rows.append(["Opening Balance", "", "", ""] + _balance_columns(statement.opening_net))
    for line in statement.entries:
        rows.append(
            [
                format_date(line.date),
                line.statement or "",
                _amount(line.debt),
                _amount(line.receivable),
            ]
            + _balance_columns(line.running_net)
        )
    rows.append(
        [
            "Total",
            "",
            format_currency(statement.total_debt),
            format_currency(statement.total_receivable),
        ]
        + _balance_columns(statement.closing_net)
    )
    return rows


def summary_rows(summary: AccountSummary) -> list[list[str]]:
    """Header, account rows with a total and a blank row per category, grand total."""
    rows = [list(SUMMARY_HEADERS)]
    for group in summary.groups:
        for row in group.accounts:
            rows.append(
                [
                    group.category.name,
                    row.account.name,
                    _amount(row.total_debt),
                    _amount(row.total_receivable),
                ]
                + _balance_columns(row.net)
            )
        rows.append(
            [
                group.category.name,
                "Total",
                format_currency(group.total_debt),
                format_currency(group.total_receivable),
            ]
            + _balance_columns(group.net)
        )
        rows.append([])
    rows.append(
        [
            "Grand Total",
            "",
            format_currency(summary.total_debt),
            format_currency(summary.total_receivable),
        ]
        + _balance_columns(summary.total_net)
    )
    return rows


def statement_to_csv(statement: AccountStatement) -> str:
    return _render(statement_rows(statement))


def summary_to_csv(summary: AccountSummary) -> str:
    return _render(summary_rows(summary))


def _safe_filename_part(text: str) -> str:
    # keep letters (including non-ASCII), digits, dots and dashes
    cleaned = re.sub(r"[^\w.\-]+", "_", text.strip())
    return cleaned.strip("_") or "export"


def statement_filename(account_name: str, start: date, end: date) -> str:
    """``<account>_<range>.csv``"""
    window = format_date_range(start, end)
    return f"{_safe_filename_part(account_name)}_{_safe_filename_part(window)}.csv"


def summary_filename(start: date, end: date) -> str:
    """``Account_Summary_<range>.csv``"""
    return f"Account_Summary_{_safe_filename_part(format_date_range(start, end))}.csv"


def write_csv(
    report: Union[AccountStatement, AccountSummary],
    path: Union[str, Path],
) -> Path:
    """Write a statement or summary to ``path``.

    Returns:
        Path written
    """
    if isinstance(report, AccountStatement):
        content = statement_to_csv(report)
    else:
        content = summary_to_csv(report)

    path = Path(path)
    # BOM is already part of the content; newline="" keeps "\n" line endings
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)
    logger.info("Exported report to %s", path)
    return path


def default_export_path(
    report: Union[AccountStatement, AccountSummary],
    start: date,
    end: date,
    account_name: Optional[str] = None,
    directory: Union[str, Path] = ".",
) -> Path:
    """File name for a report export inside ``directory``."""
    if isinstance(report, AccountStatement):
        name = statement_filename(account_name or "Account", start, end)
    else:
        name = summary_filename(start, end)
    return Path(directory) / name
