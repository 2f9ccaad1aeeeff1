"""Amount parsing and formatting utilities.

Amounts are shown as Turkish lira with ``.`` grouping thousands and ``,``
as the decimal mark. Parsing accepts that form and the ``1,234.56`` form.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re

CENT = Decimal("0.01")


def _normalize_separators(amount_str: str) -> str:
    """Rewrite grouping and decimal marks so Decimal can read the number.

    With both marks present the last one is the decimal mark. A single
    mark that occurs once is a decimal mark; one that repeats groups
    thousands.
    """
    last_comma = amount_str.rfind(",")
    last_dot = amount_str.rfind(".")

    if last_comma >= 0 and last_dot >= 0:
        if last_comma > last_dot:
            return amount_str.replace(".", "").replace(",", ".")
        return amount_str.replace(",", "")

    for mark in (",", "."):
        count = amount_str.count(mark)
        if count > 1:
            return amount_str.replace(mark, "")
        if count == 1:
            return amount_str.replace(mark, ".")
    return amount_str


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45" or "123,45"
    - "₺1.234,56" (as printed by format_currency)
    - "1,234.56"
    - "-123.45"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed or is not finite
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols and spaces
    amount_str = re.sub(r"[₺$€£¥\s]", "", amount_str)
    amount_str = _normalize_separators(amount_str)

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if not amount.is_finite():
        raise ValueError(f"Amount '{amount_str}' is not a finite number")

    return -amount if is_negative else amount


def parse_positive_amount(amount_str: str) -> Decimal:
    """Parse an amount that must be strictly greater than zero.

    Raises:
        ValueError: If the amount cannot be parsed or is not positive
    """
    amount = parse_amount(amount_str)
    if amount <= 0:
        raise ValueError(f"Amount must be greater than zero, got '{amount_str.strip()}'")
    return amount


def to_cents(amount: Decimal) -> Decimal:
    """Return ``amount`` with exactly two decimals.

    Raises:
        ValueError: If the amount has a non-zero digit below one cent
    """
    try:
        cents = amount.quantize(CENT)
    except InvalidOperation:
        raise ValueError(f"Amount {amount} is too large")
    if cents != amount:
        raise ValueError(f"Amount {amount} has more than two decimal places")
    return cents


def is_positive_amount(amount_str: str | None) -> bool:
    """Return True if ``amount_str`` parses to a finite number > 0."""
    if amount_str is None:
        return False
    try:
        parse_positive_amount(amount_str)
    except ValueError:
        return False
    return True


def format_currency(amount: Decimal) -> str:
    """Format an amount as Turkish lira, e.g. ``₺1.234,56``."""
    quantized = Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)
    sign = "-" if quantized < 0 else ""
    grouped = f"{abs(quantized):,.2f}"
    # swap separators: 1,234.56 -> 1.234,56
    localized = grouped.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}₺{localized}"
