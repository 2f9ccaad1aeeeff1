"""Date parsing and formatting utilities."""

from datetime import date, datetime, timedelta, UTC
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

# Sentinel window used for "all time" reports
ALL_TIME_START = date(2000, 1, 1)
ALL_TIME_END = date(2099, 12, 31)

ALL_TIME_LABEL = "All Time"

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

PERIODS = ("this-month", "this-year", "this-week", "last-month", "last-year", "last-week", "all-time")


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "15.01.2024", "January 15, 2024")
    and relative ones ("today", "yesterday", "last month", "this week",
    "last friday").

    Args:
        date_str: Date string in various formats
        today: Reference day for relative dates (defaults to today)

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        if period == "year":
            return today.replace(month=1, day=1) - relativedelta(years=1)
        if period == "week":
            return today - timedelta(days=today.weekday() + 7)
        if period in WEEKDAYS:
            days_ago = (today.weekday() - WEEKDAYS.index(period)) % 7 or 7
            return today - timedelta(days=days_ago)
    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return today.replace(day=1)
        if period == "year":
            return today.replace(month=1, day=1)
        if period == "week":
            return today - timedelta(days=today.weekday())

    # Dotted dates are day first (15.01.2024), everything else ISO-ish
    dayfirst = "." in date_str
    try:
        return date_parser.parse(date_str, dayfirst=dayfirst).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Args:
        period: One of PERIODS
        today: Reference day (defaults to today)

    Returns:
        Tuple of (start_date, end_date), both inclusive

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()

    if period == "this-month":
        return today.replace(day=1), today
    if period == "this-year":
        return today.replace(month=1, day=1), today
    if period == "this-week":
        return today - timedelta(days=today.weekday()), today
    if period == "last-month":
        start = (today - relativedelta(months=1)).replace(day=1)
        return start, today.replace(day=1) - timedelta(days=1)
    if period == "last-year":
        start = today.replace(month=1, day=1) - relativedelta(years=1)
        return start, today.replace(month=1, day=1) - timedelta(days=1)
    if period == "last-week":
        start = today - timedelta(days=today.weekday() + 7)
        return start, start + timedelta(days=6)
    if period == "all-time":
        return ALL_TIME_START, ALL_TIME_END

    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")


def is_all_time(start: date, end: date) -> bool:
    """Return True if the window is the all-time sentinel range."""
    return start == ALL_TIME_START and end == ALL_TIME_END


def format_date(value: date) -> str:
    """Format a date as dd.mm.yyyy."""
    return value.strftime("%d.%m.%Y")


def format_date_range(start: date, end: date) -> str:
    """Human label for a report window.

    The all-time sentinel is labelled instead of printing its bounds.
    """
    if is_all_time(start, end):
        return ALL_TIME_LABEL
    if start == end:
        return format_date(start)
    return f"{format_date(start)} - {format_date(end)}"


def format_short_relative_time(when: datetime, now: Optional[datetime] = None) -> str:
    """Short age of a timestamp: "just now", "5 min ago", "2 h ago", "3 days ago"."""
    now = now or datetime.now(UTC)
    if when.tzinfo is None and now.tzinfo is not None:
        when = when.replace(tzinfo=UTC)
    minutes = int((now - when).total_seconds() // 60)

    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes} min ago"
    if minutes < 1440:
        return f"{minutes // 60} h ago"
    days = minutes // 1440
    return f"{days} day{'s' if days != 1 else ''} ago"
