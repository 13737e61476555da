"""Date parsing utilities for CLI filters."""

from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PERIODS = ("today", "this-week", "this-month", "last-week", "last-month", "last-30-days")


def parse_date(date_str: str) -> date:
    """Parse an absolute or relative date string.

    Supports "today", "yesterday", "N days ago", "last week", "last month",
    "this month" and anything dateutil understands ("2025-01-15",
    "15 Jan 2025", ...).

    Raises:
        ValueError: If the string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    if date_str == "today":
        return today
    if date_str == "yesterday":
        return today - timedelta(days=1)
    if date_str.endswith(" days ago"):
        count = date_str[: -len(" days ago")].strip()
        if count.isdigit():
            return today - timedelta(days=int(count))
    if date_str == "last week":
        return today - timedelta(days=today.weekday() + 7)
    if date_str == "last month":
        return (today - relativedelta(months=1)).replace(day=1)
    if date_str == "this week":
        return today - timedelta(days=today.weekday())
    if date_str == "this month":
        return today.replace(day=1)

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str) -> tuple[date, date]:
    """Return inclusive (start, end) dates for a named period.

    Raises:
        ValueError: If the period is not one of PERIODS
    """
    period = period.strip().lower()
    today = date.today()

    if period == "today":
        return today, today
    if period == "this-week":
        return today - timedelta(days=today.weekday()), today
    if period == "this-month":
        return today.replace(day=1), today
    if period == "last-week":
        start = today - timedelta(days=today.weekday() + 7)
        return start, start + timedelta(days=6)
    if period == "last-month":
        start = (today - relativedelta(months=1)).replace(day=1)
        return start, today.replace(day=1) - timedelta(days=1)
    if period == "last-30-days":
        return today - timedelta(days=30), today

    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
