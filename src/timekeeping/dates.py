#!/usr/bin/env python3
"""
Calendar helpers for timekeeping periods and date keys.
"""

from __future__ import annotations

import re
from datetime import date, timedelta
from typing import Iterator, Optional

LOOSE_DATE_PATTERN = re.compile(r"^(?:\d{2}\.\d{2}|\d{4}\.\d{2}\.\d{2})$")
DATE_KEY_PATTERN = re.compile(r"^\s*(\d{4})-(\d{1,2})-(\d{1,2})\s*$")


def lenient_date(year: int, month: int, day: int) -> date:
    """
    Build a date, rolling out-of-range months and days into neighbours.

    Parameters
    ----------
    year : int
        Calendar year.
    month : int
        Month number; 0 and values above 12 roll into adjacent years.
    day : int
        Day number; 0 and values past the month end roll into adjacent months.

    Returns
    -------
    date
        Normalized calendar date.

    Examples
    --------
    >>> lenient_date(2024, 13, 1)
    datetime.date(2025, 1, 1)
    >>> lenient_date(2023, 2, 30)
    datetime.date(2023, 3, 2)
    >>> lenient_date(2024, 3, 0)
    datetime.date(2024, 2, 29)
    """
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    return date(year, month, 1) + timedelta(days=day - 1)


def days_in_month(year: int, month: int) -> int:
    """
    Return the number of days in a month.

    Parameters
    ----------
    year : int
        Calendar year.
    month : int
        Month number (1-12).

    Returns
    -------
    int
        Day count for the month.

    Examples
    --------
    >>> days_in_month(2024, 2)
    29
    >>> days_in_month(2023, 2)
    28
    >>> days_in_month(2023, 12)
    31
    """
    return lenient_date(year, month + 1, 0).day


def iter_month_days(year: int, month: int) -> Iterator[date]:
    start = date(year, month, 1)
    for offset in range(days_in_month(year, month)):
        yield start + timedelta(days=offset)


def is_weekend(day: date) -> bool:
    """
    Return True for Saturdays and Sundays.

    Examples
    --------
    >>> is_weekend(date(2024, 1, 6))
    True
    >>> is_weekend(date(2024, 1, 8))
    False
    """
    return day.weekday() >= 5


def weekdays_in_month(
    year: int,
    month: int,
    through_day: Optional[int] = None,
) -> int:
    """
    Count Monday-Friday days in a month.

    Parameters
    ----------
    year : int
        Calendar year.
    month : int
        Month number (1-12).
    through_day : Optional[int], optional
        Count only days up to and including this day of the month.

    Returns
    -------
    int
        Number of weekdays.

    Examples
    --------
    >>> weekdays_in_month(2024, 1)
    23
    >>> weekdays_in_month(2024, 1, through_day=7)
    5
    """
    count = 0
    for day in iter_month_days(year, month):
        if through_day is not None and day.day > through_day:
            break
        if not is_weekend(day):
            count += 1
    return count


def weekdays_between(start: date, end: date) -> int:
    """
    Count Monday-Friday days in an inclusive date range.

    Examples
    --------
    >>> weekdays_between(date(2024, 1, 1), date(2024, 1, 14))
    10
    >>> weekdays_between(date(2024, 1, 2), date(2024, 1, 1))
    0
    """
    count = 0
    cursor = start
    while cursor <= end:
        if not is_weekend(cursor):
            count += 1
        cursor += timedelta(days=1)
    return count


def parse_loose_date(text: str, today: Optional[date] = None) -> Optional[date]:
    """
    Parse ``MM.DD`` or ``YYYY.MM.DD`` user input.

    Parameters
    ----------
    text : str
        User-provided date.
    today : Optional[date], optional
        Reference date supplying the year for ``MM.DD`` input.

    Returns
    -------
    Optional[date]
        Parsed date, or None when the input does not match either form or
        falls outside the supported calendar range. Month and day values are
        not range-checked and roll over.

    Examples
    --------
    >>> parse_loose_date("2023.03.15")
    datetime.date(2023, 3, 15)
    >>> parse_loose_date("03.15", today=date(2024, 6, 1))
    datetime.date(2024, 3, 15)
    >>> parse_loose_date("3.15") is None
    True
    >>> parse_loose_date("0000.01.01") is None
    True
    """
    value = (text or "").strip()
    if not LOOSE_DATE_PATTERN.match(value):
        return None
    parts = [int(part) for part in value.split(".")]
    if len(parts) == 2:
        year = (today or date.today()).year
        month, day = parts
    else:
        year, month, day = parts
    try:
        return lenient_date(year, month, day)
    except (ValueError, OverflowError):
        return None


def format_date_key(day: date) -> str:
    """
    Format a date as a ``YYYY-MM-DD`` ledger key.

    Examples
    --------
    >>> format_date_key(date(2024, 3, 5))
    '2024-03-05'
    """
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def parse_date_key(key: str) -> Optional[date]:
    """
    Parse a ledger date key, tolerating unpadded month and day values.

    Returns
    -------
    Optional[date]
        Parsed date, or None when the key is not a valid calendar date.

    Examples
    --------
    >>> parse_date_key("2024-01-05")
    datetime.date(2024, 1, 5)
    >>> parse_date_key("2024-1-5")
    datetime.date(2024, 1, 5)
    >>> parse_date_key("2024-02-30") is None
    True
    """
    match = DATE_KEY_PATTERN.match(str(key))
    if not match:
        return None
    year, month, day = (int(group) for group in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None
