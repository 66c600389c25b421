#!/usr/bin/env python3
"""
Period filtering and hour totals over a time log.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .dates import format_date_key, iter_month_days, parse_date_key
from .models import TimeLog


@dataclass(frozen=True)
class ReportPeriod:
    """
    A calendar month, or the whole history when both fields are None.

    Attributes
    ----------
    year : Optional[int]
        Calendar year.
    month : Optional[int]
        Month number (1-12).

    Examples
    --------
    >>> ReportPeriod(2024, 1).label()
    'January 2024'
    >>> ReportPeriod.all_time().label()
    'Complete History'
    >>> ReportPeriod(2024, 1).contains(date(2024, 1, 31))
    True
    """

    year: Optional[int] = None
    month: Optional[int] = None

    @classmethod
    def all_time(cls) -> "ReportPeriod":
        return cls()

    @property
    def is_all_time(self) -> bool:
        return self.year is None or self.month is None

    def contains(self, day: date) -> bool:
        if self.is_all_time:
            return True
        return day.year == self.year and day.month == self.month

    def label(self) -> str:
        if self.is_all_time:
            return "Complete History"
        return f"{date(self.year, self.month, 1):%B} {self.year}"


@dataclass(frozen=True)
class DayTotal:
    """
    Hours logged on one calendar day across all projects.

    Attributes
    ----------
    day : date
        Calendar day.
    hours : float
        Total hours for the day.
    projects : Tuple[Tuple[str, float], ...]
        Projects with non-zero hours that day, in first-seen order.
    """

    day: date
    hours: float
    projects: Tuple[Tuple[str, float], ...] = ()

    @property
    def date_key(self) -> str:
        return format_date_key(self.day)


def filter_by_period(log: Optional[TimeLog], period: ReportPeriod) -> TimeLog:
    """
    Return a new log with only the entries inside the period.

    Parameters
    ----------
    log : Optional[TimeLog]
        Source log; None is treated as empty.
    period : ReportPeriod
        Month or whole-history period.

    Returns
    -------
    TimeLog
        Filtered copy. Projects without remaining entries are omitted.

    Examples
    --------
    >>> log = TimeLog.from_document({"A": {"2024-01-05": 2, "2024-02-01": 3}, "B": {"2024-02-02": 1}})
    >>> filter_by_period(log, ReportPeriod(2024, 1)).to_document()
    {'A': {'2024-01-05': 2.0}}
    """
    filtered = TimeLog()
    if not log:
        return filtered
    for project, ledger in log.items():
        kept: Dict[str, float] = {}
        for date_key, hours in ledger.items():
            if period.is_all_time:
                kept[date_key] = hours
                continue
            day = parse_date_key(date_key)
            if day is not None and period.contains(day):
                kept[date_key] = hours
        if kept:
            filtered[project] = kept
    return filtered


def project_total(ledger: Mapping[str, float]) -> float:
    """
    Sum the hours in a ledger.

    Examples
    --------
    >>> project_total({"2024-01-01": 4, "2024-01-02": 8})
    12
    >>> project_total({})
    0
    """
    return sum(ledger.values())


def period_total(log: Optional[TimeLog]) -> float:
    if not log:
        return 0
    return sum(project_total(ledger) for ledger in log.values())


def date_span(log: Optional[TimeLog]) -> Optional[Tuple[date, date]]:
    """
    Return the earliest and latest logged dates.

    Examples
    --------
    >>> date_span(TimeLog.from_document({"A": {"2024-01-05": 1}, "B": {"2023-12-30": 2}}))
    (datetime.date(2023, 12, 30), datetime.date(2024, 1, 5))
    >>> date_span(TimeLog()) is None
    True
    """
    days = [
        day
        for ledger in (log or {}).values()
        for day in (parse_date_key(key) for key in ledger)
        if day is not None
    ]
    if not days:
        return None
    return min(days), max(days)


def _period_days(log: Optional[TimeLog], period: ReportPeriod) -> Iterable[date]:
    if not period.is_all_time:
        return iter_month_days(period.year, period.month)
    span = date_span(log)
    if span is None:
        return []
    start, end = span
    return (start + timedelta(days=offset) for offset in range((end - start).days + 1))


def daily_totals(log: Optional[TimeLog], period: ReportPeriod) -> List[DayTotal]:
    """
    Total hours per calendar day of the period, including empty days.

    Parameters
    ----------
    log : Optional[TimeLog]
        Time log; None is treated as empty.
    period : ReportPeriod
        Month to cover, or the whole logged date range.

    Returns
    -------
    List[DayTotal]
        One row per day in calendar order.
    """
    by_day: Dict[date, List[Tuple[str, float]]] = {}
    for project, ledger in (log or {}).items():
        for date_key, hours in ledger.items():
            day = parse_date_key(date_key)
            if day is None or not period.contains(day):
                continue
            by_day.setdefault(day, []).append((project, hours))

    totals: List[DayTotal] = []
    for day in _period_days(log, period):
        entries = by_day.get(day, [])
        per_project: Dict[str, float] = {}
        for project, hours in entries:
            per_project[project] = per_project.get(project, 0.0) + hours
        totals.append(
            DayTotal(
                day=day,
                hours=sum(hours for _, hours in entries),
                projects=tuple(
                    (project, hours) for project, hours in per_project.items() if hours
                ),
            )
        )
    return totals
