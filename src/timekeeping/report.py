#!/usr/bin/env python3
"""
Billable-hour baselines, percentages, and day classification for reports.
"""

from __future__ import annotations

import logging
import math
import sys
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional, Tuple

from .aggregate import (
    DayTotal,
    ReportPeriod,
    daily_totals,
    date_span,
    filter_by_period,
    period_total,
    project_total,
)
from .config import DAILY_TARGET, TimekeepingConfig
from .dates import is_weekend, weekdays_between, weekdays_in_month
from .errors import InvalidPeriod, StoreUnavailable
from .models import TimeLog
from .store import LoadStatus, TimeLogStore

logger = logging.getLogger(__name__)


class DayClass(Enum):
    WEEKEND = "weekend"
    EMPTY = "empty"
    UNDER = "under"
    ON_TARGET = "on_target"
    OVER = "over"


@dataclass(frozen=True)
class ProjectSummary:
    """
    Hours and shares for one project within a report period.

    Attributes
    ----------
    project : str
        Project name.
    total : float
        Hours logged in the period.
    share_of_logged : float
        Percentage of all hours logged in the period (nan when undefined).
    share_of_baseline : float
        Percentage of the billable baseline (nan when undefined).
    """

    project: str
    total: float
    share_of_logged: float
    share_of_baseline: float


@dataclass(frozen=True)
class Report:
    period: ReportPeriod
    total: float
    baseline: float
    baseline_to_date: float
    billable_percentage: float
    projects: List[ProjectSummary] = field(default_factory=list)


@dataclass(frozen=True)
class ClassifiedDay:
    total: DayTotal
    day_class: DayClass


@dataclass(frozen=True)
class Summary:
    period: ReportPeriod
    total: float
    days: List[ClassifiedDay] = field(default_factory=list)


def _percentage(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return math.nan
    return round(numerator / denominator * 100, 2)


def billable_baseline(
    period: ReportPeriod,
    daily_target: float = DAILY_TARGET,
    *,
    today: Optional[date] = None,
    log: Optional[TimeLog] = None,
    month_to_date: bool = False,
) -> float:
    """
    Return the expected billable hours for a period.

    Parameters
    ----------
    period : ReportPeriod
        Month or whole-history period.
    daily_target : float, optional
        Expected hours per weekday.
    today : Optional[date], optional
        Reference date for month-to-date baselines.
    log : Optional[TimeLog], optional
        Log whose logged date range defines the whole-history baseline.
    month_to_date : bool, optional
        Count only weekdays up to ``today`` when the period is the current
        month.

    Returns
    -------
    float
        Weekday count times the daily target.

    Examples
    --------
    >>> billable_baseline(ReportPeriod(2024, 1))
    172.5
    >>> billable_baseline(ReportPeriod(2024, 1), today=date(2024, 1, 10), month_to_date=True)
    60.0
    >>> billable_baseline(ReportPeriod(2024, 1), today=date(2024, 3, 10), month_to_date=True)
    172.5
    >>> billable_baseline(ReportPeriod.all_time(), log=TimeLog())
    0.0
    """
    if period.is_all_time:
        span = date_span(log)
        if span is None:
            return 0.0
        return weekdays_between(*span) * daily_target
    through_day = None
    if month_to_date:
        today = today or date.today()
        if today.year == period.year and today.month == period.month:
            through_day = today.day
    return weekdays_in_month(period.year, period.month, through_day) * daily_target


def billable_percentage(total_hours: float, baseline: float) -> float:
    """
    Return logged hours as a percentage of the baseline.

    Examples
    --------
    >>> billable_percentage(12, 172.5)
    6.96
    >>> billable_percentage(5, 0)
    nan
    """
    return _percentage(total_hours, baseline)


def project_share_percentages(
    project_hours: float,
    total_hours: float,
    baseline: float,
) -> Tuple[float, float]:
    """
    Return a project's share of logged hours and of the billable baseline.

    Parameters
    ----------
    project_hours : float
        Hours logged to the project in the period.
    total_hours : float
        Hours logged to all projects in the period.
    baseline : float
        Billable baseline for the period.

    Returns
    -------
    Tuple[float, float]
        ``(share_of_logged, share_of_baseline)`` rounded to 2 decimals. Both
        are nan when nothing was logged; the baseline share is nan when the
        baseline is zero.

    Examples
    --------
    >>> project_share_percentages(12, 12, 172.5)
    (100.0, 6.96)
    >>> project_share_percentages(0, 0, 172.5)
    (nan, nan)
    """
    if total_hours == 0:
        return math.nan, math.nan
    return _percentage(project_hours, total_hours), _percentage(project_hours, baseline)


def classify_day(day: date, total_hours: float, daily_target: float = DAILY_TARGET) -> DayClass:
    """
    Classify a day's logged hours against the daily target.

    Weekends win over any hour count.

    Examples
    --------
    >>> classify_day(date(2024, 1, 6), 10).name
    'WEEKEND'
    >>> classify_day(date(2024, 1, 8), 0).name
    'EMPTY'
    >>> classify_day(date(2024, 1, 8), 7.5).name
    'ON_TARGET'
    """
    if is_weekend(day):
        return DayClass.WEEKEND
    if total_hours <= 0:
        return DayClass.EMPTY
    if total_hours < daily_target:
        return DayClass.UNDER
    if total_hours == daily_target:
        return DayClass.ON_TARGET
    return DayClass.OVER


def resolve_period(
    month: Optional[int],
    year: Optional[int],
    complete: bool = False,
    today: Optional[date] = None,
) -> ReportPeriod:
    """
    Resolve CLI period options, defaulting to the current month.

    Raises
    ------
    InvalidPeriod
        If the month is outside 1-12.

    Examples
    --------
    >>> resolve_period(None, None, today=date(2024, 5, 2))
    ReportPeriod(year=2024, month=5)
    >>> resolve_period(3, 2023)
    ReportPeriod(year=2023, month=3)
    >>> resolve_period(13, None, complete=True)
    ReportPeriod(year=None, month=None)
    """
    if complete:
        return ReportPeriod.all_time()
    today = today or date.today()
    selected = today.month if month is None else month
    if not 1 <= selected <= 12:
        raise InvalidPeriod(selected)
    return ReportPeriod(year if year is not None else today.year, selected)


def build_report(
    log: Optional[TimeLog],
    period: ReportPeriod,
    daily_target: float = DAILY_TARGET,
    today: Optional[date] = None,
) -> Report:
    """
    Compute per-project totals and billable percentages for a period.

    Parameters
    ----------
    log : Optional[TimeLog]
        Full time log; None is treated as empty.
    period : ReportPeriod
        Month or whole-history period.
    daily_target : float, optional
        Expected hours per weekday.
    today : Optional[date], optional
        Reference date for the month-to-date baseline.

    Returns
    -------
    Report
        Report data; projects without positive hours are omitted.
    """
    filtered = filter_by_period(log, period)
    total = period_total(filtered)
    baseline = billable_baseline(period, daily_target, log=filtered)
    baseline_to_date = billable_baseline(
        period,
        daily_target,
        today=today,
        log=filtered,
        month_to_date=True,
    )
    projects: List[ProjectSummary] = []
    for name, ledger in filtered.items():
        hours = project_total(ledger)
        if hours <= 0:
            continue
        share_logged, share_baseline = project_share_percentages(hours, total, baseline)
        projects.append(
            ProjectSummary(
                project=name,
                total=hours,
                share_of_logged=share_logged,
                share_of_baseline=share_baseline,
            )
        )
    return Report(
        period=period,
        total=total,
        baseline=baseline,
        baseline_to_date=baseline_to_date,
        billable_percentage=billable_percentage(total, baseline_to_date),
        projects=projects,
    )


def build_summary(
    log: Optional[TimeLog],
    period: ReportPeriod,
    daily_target: float = DAILY_TARGET,
) -> Summary:
    days = [
        ClassifiedDay(total=row, day_class=classify_day(row.day, row.hours, daily_target))
        for row in daily_totals(log, period)
    ]
    return Summary(
        period=period,
        total=sum(row.total.hours for row in days),
        days=days,
    )


def _load_for_reading(store: TimeLogStore) -> Optional[TimeLog]:
    result = store.load()
    if result.status is LoadStatus.FAILED:
        raise StoreUnavailable(result.error or "unknown error")
    if result.status is LoadStatus.ABSENT:
        return None
    return result.log


def run_report(
    store: TimeLogStore,
    *,
    month: Optional[int],
    year: Optional[int],
    complete: bool,
    config: TimekeepingConfig,
    color: bool = False,
    today: Optional[date] = None,
) -> int:
    """
    Print the per-project report for a month or the whole history.

    Returns
    -------
    int
        Exit code.
    """
    from .render import render_report

    today = today or date.today()
    try:
        period = resolve_period(month, year, complete, today)
    except InvalidPeriod as exc:
        print(f"timekeeping: {exc}", file=sys.stderr)
        return 1
    try:
        log = _load_for_reading(store)
    except StoreUnavailable as exc:
        print(f"Error reading timekeeping data: {exc}", file=sys.stderr)
        return 1
    if log is None:
        print("No timekeeping data found.")
        return 0
    report = build_report(log, period, config.daily_target, today)
    logger.debug("Report for %s: %s hours", period.label(), report.total)
    for line in render_report(report, color=color):
        print(line)
    return 0


def run_summary(
    store: TimeLogStore,
    *,
    month: Optional[int],
    year: Optional[int],
    config: TimekeepingConfig,
    color: bool = False,
    today: Optional[date] = None,
) -> int:
    """
    Print the per-day summary for a month.

    Returns
    -------
    int
        Exit code.
    """
    from .render import render_summary

    today = today or date.today()
    try:
        period = resolve_period(month, year, False, today)
    except InvalidPeriod as exc:
        print(f"timekeeping: {exc}", file=sys.stderr)
        return 1
    try:
        log = _load_for_reading(store)
    except StoreUnavailable as exc:
        print(f"Error reading timekeeping data: {exc}", file=sys.stderr)
        return 1
    if log is None:
        print("No timekeeping data found.")
        return 0
    summary = build_summary(log, period, config.daily_target)
    for line in render_summary(summary, color=color):
        print(line)
    return 0
