#!/usr/bin/env python3
"""
Text rendering for timekeeping reports and summaries.
"""

from __future__ import annotations

import math
from typing import Dict, List

from .report import ClassifiedDay, DayClass, Report, Summary

ANSI_RESET = "\x1b[0m"
TOTAL_COLOR = "\x1b[33m"
DAY_CLASS_COLORS: Dict[DayClass, str] = {
    DayClass.WEEKEND: "\x1b[36m",
    DayClass.EMPTY: "\x1b[31m",
    DayClass.UNDER: "\x1b[33m",
    DayClass.OVER: "\x1b[32m",
}
REPORT_RULE = "=" * 19
SUMMARY_RULE = "=" * 38


def colorize(text: str, color: str, enabled: bool = True) -> str:
    """
    Wrap text in an ANSI color sequence.

    Examples
    --------
    >>> colorize("x", "\\x1b[31m")
    '\\x1b[31mx\\x1b[0m'
    >>> colorize("x", "\\x1b[31m", enabled=False)
    'x'
    >>> colorize("x", "")
    'x'
    """
    if not enabled or not color:
        return text
    return f"{color}{text}{ANSI_RESET}"


def format_percentage(value: float) -> str:
    """
    Format a percentage, rendering undefined ratios as ``n/a``.

    Examples
    --------
    >>> format_percentage(6.956)
    '6.96%'
    >>> format_percentage(float("nan"))
    'n/a'
    """
    if math.isnan(value):
        return "n/a"
    return f"{value:.2f}%"


def format_hours(value: float) -> str:
    """
    Format an hour count without trailing zeros.

    Examples
    --------
    >>> format_hours(4.0)
    '4'
    >>> format_hours(7.5)
    '7.5'
    >>> format_hours(12345.75)
    '12345.75'
    >>> format_hours(1234567)
    '1234567'
    """
    return f"{value:.15g}"


def render_report(report: Report, *, color: bool = False) -> List[str]:
    lines = [
        "",
        f"Timekeeping Report for {report.period.label()}:",
        REPORT_RULE,
        "",
    ]
    if not report.projects:
        lines.append("No hours logged in this period.")
        lines.append("")
    for row in report.projects:
        lines.extend(
            [
                f"Project: {row.project}",
                "-" * 19,
                colorize(f"  Total Hours:\t\t\t {row.total:.1f} hours", TOTAL_COLOR, color),
                f"  Percentage of Billable Hours:\t {format_percentage(row.share_of_baseline)}",
                f"  Percentage of Logged Hours:\t {format_percentage(row.share_of_logged)}",
                "",
            ]
        )
    lines.extend(
        [
            REPORT_RULE,
            f"Billable Percentage: {format_percentage(report.billable_percentage)}",
            REPORT_RULE,
            "",
        ]
    )
    return lines


def render_day(row: ClassifiedDay, *, color: bool = False) -> str:
    """
    Render one summary line for a day.

    Examples
    --------
    >>> from datetime import date
    >>> from timekeeping.aggregate import DayTotal
    >>> total = DayTotal(date(2024, 1, 2), 8.0, (("Alpha", 8.0),))
    >>> render_day(ClassifiedDay(total, DayClass.OVER))
    '2024-01-02:  8.0 hours\\t--> Alpha(8)'
    """
    total = row.total
    text = f"{total.date_key}: {total.hours:4.1f} hours"
    if total.projects:
        projects = ", ".join(f"{name}({format_hours(hours)})" for name, hours in total.projects)
        text = f"{text}\t--> {projects}"
    return colorize(text, DAY_CLASS_COLORS.get(row.day_class, ""), color)


def render_summary(summary: Summary, *, color: bool = False) -> List[str]:
    lines = [
        "",
        SUMMARY_RULE,
        f"Summary for {summary.period.label()}:",
        SUMMARY_RULE,
        "",
    ]
    lines.extend(render_day(row, color=color) for row in summary.days)
    lines.extend(
        [
            "",
            SUMMARY_RULE,
            f"Total billable hours logged: {format_hours(summary.total)}.",
            SUMMARY_RULE,
            "",
        ]
    )
    return lines
