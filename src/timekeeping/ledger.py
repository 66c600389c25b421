#!/usr/bin/env python3
"""
Write paths for the time log: logging hours and importing documents.
"""

from __future__ import annotations

import json
import logging
import math
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Optional

from .config import TimekeepingConfig
from .dates import format_date_key, parse_loose_date
from .errors import MalformedDate, MissingRequiredArgument, StoreUnavailable, TimekeepingError
from .models import TimeLog
from .render import format_hours
from .store import LoadStatus, TimeLogStore

logger = logging.getLogger(__name__)


def log_hours(log: TimeLog, project: str, hours: Optional[float], day: date) -> TimeLog:
    """
    Add hours to a project on a date, creating entries on demand.

    Parameters
    ----------
    log : TimeLog
        Time log to update in place.
    project : str
        Project name (case-sensitive).
    hours : Optional[float]
        Hours to add; negative adjustments are allowed.
    day : date
        Local calendar date of the work.

    Returns
    -------
    TimeLog
        The updated log.

    Raises
    ------
    MissingRequiredArgument
        If the project or hours are missing.
    ValueError
        If hours is not a finite number.

    Examples
    --------
    >>> log = TimeLog()
    >>> _ = log_hours(log, "Alpha", 2.5, date(2024, 1, 3))
    >>> _ = log_hours(log, "Alpha", 2.5, date(2024, 1, 3))
    >>> log.to_document()
    {'Alpha': {'2024-01-03': 5.0}}
    """
    if hours is None:
        raise MissingRequiredArgument("hours")
    if not project or not project.strip():
        raise MissingRequiredArgument("project")
    if not math.isfinite(hours):
        raise ValueError(f"Hours must be a finite number, got {hours!r}.")
    log.get_or_create(project).add(format_date_key(day), hours)
    return log


def merge_logs(existing: TimeLog, imported: TimeLog, *, deep: bool = False) -> TimeLog:
    """
    Merge an imported log into an existing one, returning a new log.

    Parameters
    ----------
    existing : TimeLog
        Log already in the store.
    imported : TimeLog
        Log being imported.
    deep : bool, optional
        Merge per date key instead of replacing whole projects.

    Returns
    -------
    TimeLog
        Merged log. Imported values win on collisions: per project when
        shallow, per project and date key when deep.

    Examples
    --------
    >>> old = TimeLog.from_document({"A": {"2024-01-01": 1, "2024-01-02": 2}})
    >>> new = TimeLog.from_document({"A": {"2024-01-02": 5}})
    >>> merge_logs(old, new).to_document()
    {'A': {'2024-01-02': 5.0}}
    >>> merge_logs(old, new, deep=True).to_document()
    {'A': {'2024-01-01': 1.0, '2024-01-02': 5.0}}
    """
    merged = existing.copy()
    for project, ledger in imported.items():
        if deep:
            target = merged.get_or_create(project)
            for date_key, hours in ledger.items():
                target[date_key] = hours
        else:
            merged[project] = dict(ledger)
    return merged


def resolve_project(project: Optional[str], config: TimekeepingConfig) -> str:
    name = (project or "").strip() or (config.default_project or "").strip()
    if not name:
        raise MissingRequiredArgument(
            "project",
            "No project specified and no default project found in config.",
        )
    return name


def run_log(
    store: TimeLogStore,
    *,
    project: Optional[str],
    hours: Optional[float],
    date_text: Optional[str],
    config: TimekeepingConfig,
    today: Optional[date] = None,
) -> int:
    """
    Log hours to a project and persist the updated log.

    Returns
    -------
    int
        Exit code (0 on success, 1 on validation or storage failure).
    """
    today = today or date.today()
    try:
        if hours is None:
            raise MissingRequiredArgument("hours")
        name = resolve_project(project, config)
        day = today
        if date_text:
            parsed = parse_loose_date(date_text, today=today)
            if parsed is None:
                raise MalformedDate(date_text)
            day = parsed
    except TimekeepingError as exc:
        print(f"timekeeping: {exc}", file=sys.stderr)
        return 1

    try:
        log = store.load().log_or_empty()
        log_hours(log, name, hours, day)
        result = store.save(log)
        if not result.ok:
            raise StoreUnavailable(result.error or "save failed")
    except StoreUnavailable as exc:
        print(f"Error writing timekeeping data: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"timekeeping: {exc}", file=sys.stderr)
        return 1
    date_key = format_date_key(day)
    logger.info("Logged %s hours to %s on %s", hours, name, date_key)
    print(f'Logged {format_hours(hours)} hours to project "{name}" on {date_key}.')
    return 0


def backup_path_for(source: Path, now: datetime) -> Path:
    """
    Return the backup file path for an imported document.

    Examples
    --------
    >>> backup_path_for(Path("/data/timekeeping.json"), datetime(2024, 1, 2, 3, 4, 5))
    PosixPath('/data/timekeeping_backup_2024-01-02T03-04-05.json')
    """
    stamp = now.isoformat().replace(":", "-").replace(".", "-")
    return source.parent / f"timekeeping_backup_{stamp}.json"


def run_import(
    store: TimeLogStore,
    source: Path,
    *,
    deep: bool = False,
    now: Optional[datetime] = None,
) -> int:
    """
    Import a local JSON time log into the store and back up the source.

    Parameters
    ----------
    store : TimeLogStore
        Destination store.
    source : Path
        Local JSON document to import.
    deep : bool, optional
        Merge per date key instead of replacing whole projects.
    now : Optional[datetime], optional
        Timestamp used for the backup file name.

    Returns
    -------
    int
        Exit code.
    """
    if not source.exists():
        print(f"No local time log found at {source}.", file=sys.stderr)
        return 1
    try:
        imported = TimeLog.from_document(json.loads(source.read_text(encoding="utf-8")))
    except (OSError, ValueError) as exc:
        print(f"Error importing data: {source}: {exc}", file=sys.stderr)
        return 1

    loaded = store.load()
    if loaded.status is LoadStatus.FAILED:
        print(f"Error reading timekeeping data: {loaded.error}", file=sys.stderr)
        return 1
    existing = loaded.log_or_empty()
    merged = merge_logs(existing, imported, deep=deep)
    result = store.save(merged)
    if not result.ok:
        print(f"Error writing timekeeping data: {result.error}", file=sys.stderr)
        return 1
    logger.info("Imported %d projects from %s", len(imported), source)
    print(f"Successfully imported {len(imported)} projects from {source}.")

    backup = backup_path_for(source, now or datetime.now())
    try:
        backup.write_text(
            json.dumps(imported.to_document(), indent=2) + "\n",
            encoding="utf-8",
        )
    except OSError as exc:
        print(f"Error writing backup {backup}: {exc}", file=sys.stderr)
        return 1
    print(f"Local file backed up to: {backup}")
    return 0
