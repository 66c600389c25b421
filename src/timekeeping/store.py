#!/usr/bin/env python3
"""
Whole-document storage for the time log.

Stores only ever load or save the complete ``{project: {date: hours}}``
document. Loading distinguishes a missing document from a failed read so
callers can branch on the outcome.
"""

from __future__ import annotations

import json
import logging
import os
import sqlite3
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional

from .config import TimekeepingConfig
from .errors import StoreUnavailable
from .models import TimeLog

DOCUMENT_NAME = "timeData"

logger = logging.getLogger(__name__)


class LoadStatus(Enum):
    FOUND = "found"
    ABSENT = "absent"
    FAILED = "failed"


@dataclass(frozen=True)
class LoadResult:
    """
    Outcome of loading the time log document.

    Attributes
    ----------
    status : LoadStatus
        Whether the document was found, absent, or could not be read.
    log : Optional[TimeLog]
        Loaded log when the status is FOUND.
    error : Optional[str]
        Failure description when the status is FAILED.
    """

    status: LoadStatus
    log: Optional[TimeLog] = None
    error: Optional[str] = None

    @classmethod
    def found(cls, log: TimeLog) -> "LoadResult":
        return cls(LoadStatus.FOUND, log=log)

    @classmethod
    def absent(cls) -> "LoadResult":
        return cls(LoadStatus.ABSENT)

    @classmethod
    def failed(cls, error: str) -> "LoadResult":
        return cls(LoadStatus.FAILED, error=error)

    def log_or_empty(self) -> TimeLog:
        """
        Return the loaded log, or an empty log when the document is absent.

        Raises
        ------
        StoreUnavailable
            If the load failed.
        """
        if self.status is LoadStatus.FAILED:
            raise StoreUnavailable(self.error or "unknown error")
        return self.log if self.log is not None else TimeLog()


@dataclass(frozen=True)
class SaveResult:
    ok: bool
    error: Optional[str] = None


class TimeLogStore(ABC):
    """Abstract whole-document time log store."""

    @abstractmethod
    def load(self) -> LoadResult:
        """Load the full time log document."""

    @abstractmethod
    def save(self, log: TimeLog) -> SaveResult:
        """Persist the full time log document, returning once it is written."""


class JsonFileStore(TimeLogStore):
    """
    Time log stored as a single JSON file.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> LoadResult:
        if not self.path.exists():
            logger.debug("No time log at %s", self.path)
            return LoadResult.absent()
        try:
            text = self.path.read_text(encoding="utf-8")
            document = json.loads(text) if text.strip() else None
            if document is None:
                return LoadResult.absent()
            log = TimeLog.from_document(document)
        except (OSError, ValueError) as exc:
            logger.debug("Failed to read %s: %s", self.path, exc)
            return LoadResult.failed(f"{self.path}: {exc}")
        logger.debug("Loaded %d projects from %s", len(log), self.path)
        return LoadResult.found(log)

    def save(self, log: TimeLog) -> SaveResult:
        temp_path: Optional[Path] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                temp_path = Path(handle.name)
                json.dump(log.to_document(), handle, indent=2)
                handle.write("\n")
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp_path, self.path)
        except OSError as exc:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            logger.debug("Failed to write %s: %s", self.path, exc)
            return SaveResult(ok=False, error=f"{self.path}: {exc}")
        logger.debug("Saved %d projects to %s", len(log), self.path)
        return SaveResult(ok=True)


class SqliteStore(TimeLogStore):
    """
    Time log stored as one JSON document row in a SQLite database.
    """

    def __init__(self, path: Path, name: str = DOCUMENT_NAME) -> None:
        self.path = Path(path)
        self.name = name

    def _connect(self) -> sqlite3.Connection:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        return sqlite3.connect(self.path)

    def ensure_schema(self) -> None:
        """
        Ensure the SQLite schema exists.
        """
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS documents (
                    name TEXT PRIMARY KEY,
                    body TEXT NOT NULL,
                    updated_ts TEXT
                )
                """
            )
            conn.commit()

    def load(self) -> LoadResult:
        if not self.path.exists():
            return LoadResult.absent()
        try:
            self.ensure_schema()
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT body FROM documents WHERE name = ?",
                    (self.name,),
                ).fetchone()
            if row is None:
                return LoadResult.absent()
            log = TimeLog.from_document(json.loads(row[0]))
        except (sqlite3.Error, OSError, ValueError) as exc:
            logger.debug("Failed to read %s: %s", self.path, exc)
            return LoadResult.failed(f"{self.path}: {exc}")
        return LoadResult.found(log)

    def save(self, log: TimeLog) -> SaveResult:
        updated = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        try:
            self.ensure_schema()
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO documents (name, body, updated_ts) VALUES (?, ?, ?)
                    ON CONFLICT(name) DO UPDATE SET
                        body = excluded.body,
                        updated_ts = excluded.updated_ts
                    """,
                    (self.name, json.dumps(log.to_document()), updated),
                )
                conn.commit()
        except (sqlite3.Error, OSError) as exc:
            logger.debug("Failed to write %s: %s", self.path, exc)
            return SaveResult(ok=False, error=f"{self.path}: {exc}")
        return SaveResult(ok=True)


def open_store(config: TimekeepingConfig) -> TimeLogStore:
    """
    Build the store selected by the configuration.

    Parameters
    ----------
    config : TimekeepingConfig
        Resolved settings.

    Returns
    -------
    TimeLogStore
        JSON file or SQLite store.
    """
    path = config.resolved_data_path()
    logger.debug("Using %s store at %s", config.store, path)
    if config.store == "sqlite":
        return SqliteStore(path)
    return JsonFileStore(path)
