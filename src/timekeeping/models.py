#!/usr/bin/env python3
"""
Nested project -> date -> hours mapping used as the time log document.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Iterator, Mapping, MutableMapping, Optional


def _coerce_hours(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Hours must be a number, got {value!r}.")
    return float(value)


class ProjectLedger(MutableMapping[str, float]):
    """
    Hours logged for one project, keyed by ``YYYY-MM-DD`` date keys.

    Examples
    --------
    >>> ledger = ProjectLedger()
    >>> ledger.add("2024-01-01", 2)
    2.0
    >>> ledger.add("2024-01-01", 1.5)
    3.5
    >>> dict(ledger)
    {'2024-01-01': 3.5}
    """

    def __init__(self, entries: Optional[Mapping[str, float]] = None) -> None:
        self._entries: Dict[str, float] = {}
        for key, value in (entries or {}).items():
            self._entries[str(key)] = _coerce_hours(value)

    def __getitem__(self, key: str) -> float:
        return self._entries[key]

    def __setitem__(self, key: str, value: float) -> None:
        self._entries[key] = _coerce_hours(value)

    def __delitem__(self, key: str) -> None:
        del self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ProjectLedger({self._entries!r})"

    def add(self, date_key: str, hours: float) -> float:
        """
        Accumulate hours on a date key, starting from zero when absent.

        Parameters
        ----------
        date_key : str
            Ledger date key.
        hours : float
            Hours to add (may be negative).

        Returns
        -------
        float
            New total for the date key.
        """
        total = self._entries.get(date_key, 0.0) + _coerce_hours(hours)
        self._entries[date_key] = total
        return total

    def to_document(self) -> Dict[str, float]:
        return dict(self._entries)


class TimeLog(MutableMapping[str, ProjectLedger]):
    """
    Project name to ledger mapping, preserving insertion order.

    Examples
    --------
    >>> log = TimeLog.from_document({"Alpha": {"2024-01-01": 4}})
    >>> log.get_or_create("Alpha") is log["Alpha"]
    True
    >>> "Beta" in log
    False
    >>> _ = log.get_or_create("Beta")
    >>> list(log)
    ['Alpha', 'Beta']
    """

    def __init__(self, projects: Optional[Mapping[str, ProjectLedger]] = None) -> None:
        self._projects: Dict[str, ProjectLedger] = {}
        for name, ledger in (projects or {}).items():
            self[name] = ledger

    def __getitem__(self, project: str) -> ProjectLedger:
        return self._projects[project]

    def __setitem__(self, project: str, ledger: Mapping[str, float]) -> None:
        if not isinstance(ledger, ProjectLedger):
            ledger = ProjectLedger(ledger)
        self._projects[project] = ledger

    def __delitem__(self, project: str) -> None:
        del self._projects[project]

    def __iter__(self) -> Iterator[str]:
        return iter(self._projects)

    def __len__(self) -> int:
        return len(self._projects)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TimeLog):
            return self.to_document() == other.to_document()
        if isinstance(other, Mapping):
            return self.to_document() == {
                key: dict(value) for key, value in other.items()
            }
        return NotImplemented

    def __repr__(self) -> str:
        return f"TimeLog({self.to_document()!r})"

    def get_or_create(self, project: str) -> ProjectLedger:
        """
        Return the ledger for a project, inserting an empty one if missing.
        """
        ledger = self._projects.get(project)
        if ledger is None:
            ledger = ProjectLedger()
            self._projects[project] = ledger
        return ledger

    def copy(self) -> "TimeLog":
        return TimeLog.from_document(self.to_document())

    def to_document(self) -> Dict[str, Dict[str, float]]:
        """
        Return the JSON-serializable ``{project: {date_key: hours}}`` form.
        """
        return {name: ledger.to_document() for name, ledger in self._projects.items()}

    @classmethod
    def from_document(cls, document: Any) -> "TimeLog":
        """
        Build a time log from a decoded JSON document.

        Parameters
        ----------
        document : Any
            Decoded document; None is treated as empty.

        Returns
        -------
        TimeLog
            Parsed time log.

        Raises
        ------
        ValueError
            If the document is not an object of objects of numbers.
        """
        if document is None:
            return cls()
        if not isinstance(document, Mapping):
            raise ValueError("Time log document must be a JSON object.")
        log = cls()
        for project, entries in document.items():
            if not isinstance(entries, Mapping):
                raise ValueError(f"Entries for project {project!r} must be a JSON object.")
            hours = {str(key): value for key, value in entries.items()}
            if any(isinstance(v, float) and not math.isfinite(v) for v in hours.values()):
                raise ValueError(f"Entries for project {project!r} must be finite.")
            log[str(project)] = ProjectLedger(hours)
        return log
