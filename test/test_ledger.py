"""
Tests for logging hours and importing time logs.
"""

from __future__ import annotations

import json
from datetime import date, datetime

import pytest

import timekeeping.ledger as ledger
from timekeeping.config import TimekeepingConfig
from timekeeping.errors import MissingRequiredArgument
from timekeeping.models import TimeLog
from timekeeping.store import JsonFileStore, LoadResult, SaveResult, TimeLogStore


class MemoryStore(TimeLogStore):
    def __init__(self, document=None, *, fail_load=False, fail_save=False):
        self.document = document
        self.fail_load = fail_load
        self.fail_save = fail_save
        self.saves = 0

    def load(self):
        if self.fail_load:
            return LoadResult.failed("backend offline")
        if self.document is None:
            return LoadResult.absent()
        return LoadResult.found(TimeLog.from_document(self.document))

    def save(self, log):
        if self.fail_save:
            return SaveResult(ok=False, error="disk full")
        self.saves += 1
        self.document = log.to_document()
        return SaveResult(ok=True)


@pytest.mark.unit
def test_log_hours_twice_doubles_value():
    """
    Ensure repeated logs for the same project and day accumulate.

    Returns
    -------
    None
        This test asserts accumulation on repeated logging.
    """
    log = TimeLog()

    ledger.log_hours(log, "Alpha", 3.25, date(2024, 1, 2))
    ledger.log_hours(log, "Alpha", 3.25, date(2024, 1, 2))

    assert log["Alpha"]["2024-01-02"] == 6.5


@pytest.mark.unit
def test_log_hours_creates_nested_entries_and_keeps_others():
    """
    Ensure new projects and dates are created without touching others.

    Returns
    -------
    None
        This test asserts on-demand creation.
    """
    log = TimeLog.from_document({"Alpha": {"2024-01-01": 4}})

    result = ledger.log_hours(log, "Beta", 0, date(2024, 1, 1))
    ledger.log_hours(log, "Alpha", -1, date(2024, 1, 1))

    assert result is log
    assert log.to_document() == {
        "Alpha": {"2024-01-01": 3.0},
        "Beta": {"2024-01-01": 0.0},
    }


@pytest.mark.parametrize(
    ("project", "hours"),
    [
        ("", 1.0),
        ("   ", 1.0),
        ("Alpha", None),
    ],
)
@pytest.mark.unit
def test_log_hours_requires_project_and_hours(project, hours):
    """
    Ensure missing arguments are rejected before mutating the log.

    Returns
    -------
    None
        This test asserts argument validation.
    """
    log = TimeLog()

    with pytest.raises(MissingRequiredArgument):
        ledger.log_hours(log, project, hours, date(2024, 1, 1))
    assert len(log) == 0


@pytest.mark.parametrize("hours", [float("nan"), float("inf")])
@pytest.mark.unit
def test_log_hours_rejects_non_finite_hours(hours):
    """
    Ensure non-finite hours are rejected.

    Returns
    -------
    None
        This test asserts finite-number validation.
    """
    with pytest.raises(ValueError):
        ledger.log_hours(TimeLog(), "Alpha", hours, date(2024, 1, 1))


@pytest.mark.unit
def test_merge_logs_shallow_replaces_whole_projects():
    """
    Ensure shallow merges replace same-named projects entirely.

    Returns
    -------
    None
        This test asserts shallow import semantics.
    """
    existing = TimeLog.from_document(
        {"Alpha": {"2024-01-01": 1, "2024-01-02": 2}, "Beta": {"2024-01-01": 3}}
    )
    imported = TimeLog.from_document({"Alpha": {"2024-01-03": 4}, "Gamma": {"2024-01-01": 5}})

    merged = ledger.merge_logs(existing, imported)

    assert merged.to_document() == {
        "Alpha": {"2024-01-03": 4.0},
        "Beta": {"2024-01-01": 3.0},
        "Gamma": {"2024-01-01": 5.0},
    }
    assert existing["Alpha"]["2024-01-01"] == 1.0


@pytest.mark.unit
def test_merge_logs_deep_merges_dates():
    """
    Ensure deep merges keep existing dates and let imported dates win.

    Returns
    -------
    None
        This test asserts deep import semantics.
    """
    existing = TimeLog.from_document({"Alpha": {"2024-01-01": 1, "2024-01-02": 2}})
    imported = TimeLog.from_document({"Alpha": {"2024-01-02": 6, "2024-01-03": 4}})

    merged = ledger.merge_logs(existing, imported, deep=True)

    assert merged.to_document() == {
        "Alpha": {"2024-01-01": 1.0, "2024-01-02": 6.0, "2024-01-03": 4.0}
    }


@pytest.mark.unit
def test_run_log_saves_and_reports(capsys):
    """
    Ensure the log command writes to the store and confirms.

    Returns
    -------
    None
        This test asserts the log command flow.
    """
    store = MemoryStore()

    exit_code = ledger.run_log(
        store,
        project="Alpha",
        hours=7.5,
        date_text="2024.01.02",
        config=TimekeepingConfig(),
    )

    assert exit_code == 0
    assert store.document == {"Alpha": {"2024-01-02": 7.5}}
    assert 'Logged 7.5 hours to project "Alpha" on 2024-01-02.' in capsys.readouterr().out


@pytest.mark.unit
def test_run_log_defaults_to_today_and_config_project():
    """
    Ensure the date defaults to today and the project to the config value.

    Returns
    -------
    None
        This test asserts log defaults.
    """
    store = MemoryStore({"Alpha": {"2024-05-06": 1}})

    exit_code = ledger.run_log(
        store,
        project=None,
        hours=2,
        date_text=None,
        config=TimekeepingConfig(default_project="Alpha"),
        today=date(2024, 5, 6),
    )

    assert exit_code == 0
    assert store.document == {"Alpha": {"2024-05-06": 3.0}}


@pytest.mark.unit
def test_run_log_short_date_uses_today_year():
    """
    Ensure MM.DD dates resolve against the reference year.

    Returns
    -------
    None
        This test asserts short date handling in the log command.
    """
    store = MemoryStore()

    ledger.run_log(
        store,
        project="Alpha",
        hours=1,
        date_text="02.29",
        config=TimekeepingConfig(),
        today=date(2028, 6, 1),
    )

    assert store.document == {"Alpha": {"2028-02-29": 1.0}}


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"project": "Alpha", "hours": None, "date_text": None}, "--hours is required."),
        ({"project": None, "hours": 1.0, "date_text": None}, "no default project"),
        ({"project": "Alpha", "hours": 1.0, "date_text": "1/2/2024"}, "Invalid date format"),
        ({"project": "Alpha", "hours": 1.0, "date_text": "0000.01.01"}, "Invalid date format"),
        ({"project": "Alpha", "hours": 1.0, "date_text": "9999.12.32"}, "Invalid date format"),
    ],
)
@pytest.mark.unit
def test_run_log_validation_errors_skip_store(capsys, kwargs, message):
    """
    Ensure validation failures exit 1 without touching the store.

    Returns
    -------
    None
        This test asserts log validation.
    """
    store = MemoryStore(fail_load=True)

    exit_code = ledger.run_log(store, config=TimekeepingConfig(), **kwargs)

    assert exit_code == 1
    assert store.saves == 0
    assert message in capsys.readouterr().err


@pytest.mark.parametrize(
    ("store", "message"),
    [
        (MemoryStore(fail_load=True), "backend offline"),
        (MemoryStore(fail_save=True), "disk full"),
    ],
)
@pytest.mark.unit
def test_run_log_store_failures(capsys, store, message):
    """
    Ensure store failures surface with context and exit 1.

    Returns
    -------
    None
        This test asserts store error reporting.
    """
    exit_code = ledger.run_log(
        store,
        project="Alpha",
        hours=1.0,
        date_text=None,
        config=TimekeepingConfig(),
    )

    err = capsys.readouterr().err
    assert exit_code == 1
    assert "Error writing timekeeping data" in err
    assert message in err


@pytest.mark.unit
def test_run_import_merges_and_backs_up(tmp_path, capsys):
    """
    Ensure import merges into the store and writes a backup copy.

    Returns
    -------
    None
        This test asserts the import flow.
    """
    source = tmp_path / "timekeeping.json"
    source.write_text(json.dumps({"Alpha": {"2024-01-05": 2}}), encoding="utf-8")
    store = JsonFileStore(tmp_path / "store" / "timekeeping.json")
    store.save(TimeLog.from_document({"Alpha": {"2024-01-01": 1}, "Beta": {"2024-01-01": 3}}))

    exit_code = ledger.run_import(store, source, now=datetime(2024, 2, 1, 9, 30, 0))

    assert exit_code == 0
    assert store.load().log.to_document() == {
        "Alpha": {"2024-01-05": 2.0},
        "Beta": {"2024-01-01": 3.0},
    }
    backup = tmp_path / "timekeeping_backup_2024-02-01T09-30-00.json"
    assert json.loads(backup.read_text(encoding="utf-8")) == {"Alpha": {"2024-01-05": 2.0}}
    out = capsys.readouterr().out
    assert "Successfully imported" in out
    assert str(backup) in out


@pytest.mark.unit
def test_run_import_into_absent_store_with_deep_merge(tmp_path):
    """
    Ensure importing into an empty store creates the document.

    Returns
    -------
    None
        This test asserts import into an absent store.
    """
    source = tmp_path / "local.json"
    source.write_text(json.dumps({"Alpha": {"2024-01-05": 2}}), encoding="utf-8")
    store = MemoryStore()

    exit_code = ledger.run_import(store, source, deep=True, now=datetime(2024, 2, 1))

    assert exit_code == 0
    assert store.document == {"Alpha": {"2024-01-05": 2.0}}


@pytest.mark.unit
def test_run_import_missing_source(tmp_path, capsys):
    """
    Ensure a missing source file exits 1 without saving.

    Returns
    -------
    None
        This test asserts missing source handling.
    """
    store = MemoryStore()

    exit_code = ledger.run_import(store, tmp_path / "missing.json")

    assert exit_code == 1
    assert store.saves == 0
    assert "No local time log found" in capsys.readouterr().err


@pytest.mark.unit
def test_run_import_store_read_failure(tmp_path, capsys):
    """
    Ensure a failed store read aborts the import.

    Returns
    -------
    None
        This test asserts import read errors.
    """
    source = tmp_path / "local.json"
    source.write_text("{}", encoding="utf-8")
    store = MemoryStore(fail_load=True)

    exit_code = ledger.run_import(store, source)

    assert exit_code == 1
    assert "Error reading timekeeping data" in capsys.readouterr().err


@pytest.mark.unit
def test_ledger_doctest_examples():
    """
    Run doctest examples embedded in ledger helpers.

    Returns
    -------
    None
        This test asserts doctest coverage for ledger helpers.
    """
    import doctest

    results = doctest.testmod(ledger)
    assert results.failed == 0


@pytest.mark.unit
def test_run_log_prints_large_hours_in_full(capsys):
    """
    Ensure the confirmation shows large hour counts without rounding.

    Returns
    -------
    None
        This test asserts log confirmation formatting.
    """
    store = MemoryStore()

    exit_code = ledger.run_log(
        store,
        project="Alpha",
        hours=1234567,
        date_text="2024.01.02",
        config=TimekeepingConfig(),
    )

    assert exit_code == 0
    assert 'Logged 1234567 hours to project "Alpha" on 2024-01-02.' in capsys.readouterr().out
