"""
Shared pytest fixtures for timekeeping tests.
"""

from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def isolate_timekeeping_paths(tmp_path, monkeypatch) -> None:
    """
    Ensure tests do not read/write the real config or time log.

    Parameters
    ----------
    tmp_path : pathlib.Path
        Temporary path provided by pytest.
    monkeypatch : pytest.MonkeyPatch
        Monkeypatch fixture for environment updates.
    """
    monkeypatch.setenv("TIMEKEEPING_CONFIG_PATH", str(tmp_path / "config.toml"))
    monkeypatch.setenv("TIMEKEEPING_DATA_PATH", str(tmp_path / "timekeeping.json"))
