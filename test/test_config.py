"""
Tests for loading timekeeping settings.
"""

from __future__ import annotations

from pathlib import Path

import pytest

import timekeeping.config as config


@pytest.mark.unit
def test_load_config_defaults_when_missing(tmp_path, monkeypatch):
    """
    Ensure a missing config file yields default settings.

    Returns
    -------
    None
        This test asserts default settings.
    """
    monkeypatch.delenv("TIMEKEEPING_DATA_PATH")

    loaded = config.load_config(tmp_path / "missing.toml")

    assert loaded == config.TimekeepingConfig()
    assert loaded.daily_target == 7.5
    assert loaded.resolved_data_path() == Path.home() / ".timekeeping" / "timekeeping.json"


@pytest.mark.unit
def test_load_config_reads_toml(tmp_path, monkeypatch):
    """
    Ensure config values are read from TOML.

    Returns
    -------
    None
        This test asserts TOML parsing.
    """
    monkeypatch.delenv("TIMEKEEPING_DATA_PATH")
    path = tmp_path / "config.toml"
    path.write_text(
        "\n".join(
            [
                "daily_target = 8",
                'default_project = "Alpha"',
                'store = "sqlite"',
                f'data_path = "{tmp_path / "log.db"}"',
            ]
        ),
        encoding="utf-8",
    )

    loaded = config.load_config(path)

    assert loaded.daily_target == 8.0
    assert loaded.default_project == "Alpha"
    assert loaded.store == "sqlite"
    assert loaded.resolved_data_path() == tmp_path / "log.db"


@pytest.mark.unit
def test_load_config_uses_env_paths(tmp_path):
    """
    Ensure the config and data paths honour environment overrides.

    Returns
    -------
    None
        This test asserts environment overrides.
    """
    (tmp_path / "config.toml").write_text('default_project = "Env"\n', encoding="utf-8")

    loaded = config.load_config()

    assert config.get_config_path() == tmp_path / "config.toml"
    assert loaded.default_project == "Env"
    assert loaded.resolved_data_path() == tmp_path / "timekeeping.json"


@pytest.mark.parametrize("value", ["0", "-1", '"many"', "nan"])
@pytest.mark.unit
def test_invalid_daily_target_falls_back(tmp_path, value):
    """
    Ensure invalid daily targets fall back to the default.

    Returns
    -------
    None
        This test asserts daily target validation.
    """
    path = tmp_path / "config.toml"
    path.write_text(f"daily_target = {value}\n", encoding="utf-8")

    assert config.load_config(path).daily_target == config.DAILY_TARGET


@pytest.mark.unit
def test_unreadable_config_falls_back(tmp_path):
    """
    Ensure malformed TOML falls back to defaults.

    Returns
    -------
    None
        This test asserts config error handling.
    """
    path = tmp_path / "config.toml"
    path.write_text("daily_target = = 3\n", encoding="utf-8")

    assert config.load_config(path).daily_target == config.DAILY_TARGET


@pytest.mark.unit
def test_config_doctest_examples():
    """
    Run doctest examples embedded in config helpers.

    Returns
    -------
    None
        This test asserts doctest coverage for config helpers.
    """
    import doctest

    results = doctest.testmod(config)
    assert results.failed == 0
