#!/usr/bin/env python3
"""
Load timekeeping settings from a TOML config file.
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

import tomllib

DAILY_TARGET = 7.5
STORE_KINDS = ("json", "sqlite")
DATA_FILENAMES = {"json": "timekeeping.json", "sqlite": "timekeeping.db"}

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimekeepingConfig:
    """
    Resolved timekeeping settings.

    Attributes
    ----------
    daily_target : float
        Expected billable hours per weekday.
    default_project : Optional[str]
        Project used by ``log`` when ``--project`` is omitted.
    store : str
        Storage backend name (json/sqlite).
    data_path : Optional[Path]
        Explicit data file path; the backend default is used when None.
    """

    daily_target: float = DAILY_TARGET
    default_project: Optional[str] = None
    store: str = "json"
    data_path: Optional[Path] = None

    def resolved_data_path(self) -> Path:
        """
        Return the data file path for the configured backend.

        Examples
        --------
        >>> TimekeepingConfig(data_path=Path("/tmp/log.json")).resolved_data_path()
        PosixPath('/tmp/log.json')
        """
        if self.data_path is not None:
            return self.data_path
        return get_data_dir() / DATA_FILENAMES[self.store]


def _expand(value: str) -> Path:
    return Path(os.path.expandvars(os.path.expanduser(value)))


def get_config_path() -> Path:
    """
    Return the config file path.

    Returns
    -------
    Path
        Config TOML path.

    Examples
    --------
    >>> isinstance(get_config_path(), Path)
    True
    """
    override = os.environ.get("TIMEKEEPING_CONFIG_PATH", "").strip()
    if override:
        return _expand(override)
    return Path.home() / ".config" / "timekeeping" / "config.toml"


def get_data_dir() -> Path:
    return Path.home() / ".timekeeping"


def _parse_daily_target(value: Any) -> float:
    try:
        target = float(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid daily_target %r", value)
        return DAILY_TARGET
    if not math.isfinite(target) or target <= 0:
        logger.warning("Ignoring non-positive daily_target %r", value)
        return DAILY_TARGET
    return target


def config_from_mapping(raw: Dict[str, Any]) -> TimekeepingConfig:
    """
    Build settings from parsed TOML values, ignoring invalid entries.

    Parameters
    ----------
    raw : Dict[str, Any]
        Parsed TOML document.

    Returns
    -------
    TimekeepingConfig
        Settings with defaults for missing or invalid keys.

    Examples
    --------
    >>> config_from_mapping({"daily_target": 8, "store": "sqlite"}).daily_target
    8.0
    >>> config_from_mapping({"store": "ftp"}).store
    'json'
    """
    config = TimekeepingConfig()
    if "daily_target" in raw:
        config = replace(config, daily_target=_parse_daily_target(raw["daily_target"]))
    project = str(raw.get("default_project") or "").strip()
    if project:
        config = replace(config, default_project=project)
    store = str(raw.get("store") or "").strip().lower()
    if store in STORE_KINDS:
        config = replace(config, store=store)
    elif store:
        logger.warning("Ignoring unknown store %r", store)
    data_path = str(raw.get("data_path") or "").strip()
    if data_path:
        config = replace(config, data_path=_expand(data_path))
    return config


def load_config(path: Optional[Path] = None) -> TimekeepingConfig:
    """
    Load settings from disk and apply environment overrides.

    Parameters
    ----------
    path : Optional[Path], optional
        Config file path (defaults to the standard path).

    Returns
    -------
    TimekeepingConfig
        Loaded settings; defaults when the file is missing or unreadable.
    """
    config_path = path or get_config_path()
    raw: Dict[str, Any] = {}
    if config_path.exists():
        try:
            raw = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError) as exc:
            logger.warning("Could not read config %s: %s", config_path, exc)
            raw = {}
    config = config_from_mapping(raw)
    override = os.environ.get("TIMEKEEPING_DATA_PATH", "").strip()
    if override:
        config = replace(config, data_path=_expand(override))
    logger.debug("Loaded config from %s: %s", config_path, config)
    return config
