#!/usr/bin/env python3
"""
Log hours per project and report them against a billable-hours baseline.
"""

import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Tuple

from .config import STORE_KINDS, TimekeepingConfig, load_config

__version__ = "1.0.0"

HELP_HEADER = "timekeeping commands:"
HELP_ENTRIES: Tuple[Tuple[str, str], ...] = (
    ("log", "Log hours to a project."),
    ("report", "Per-project report for a month or the complete history."),
    ("summary", "Per-day summary of a month against the daily target."),
    ("import", "Merge a local JSON time log into the store."),
    ("help", "Show this help."),
)


def get_help_lines() -> List[str]:
    """
    Build the help text lines for timekeeping commands.

    Returns
    -------
    list[str]
        Lines to print for the ``timekeeping help`` command.

    Examples
    --------
    >>> lines = get_help_lines()
    >>> lines[0]
    'timekeeping commands:'
    >>> any(line.strip().startswith("summary") for line in lines)
    True
    """
    max_width = max(len(command) for command, _ in HELP_ENTRIES)
    lines = [HELP_HEADER]
    for command, description in sorted(HELP_ENTRIES):
        lines.append(f"  {command:<{max_width}}  {description}")
    return lines


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def resolve_config(
    store: Optional[str] = None,
    data: Optional[Path] = None,
) -> TimekeepingConfig:
    """
    Load the config file and apply command-line overrides.

    Parameters
    ----------
    store : Optional[str], optional
        Backend override (json/sqlite).
    data : Optional[Path], optional
        Data file override.

    Returns
    -------
    TimekeepingConfig
        Effective settings.
    """
    config = load_config()
    if store:
        config = replace(config, store=store)
    if data is not None:
        config = replace(config, data_path=data)
    return config


def build_app():
    """
    Build the Typer app lazily to keep fast-path imports light.

    Returns
    -------
    typer.Typer
        Configured Typer application for the timekeeping CLI.
    """
    import typer

    from . import ledger, report
    from .store import open_store

    app = typer.Typer(help="A simple CLI for timekeeping", no_args_is_help=True)

    def version_callback(value: bool) -> None:
        if value:
            print(__version__)
            raise typer.Exit()

    @app.callback()
    def main_callback(
        ctx: typer.Context,
        version: bool = typer.Option(
            False,
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
        verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
        no_color: bool = typer.Option(False, "--no-color", help="Disable ANSI colors."),
        store: Optional[str] = typer.Option(
            None,
            "--store",
            help="Storage backend: json/sqlite.",
        ),
        data: Optional[Path] = typer.Option(
            None,
            "--data",
            help="Path to the time log data file.",
        ),
    ):
        configure_logging(verbose)
        if store is not None and store not in STORE_KINDS:
            print(f"timekeeping: unknown store {store!r} (use json or sqlite).", file=sys.stderr)
            raise typer.Exit(code=1)
        ctx.obj = {
            "config": resolve_config(store=store, data=data),
            "color": sys.stdout.isatty() and not no_color,
        }

    @app.command("help")
    def help_cmd():
        """
        Print a brief reminder of timekeeping commands.
        """
        for line in get_help_lines():
            print(line)

    @app.command("log")
    def log_cmd(
        ctx: typer.Context,
        hours: Optional[float] = typer.Option(
            None,
            "--hours",
            "-h",
            help="Number of hours to log.",
        ),
        project: Optional[str] = typer.Option(
            None,
            "--project",
            "-p",
            help="Project name (uses default_project from config if omitted).",
        ),
        date_text: Optional[str] = typer.Option(
            None,
            "--date",
            "-d",
            help="Date in MM.DD or YYYY.MM.DD format (default: today).",
        ),
    ):
        """
        Log hours to a project.
        """
        config = ctx.obj["config"]
        exit_code = ledger.run_log(
            open_store(config),
            project=project,
            hours=hours,
            date_text=date_text,
            config=config,
        )
        raise typer.Exit(code=exit_code)

    @app.command("report")
    def report_cmd(
        ctx: typer.Context,
        month: Optional[int] = typer.Option(
            None,
            "--month",
            "-m",
            help="Month number (1-12) to show the report for.",
        ),
        year: Optional[int] = typer.Option(
            None,
            "--year",
            "-y",
            help="Year to show the report for (default: current year).",
        ),
        complete: bool = typer.Option(
            False,
            "--complete",
            "-c",
            help="Show the complete history.",
        ),
    ):
        """
        Print the timekeeping report.
        """
        config = ctx.obj["config"]
        exit_code = report.run_report(
            open_store(config),
            month=month,
            year=year,
            complete=complete,
            config=config,
            color=ctx.obj["color"],
        )
        raise typer.Exit(code=exit_code)

    @app.command("summary")
    def summary_cmd(
        ctx: typer.Context,
        month: Optional[int] = typer.Option(
            None,
            "--month",
            "-m",
            help="Month number (1-12) to show the summary for.",
        ),
        year: Optional[int] = typer.Option(
            None,
            "--year",
            "-y",
            help="Year to show the summary for (default: current year).",
        ),
    ):
        """
        Print hours per day for a month, colored against the daily target.
        """
        config = ctx.obj["config"]
        exit_code = report.run_summary(
            open_store(config),
            month=month,
            year=year,
            config=config,
            color=ctx.obj["color"],
        )
        raise typer.Exit(code=exit_code)

    @app.command("import")
    def import_cmd(
        ctx: typer.Context,
        source: Path = typer.Argument(
            Path("timekeeping.json"),
            help="Local JSON time log to import.",
        ),
        deep: bool = typer.Option(
            False,
            "--deep",
            help="Merge per date instead of replacing whole projects.",
        ),
    ):
        """
        Import a local JSON time log into the configured store.
        """
        config = ctx.obj["config"]
        exit_code = ledger.run_import(open_store(config), source, deep=deep)
        raise typer.Exit(code=exit_code)

    return app


def main():
    """
    Entry point for the timekeeping command.
    """
    app = build_app()
    app()


if __name__ == "__main__":
    main()
