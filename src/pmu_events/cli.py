"""Command-line interface for pmu-events"""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import EventsConfig, load_config
from .exceptions import PmuEventsError
from .logging_config import setup_logging
from .source import json_default_name
from .translator import read_events

app = typer.Typer(
    name="pmu-events",
    help="pmu-events - perf event strings from JSON PMU event lists",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()

_FORMATS = ("rich", "json", "plain")


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"pmu-events {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """Translate JSON PMU event lists into perf event strings."""


def _resolve_config(
    config: Optional[Path], verbose: bool = False, quiet: bool = False
) -> EventsConfig:
    try:
        return load_config(config_file=config, verbose=verbose, quiet=quiet)
    except PmuEventsError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(1)


@app.command("list")
def list_events(
    file: Optional[Path] = typer.Argument(
        None,
        help="Event file to read (default: the file for this CPU)",
        dir_okay=False,
    ),
    fmt: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich (default), json, plain",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file path (TOML format)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG) logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress all but ERROR logging",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also append log records to this file",
        dir_okay=False,
    ),
):
    """List the events of an event file in perf syntax."""
    if fmt not in _FORMATS:
        console.print(f"[red]Error:[/red] unknown format '{escape(fmt)}' (use {', '.join(_FORMATS)})")
        raise typer.Exit(2)

    settings = _resolve_config(config, verbose=verbose, quiet=quiet)
    setup_logging(settings.verbosity, log_file=str(log_file) if log_file else None)

    try:
        events = read_events(file, config=settings)
    except PmuEventsError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(1)

    if fmt == "json":
        typer.echo(json.dumps([ev._asdict() for ev in events], indent=2))
        return

    if fmt == "plain":
        for ev in events:
            if ev.desc:
                typer.echo(f"# {ev.desc}")
            typer.echo(f"{ev.name} {ev.event}")
        return

    table = Table(title=f"{len(events)} events", show_lines=False)
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Event", style="green")
    table.add_column("Description")
    for ev in events:
        table.add_row(escape(ev.name), escape(ev.event), escape(ev.desc))
    console.print(table)


@app.command()
def path(
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file path (TOML format)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
):
    """Show the event file used when none is given."""
    settings = _resolve_config(config)
    resolved = json_default_name(settings)
    if resolved is None:
        console.print("[yellow]No default event file (set EVENTMAP or XDG_CACHE_HOME)[/yellow]")
        raise typer.Exit(1)
    typer.echo(resolved)


def run() -> None:
    """Console-script entry point."""
    app()
