#!/usr/bin/env python3
"""
Strategic Radar - command line entry point.

Runs scans, browses the archived sessions and the consolidated base, flips
user flags and exports.

Usage:
    python -m radar.main scan
    python -m radar.main sessions
    python -m radar.main master --hide-past
    python -m radar.main mark-global 3
    python -m radar.main export
"""

import sys

import click
from loguru import logger
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from radar.calendar_link import build_calendar_link
from radar.config import settings
from radar.deduplication import consolidate, session_view, set_flag_global
from radar.errors import RadarError
from radar.export import write_csv
from radar.history import delete_session, find_session, set_flag_at, sorted_by_id
from radar.models import CATEGORY_LABELS, CRITICALITY_LABELS, Category, Criticality, Record, UserFlag
from radar.scanner import AnthropicGenerator, run_scan
from radar.store import SessionStore, build_kv_store

console = Console()

CRITICALITY_STYLES = {
    Criticality.HIGH: "bold red",
    Criticality.MEDIUM: "yellow",
    Criticality.LOW: "blue",
}

FLAG_CHOICE = click.Choice([f.value for f in UserFlag])
CATEGORY_CHOICE = click.Choice([c.value for c in Category])


def _store() -> SessionStore:
    return SessionStore(build_kv_store())


def _state(record: Record) -> str:
    parts = []
    if record.read:
        parts.append("[dim]LU[/dim]")
    if record.added:
        parts.append("[green]AGENDA[/green]")
    return " ".join(parts) or "[bold]A TRAITER[/bold]"


def _print_records(records: list[Record], title: str) -> None:
    if not records:
        console.print("[yellow]No items.[/yellow]")
        return

    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Catégorie")
    table.add_column("Criticité")
    table.add_column("Titre")
    table.add_column("Date")
    table.add_column("Source")
    table.add_column("Etat")

    for index, record in enumerate(records):
        style = CRITICALITY_STYLES[record.criticality]
        table.add_row(
            str(index),
            CATEGORY_LABELS[record.category],
            f"[{style}]{CRITICALITY_LABELS[record.criticality]}[/{style}]",
            record.headline,
            record.date,
            record.source,
            _state(record),
        )

    console.print(table)


def _master(hide_past: bool, high_only: bool, category: str | None) -> list[Record]:
    return consolidate(
        _store().load(),
        hide_past=hide_past,
        only_high_priority=high_only,
        category=category,
    )


def _master_options(func):
    func = click.option("--category", type=CATEGORY_CHOICE, default=None, help="Keep one category")(func)
    func = click.option("--high-only", is_flag=True, help="HIGH criticality only")(func)
    func = click.option("--hide-past", is_flag=True, help="Hide items dated before yesterday")(func)
    return func


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Also log to this file")
def cli(debug, log_file):
    """Strategic Radar"""
    if debug or log_file:
        from radar.utils.logging import setup_logging
        setup_logging(level="DEBUG" if debug else None, log_file=log_file)


@cli.command()
def scan():
    """Run a scan and archive its items as a new session."""
    console.print("\n[bold blue]Strategic Radar - Scan[/bold blue]")

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Analyse en cours...", total=None)
        try:
            session = run_scan(_store(), AnthropicGenerator())
        except RadarError as e:
            progress.update(task, description="[red]✗ Scan failed[/red]")
            console.print(f"[red]Error: {e}[/red]")
            logger.exception("Scan failed")
            sys.exit(1)
        progress.update(task, description=f"[green]✓ {len(session.items)} signaux identifiés[/green]")

    _print_records(session_view(session), f"Session {session.id} - {session.date_str}")


@cli.command()
def sessions():
    """List archived sessions, newest first."""
    history = sorted_by_id(_store().load(), newest_first=True)
    if not history:
        console.print("[yellow]No sessions archived yet.[/yellow]")
        return

    table = Table(title="Archives")
    table.add_column("ID")
    table.add_column("Date")
    table.add_column("Signaux", justify="right")
    table.add_column("Lus", justify="right")

    for session in history:
        table.add_row(
            str(session.id),
            session.date_str,
            str(len(session.items)),
            str(sum(1 for item in session.items if item.read)),
        )

    console.print(table)


@cli.command()
@click.argument("session_id", type=int)
def show(session_id: int):
    """Show the items of one session."""
    session = find_session(_store().load(), session_id)
    if session is None:
        console.print(f"[red]Session {session_id} not found[/red]")
        sys.exit(1)
    _print_records(session_view(session), f"Session {session.id} - {session.date_str}")


@cli.command()
@_master_options
def master(hide_past: bool, high_only: bool, category: str | None):
    """Show the consolidated base (deduplicated, sorted by date)."""
    records = _master(hide_past, high_only, category)
    _print_records(records, f"Intelligence Base ({len(records)} items)")


@cli.command()
@click.argument("session_id", type=int)
@click.argument("index", type=int)
@click.option("--unread", is_flag=True, help="Clear the flag instead of setting it")
@click.option("--flag", type=FLAG_CHOICE, default=UserFlag.READ.value, show_default=True)
def mark(session_id: int, index: int, unread: bool, flag: str):
    """Set a flag on item INDEX of one session."""
    store = _store()
    store.update(lambda history: set_flag_at(history, session_id, index, not unread, UserFlag(flag)))
    console.print(f"[green]Session {session_id} item {index}: {flag}={not unread}[/green]")


@cli.command("mark-global")
@click.argument("index", type=int)
@click.option("--unread", is_flag=True, help="Clear the flag instead of setting it")
@click.option("--flag", type=FLAG_CHOICE, default=UserFlag.READ.value, show_default=True)
@_master_options
def mark_global(index: int, unread: bool, flag: str, hide_past: bool, high_only: bool, category: str | None):
    """Set a flag on item INDEX of the consolidated base, in every session."""
    records = _master(hide_past, high_only, category)
    if not 0 <= index < len(records):
        console.print(f"[red]No item {index} in the base ({len(records)} items)[/red]")
        sys.exit(1)

    store = _store()
    touched: list[int] = []

    def change(history):
        updated, ids = set_flag_global(history, records[index], not unread, UserFlag(flag))
        touched.extend(ids)
        return updated

    store.update(change)
    console.print(f"[green]{records[index].headline}: {flag}={not unread} in {len(touched)} sessions[/green]")


@cli.command()
@click.argument("session_id", type=int)
def delete(session_id: int):
    """Delete one archived session."""
    _store().update(lambda history: delete_session(history, session_id))
    console.print(f"[green]Session {session_id} deleted[/green]")


@cli.command()
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
def clear(yes: bool):
    """Delete the whole history."""
    if not yes and not click.confirm("Tout effacer ?"):
        return
    _store().clear()
    console.print("[green]History cleared[/green]")


@cli.command()
@click.option("--session", "session_id", type=int, default=None, help="Export one session instead of the base")
@click.option("--out", "out_dir", type=click.Path(file_okay=False), default=None, help="Output directory")
@_master_options
def export(session_id: int | None, out_dir: str | None, hide_past: bool, high_only: bool, category: str | None):
    """Export the consolidated base (or one session) as CSV."""
    out_dir = out_dir or settings.radar.export_dir

    if session_id is not None:
        session = find_session(_store().load(), session_id)
        if session is None:
            console.print(f"[red]Session {session_id} not found[/red]")
            sys.exit(1)
        path = write_csv(session_view(session), out_dir, settings.radar.export_prefix)
    else:
        path = write_csv(_master(hide_past, high_only, category), out_dir, settings.radar.master_export_prefix)

    if path is None:
        console.print("[yellow]Nothing to export[/yellow]")
    else:
        console.print(f"[green]Exported to {path}[/green]")


@cli.command()
@click.argument("session_id", type=int)
@click.argument("index", type=int)
@click.option("--mark-added", is_flag=True, help="Also flag the item as added to the calendar")
def link(session_id: int, index: int, mark_added: bool):
    """Print the calendar link of item INDEX of one session."""
    store = _store()
    session = find_session(store.load(), session_id)
    if session is None or not 0 <= index < len(session.items):
        console.print(f"[red]No item {index} in session {session_id}[/red]")
        sys.exit(1)

    record = session.items[index]
    console.print(build_calendar_link(record), soft_wrap=True)

    if mark_added:
        store.update(lambda history: set_flag_global(history, record, True, UserFlag.ADDED)[0])
        console.print("[green]Marked as added[/green]")


if __name__ == "__main__":
    cli()
