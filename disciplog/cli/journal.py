"""Journal commands for disciplog CLI.

Free-form daily notes, shown next to the trading results of the day.
"""

from datetime import date, datetime, timedelta
from typing import Optional

import click
from pydantic import ValidationError
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from disciplog.cli.common import (
    console,
    fail,
    format_pnl,
    get_data_store,
    get_user_id,
    resolve_id,
    short_id,
)


def _resolve_entry_id(store, user_id: str, prefix: str) -> str:
    ids = [e.id for e in store.get_journal_entries(user_id)]
    return resolve_id(prefix, ids, "journal entry")


def _parse_date(value: Optional[str]) -> date:
    if not value:
        return date.today()
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        fail(f"Invalid date '{value}'. Use YYYY-MM-DD.")


@click.group()
def journal() -> None:
    """Keep a trading journal.

    \b
    Examples:
      disciplog journal add "Chased the open" --content "Entered before my setup formed"
      disciplog journal list --days 30
      disciplog journal show 3fa2c1d0
    """
    pass


@journal.command("add")
@click.argument("title")
@click.option("-c", "--content", default="", help="Entry text.")
@click.option("-d", "--date", "entry_date", default=None, help="Entry date (YYYY-MM-DD). Default: today.")
@click.option("--image", "image_url", default=None, help="Link to a chart screenshot.")
def add_entry(title: str, content: str, entry_date: Optional[str], image_url: Optional[str]) -> None:
    """Add a journal entry."""
    from disciplog.validations import JournalInput

    day = _parse_date(entry_date)
    try:
        entry = JournalInput(title=title, content=content, image_url=image_url)
    except ValidationError as e:
        fail(escape(str(e)), title="Invalid entry")

    created = get_data_store().create_journal_entry(get_user_id(), day, entry)
    console.print(f"[green]✓ Journal entry {short_id(created.id)} saved for {day:%d %b %Y}[/green]")


@journal.command("list")
@click.option("--days", type=click.IntRange(min=1), default=None, help="Only entries from the last N days.")
def list_entries(days: Optional[int]) -> None:
    """List journal entries with the day's trading results."""
    from disciplog.analytics import journal_day_stats

    store = get_data_store()
    user_id = get_user_id()
    from_date = date.today() - timedelta(days=days) if days else None

    entries = store.get_journal_entries(user_id, from_date=from_date)
    if not entries:
        console.print("[dim]No journal entries. Add one with 'disciplog journal add'.[/dim]")
        return

    sessions = store.get_sessions(user_id, from_date=min(e.date for e in entries))
    trades = store.get_trades_for_sessions([s.id for s in sessions])
    day_stats = journal_day_stats(entries, sessions, trades)

    table = Table(title="Journal", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Date")
    table.add_column("Title", style="bold", max_width=40)
    table.add_column("Trades", justify="right")
    table.add_column("W/L", justify="right")
    table.add_column("P&L", justify="right")

    for e in entries:
        stats = day_stats.get(e.date)
        table.add_row(
            short_id(e.id),
            f"{e.date:%a %d %b %Y}",
            escape(e.title),
            str(stats.trade_count) if stats else "-",
            f"{stats.wins}/{stats.losses}" if stats else "-",
            format_pnl(stats.total_pnl) if stats else "-",
        )

    console.print(table)


@journal.command("show")
@click.argument("entry_id")
def show_entry(entry_id: str) -> None:
    """Show a journal entry."""
    store = get_data_store()
    user_id = get_user_id()
    entry = store.get_journal_entry(user_id, _resolve_entry_id(store, user_id, entry_id))

    body = escape(entry.content) or "[dim](no content)[/dim]"
    if entry.image_url:
        body += f"\n\n[dim]Image:[/dim] [link={entry.image_url}]{entry.image_url}[/link]"

    console.print(Panel(
        body,
        title=f"[bold]{escape(entry.title)}[/bold]",
        subtitle=f"{entry.date:%A, %d %B %Y}",
        border_style="cyan",
    ))


@journal.command("edit")
@click.argument("entry_id")
@click.option("-t", "--title", default=None, help="New title.")
@click.option("-c", "--content", default=None, help="New text.")
@click.option("--image", "image_url", default=None, help="New image link.")
def edit_entry(
    entry_id: str,
    title: Optional[str],
    content: Optional[str],
    image_url: Optional[str],
) -> None:
    """Edit a journal entry."""
    from disciplog.validations import JournalInput

    store = get_data_store()
    user_id = get_user_id()
    full_id = _resolve_entry_id(store, user_id, entry_id)
    current = store.get_journal_entry(user_id, full_id)

    try:
        entry = JournalInput(
            title=title if title is not None else current.title,
            content=content if content is not None else current.content,
            image_url=image_url if image_url is not None else current.image_url,
        )
    except ValidationError as e:
        fail(escape(str(e)), title="Invalid entry")

    updated = store.update_journal_entry(user_id, full_id, entry)
    console.print(f"[green]✓ Updated journal entry '{updated.title}'[/green]")


@journal.command("delete")
@click.argument("entry_id")
@click.option("-y", "--yes", is_flag=True, default=False, help="Skip confirmation.")
def delete_entry(entry_id: str, yes: bool) -> None:
    """Delete a journal entry."""
    store = get_data_store()
    user_id = get_user_id()
    full_id = _resolve_entry_id(store, user_id, entry_id)
    current = store.get_journal_entry(user_id, full_id)

    if not yes and not click.confirm(f"Delete journal entry '{current.title}'?"):
        console.print("[dim]Cancelled[/dim]")
        return

    store.delete_journal_entry(user_id, full_id)
    console.print(f"[green]✓ Deleted journal entry '{current.title}'[/green]")
